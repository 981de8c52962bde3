from fastapi import APIRouter

from .authenticate import router as authenticate_router

# Initialize the main API router
router = APIRouter()

router.include_router(authenticate_router, prefix="/authenticate")
