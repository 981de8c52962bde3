from fastapi import APIRouter

# Import sub-routers for different parts of the application
from .analytics import router as analytics_router
from .user import router as user_router

# Main API router to aggregate and expose sub-routes
router = APIRouter()

# Include user-related endpoints
router.include_router(user_router, prefix="/user", tags=["User"])

# Include analytics ingestion and dashboard endpoints
router.include_router(analytics_router, tags=["Analytics"])


@router.api_route("/ping", methods=["HEAD"])
def ping():
    """
    Lightweight health check endpoint.

    Returns:
        dict: A simple response indicating the service is available.
    """
    return {"Status": "Ok"}
