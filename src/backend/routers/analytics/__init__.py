"""
Analytics router module.

- POST /analytics: public ingestion of visitor events
- GET /analytics: admin-only aggregated statistics for a time window
"""

from fastapi import APIRouter

from . import summary, track

router = APIRouter()

router.include_router(track.router, prefix="/analytics")
router.include_router(summary.router, prefix="/analytics")
