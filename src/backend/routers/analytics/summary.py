import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from App import App
from backend.analytics import AggregationError, resolve_time_range
from backend.Responses import (
    AdminPrivilegesRequired,
    AuthenticationRequired,
    GetAnalyticsError,
    JsonResponseWithStatus,
)
from response_models import AnalyticsSummary

from .auth_utils import AuthenticatedUser, require_admin

router = APIRouter()


@router.get(
    "",
    response_model=AnalyticsSummary,
    responses={
        "200": {"model": AnalyticsSummary},
        "401": {"model": AuthenticationRequired},
        "403": {"model": AdminPrivilegesRequired},
        "500": {"model": GetAnalyticsError},
    },
)
def get_analytics(
    timeRange: Optional[str] = Query(
        None, description="Time window: day, week, month or year (default week)"
    ),
    current_user: AuthenticatedUser = Depends(require_admin),
    app: App = Depends(App.get_instance),
) -> JsonResponseWithStatus:
    """
    Get the dashboard summary for the requested time window.

    Unknown time ranges fall back to the last 7 days.
    """
    try:
        window = resolve_time_range(timeRange, datetime.now(timezone.utc))
        summary = app.get_analytics_aggregator().aggregate(window)
        return JsonResponseWithStatus(status_code=200, content=summary)

    except AggregationError as e:
        logging.error(f"Analytics aggregation failed on facet {e.facet}: {e.cause}")
        return JsonResponseWithStatus(status_code=500, content=GetAnalyticsError())
    except Exception as e:
        logging.error(f"Error retrieving analytics: {str(e)}")
        return JsonResponseWithStatus(status_code=500, content=GetAnalyticsError())
