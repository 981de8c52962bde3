import logging

from fastapi import APIRouter, Depends

import Queries
from App import App
from backend.Responses import (
    AdminActivityNotTracked,
    InvalidRequestPayload,
    JsonResponseWithStatus,
    TooManyRequests,
    TrackEventError,
    TrackEventPostResponse,
)
from database import crud

router = APIRouter()


@router.post(
    "",
    response_model=TrackEventPostResponse,
    status_code=201,
    responses={
        "200": {"model": AdminActivityNotTracked},
        "201": {"model": TrackEventPostResponse},
        "400": {"model": InvalidRequestPayload},
        "429": {"model": TooManyRequests},
        "500": {"model": TrackEventError},
    },
)
def track_event(
    event: Queries.TrackEvent,
    app: App = Depends(App.get_instance),
) -> JsonResponseWithStatus:
    """
    Record one visitor event. This endpoint is public.

    Steps:
    1. Resolve the optional userId to decide whether the caller is an admin.
    2. Acknowledge admin activity without storing it.
    3. Otherwise insert exactly one event row.

    Args:
        event: Event draft provided in the request body.
        app: FastAPI dependency to access the app context.

    Returns:
        JsonResponseWithStatus: 201 when stored, 200 when admin activity is
        skipped, 500 when the store fails.
    """
    db_session = app.get_db_session()

    try:
        # The admin flag is computed here, never taken from the request body
        if event.userId and crud.is_admin_user(db_session, event.userId):
            return JsonResponseWithStatus(
                status_code=200,
                content=AdminActivityNotTracked(),
            )

        crud.create_event(db_session, event, is_admin=False)
        return JsonResponseWithStatus(
            status_code=201,
            content=TrackEventPostResponse(),
        )

    except Exception as e:
        logging.error(f"Error tracking analytics event: {str(e)}")
        db_session.rollback()
        return JsonResponseWithStatus(
            status_code=500,
            content=TrackEventError(),
        )
    finally:
        db_session.close()
