import logging

from fastapi import APIRouter, Depends

import database.crud as crud
from App import App
from backend.redis_manager import RedisManager
from backend.Responses import (
    AuthenticateUserError,
    AuthenticateUserPostResponse,
    InvalidEmailOrPassword,
    InvalidRequestPayload,
    JsonResponseWithStatus,
    TooManyRequests,
)
from Queries import AuthenticateUser
from response_models import ResponseUser
from utils import create_uuid

# Initialize the FastAPI router for authentication endpoints
router = APIRouter()


def acquire_auth_token(user_id: str, redis_manager: RedisManager) -> str:
    """
    Generate a bearer token for the user and store it in Redis.

    Args:
        user_id (str): ID of the user.
        redis_manager (RedisManager): Redis manager to write the token.

    Returns:
        str: The bearer token.
    """
    auth_token = create_uuid()
    redis_manager.set(
        "auth_token",
        auth_token,
        {"user_id": user_id},
    )
    return auth_token


@router.post(
    "",
    response_model=AuthenticateUserPostResponse,
    responses={
        "200": {"model": AuthenticateUserPostResponse},
        "400": {"model": InvalidRequestPayload},
        "401": {"model": InvalidEmailOrPassword},
        "429": {"model": TooManyRequests},
        "500": {"model": AuthenticateUserError},
    },
    tags=["Authentication"],
)
def authenticate_user(
    user_to_authenticate: AuthenticateUser,
    app: App = Depends(App.get_instance),
) -> JsonResponseWithStatus:
    """
    Authenticate a user with email and password and issue a bearer token.

    The token is sent back in the body; clients pass it as
    ``Authorization: Bearer <token>`` on admin endpoints.
    """
    db_session = app.get_db_session()
    redis_manager = app.get_redis_manager()

    try:
        found_user = crud.get_user_by_email_password(
            db_session,
            str(user_to_authenticate.email),
            user_to_authenticate.password.get_secret_value(),
        )
        if not found_user:
            return JsonResponseWithStatus(
                status_code=401,
                content=InvalidEmailOrPassword(),
            )

        auth_token = acquire_auth_token(str(found_user.user_id), redis_manager)
        logging.info(f"User {found_user.user_id} authenticated")

        return JsonResponseWithStatus(
            status_code=200,
            content=AuthenticateUserPostResponse(
                token=auth_token,
                user=ResponseUser.model_validate(found_user),
            ),
        )

    except Exception as e:
        logging.error(f"Error processing user authentication request: {str(e)}")
        db_session.rollback()
        return JsonResponseWithStatus(
            status_code=500,
            content=AuthenticateUserError(),
        )
    finally:
        db_session.close()
