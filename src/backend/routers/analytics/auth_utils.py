"""
Authentication and authorization utilities for analytics endpoints.

Provides common functionality for:
- Resolving a bearer token to an account
- User authentication verification
- Admin privilege checking
"""

import logging
import uuid
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

import database.crud as crud
from App import App
from backend.Responses import (
    AdminPrivilegesRequired,
    AuthenticationRequired,
    InvalidOrExpiredAuthToken,
    ResolveAuthTokenError,
)
from utils import is_valid_uuid

bearer_scheme = HTTPBearer(auto_error=False)


class AuthenticatedUser:
    """Container for authenticated user information."""

    def __init__(self, user_id: uuid.UUID, is_admin: bool, email: str, name: str):
        self.user_id = user_id
        self.is_admin = is_admin
        self.email = email
        self.name = name


def resolve_bearer_token(app: App, token: str) -> Optional[AuthenticatedUser]:
    """
    Resolve a bearer token to the account it was issued for.

    Args:
        app: Application instance with DB and Redis access
        token: Opaque token issued by /api/user/authenticate

    Returns:
        AuthenticatedUser, or None if the token or its account does not exist
    """
    auth_info = app.get_redis_manager().get("auth_token", token)
    if not auth_info or not is_valid_uuid(auth_info.get("user_id")):
        return None

    db_session = app.get_db_session()
    try:
        user = crud.get_user_by_id(db_session, uuid.UUID(auth_info["user_id"]))
        if not user:
            return None
        return AuthenticatedUser(
            user_id=user.user_id,
            is_admin=bool(user.is_admin),
            email=user.email,
            name=user.name,
        )
    finally:
        db_session.close()


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    app: App = Depends(App.get_instance),
) -> AuthenticatedUser:
    """
    Get current authenticated user from the Authorization header.

    Raises:
        HTTPException: 401 if the credential is missing or invalid, 500 if the
            token store or database cannot be queried
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail=AuthenticationRequired().message)

    try:
        current_user = resolve_bearer_token(app, credentials.credentials)
    except Exception as e:
        logging.error(f"Error resolving bearer token: {e}")
        raise HTTPException(status_code=500, detail=ResolveAuthTokenError().message)

    if current_user is None:
        raise HTTPException(status_code=401, detail=InvalidOrExpiredAuthToken().message)
    return current_user


def require_admin(current_user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    """
    Require admin privileges for endpoint access.

    Raises:
        HTTPException: 403 if the user is not an admin
    """
    if not current_user.is_admin:
        logging.warning(f"Non-admin user {current_user.user_id} requested analytics")
        raise HTTPException(status_code=403, detail=AdminPrivilegesRequired().message)

    return current_user
