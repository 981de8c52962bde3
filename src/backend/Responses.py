from abc import ABC
from typing import List

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend.utils import SerializableBaseModel
from response_models import ResponseUser


class BaseResponse(SerializableBaseModel, ABC):
    message: str = Field(..., description="Response message")


class ErrorResponse(BaseResponse, ABC):
    message: str = Field(..., description="Error message")


class JsonResponseWithStatus(JSONResponse):
    def __init__(self, content: BaseModel, status_code: int):
        self.content = content
        self.status_code = status_code
        # Convert the Pydantic model to a dict
        super().__init__(content=jsonable_encoder(content), status_code=status_code)

    def dict(self) -> dict:
        """Convert the response content to a dictionary."""
        return {
            "status_code": self.status_code,
            "content": jsonable_encoder(self.content),
        }


# Request validation (all endpoints)
class ValidationErrorItem(SerializableBaseModel):
    loc: List[str] = Field(..., description="Location of the invalid field")
    msg: str = Field(..., description="What is wrong with the field")


class InvalidRequestPayload(ErrorResponse):
    message: str = Field(default="Invalid request payload!")
    errors: List[ValidationErrorItem] = Field(
        default_factory=list, description="Individual validation failures"
    )


class TooManyRequests(ErrorResponse):
    message: str = Field(default="Too many requests! Please try again later.")


# /api/analytics (POST)
class TrackEventPostResponse(BaseResponse):
    message: str = Field(default="Analytics event tracked successfully")


class AdminActivityNotTracked(BaseResponse):
    message: str = Field(default="Admin activity not tracked")


class TrackEventError(ErrorResponse):
    message: str = Field(default="Server failed to track the analytics event.")


# /api/analytics (GET)
class GetAnalyticsError(ErrorResponse):
    message: str = Field(default="Server failed to retrieve analytics.")


class AuthenticationRequired(ErrorResponse):
    message: str = Field(default="Authentication required")


class InvalidOrExpiredAuthToken(ErrorResponse):
    message: str = Field(
        default="Authentication token not found! You are not authenticated or your token has expired. "
        "Login before you can perform this action."
    )


class AdminPrivilegesRequired(ErrorResponse):
    message: str = Field(default="Admin privileges required")


class ResolveAuthTokenError(ErrorResponse):
    message: str = Field(default="Server failed to verify the authentication token.")


# /api/user/authenticate
class AuthenticateUserPostResponse(BaseResponse):
    message: str = Field(default="User authenticated successfully.")
    token: str = Field(..., description="Bearer token for the Authorization header")
    user: ResponseUser = Field(..., description="User details")


class InvalidEmailOrPassword(ErrorResponse):
    message: str = Field(default="Invalid email or password!")


class AuthenticateUserError(ErrorResponse):
    message: str = Field(default="Server failed to authenticate the user!")
