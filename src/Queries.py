from abc import ABC
from enum import Enum
from typing import Optional, Union
from uuid import UUID

from pydantic import (
    ConfigDict,
    EmailStr,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

from backend.utils import Fakable, SerializableBaseModel


class EventType(Enum):
    page_view = "pageView"
    contact_submission = "contactSubmission"
    resume_download = "resumeDownload"
    project_view = "projectView"
    skill_view = "skillView"


class QueryBase(SerializableBaseModel, Fakable, ABC):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class EventMetadataBase(SerializableBaseModel, ABC):
    model_config = ConfigDict(extra="forbid")


class EmptyMetadata(EventMetadataBase):
    pass


class ProjectViewMetadata(EventMetadataBase):
    projectId: UUID = Field(..., description="Id of the viewed project")


class SkillViewMetadata(EventMetadataBase):
    skillId: UUID = Field(..., description="Id of the viewed skill")


EventMetadata = Union[ProjectViewMetadata, SkillViewMetadata, EmptyMetadata]

# Metadata variant carried by each event type; unlisted types carry none
METADATA_BY_EVENT_TYPE = {
    EventType.project_view: ProjectViewMetadata,
    EventType.skill_view: SkillViewMetadata,
}


def metadata_type_for(event_type: EventType) -> type:
    return METADATA_BY_EVENT_TYPE.get(event_type, EmptyMetadata)


class TrackEvent(QueryBase):
    """
    Event draft submitted by the public tracker.

    ``isAdmin`` and ``createdAt`` are absent: both are computed
    by the server, and any value sent by the client is ignored.
    """

    type: EventType = Field(..., description="Kind of visitor action")
    visitorId: str = Field(
        ..., description="Browser-persisted visitor identifier", min_length=1
    )
    userId: Optional[str] = Field(
        None, description="Account id of a logged-in visitor (optional)"
    )
    ip: str = Field(..., description="Client IP address", min_length=1)
    userAgent: str = Field(..., description="Client user agent", min_length=1)
    referrer: Optional[str] = Field(None, description="Document referrer")
    path: str = Field(..., description="Path the action happened on", min_length=1)
    country: str = Field("Unknown", description="Visitor country", min_length=1)
    city: str = Field("Unknown", description="Visitor city", min_length=1)
    timeSpent: int = Field(0, description="Seconds spent on the page", ge=0)
    metadata: EventMetadata = Field(
        default_factory=EmptyMetadata,
        description="Type-specific payload (projectId or skillId)",
    )

    @model_validator(mode="before")
    @classmethod
    def drop_null_metadata(cls, data):
        if isinstance(data, dict) and "metadata" in data and data["metadata"] is None:
            data = {key: value for key, value in data.items() if key != "metadata"}
        return data

    @model_validator(mode="after")
    def check_metadata_matches_type(self) -> "TrackEvent":
        """The metadata variant must be the one selected by ``type``."""
        expected = metadata_type_for(self.type)
        if not isinstance(self.metadata, expected):
            raise ValueError(
                f"metadata for '{self.type.value}' events must be {expected.__name__}"
            )
        return self


class AuthenticateUser(QueryBase):
    email: EmailStr = Field(..., description="User's email address")
    password: SecretStr = Field(..., description="User's password")


class CreateUser(QueryBase):
    email: EmailStr = Field(..., description="User's email address")
    name: str = Field(..., description="User's full name", min_length=3, max_length=50)
    password: SecretStr = Field(..., description="User's password (will be hashed)")
    is_admin: bool = Field(False, description="Whether the user is an administrator")

    @field_validator("password")
    @classmethod
    def check_password_length(cls, password: SecretStr) -> SecretStr:
        if not 8 <= len(password.get_secret_value()) <= 50:
            raise ValueError("password must be between 8 and 50 characters")
        return password


class CreateProject(QueryBase):
    title: str = Field(..., description="Project title", min_length=1, max_length=100)
    description: str = Field("", description="Project description")
    display_order: int = Field(0, description="Position in the project list", ge=0)


class CreateSkill(QueryBase):
    name: str = Field(..., description="Skill name", min_length=1, max_length=50)
    level: int = Field(1, description="Skill level", ge=1, le=10)
    display_order: int = Field(0, description="Position in the skill list", ge=0)
