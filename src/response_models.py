"""
Response schemas for the analytics dashboard and the authentication
collaborator. Field names follow the JSON wire format consumed by the
dashboard.
"""

from abc import ABC
from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import ConfigDict, EmailStr, Field

from backend.utils import Fakable, SerializableBaseModel


class ResponseBase(SerializableBaseModel, Fakable, ABC):
    """Base class for all response models, combining serializability and fakability."""

    pass


class ResponseUser(ResponseBase):
    """Public view of an account; the password hash is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID = Field(..., description="Unique ID for the user")
    email: EmailStr = Field(..., description="User's email address")
    name: str = Field(..., description="User's full name")
    is_admin: bool = Field(..., description="Whether the user is an administrator")
    joined_at: datetime = Field(..., description="Timestamp when the user joined")


class LocationCount(ResponseBase):
    country: str = Field(..., description="Visitor country")
    count: int = Field(..., description="Number of events from this country", ge=0)


class ProjectViews(ResponseBase):
    title: str = Field(..., description="Current title of the project")
    views: int = Field(..., description="Number of project views", ge=0)


class SkillViews(ResponseBase):
    name: str = Field(..., description="Current name of the skill")
    views: int = Field(..., description="Number of skill views", ge=0)


class TimeSpentStats(ResponseBase):
    average: float = Field(0, description="Average seconds per timed page view", ge=0)
    total: int = Field(0, description="Total seconds over timed page views", ge=0)


class AnalyticsSummary(ResponseBase):
    """Aggregated visitor statistics for one time range window."""

    uniqueVisitors: int = Field(..., description="Distinct visitor ids", ge=0)
    pageViews: int = Field(..., description="Public page views", ge=0)
    contactSubmissions: int = Field(..., description="Contact form submissions", ge=0)
    resumeDownloads: int = Field(..., description="Resume downloads", ge=0)
    topLocations: List[LocationCount] = Field(
        default_factory=list, description="Countries with the most events"
    )
    topProjects: List[ProjectViews] = Field(
        default_factory=list, description="Most viewed existing projects"
    )
    topSkills: List[SkillViews] = Field(
        default_factory=list, description="Most viewed existing skills"
    )
    timeSpent: TimeSpentStats = Field(
        default_factory=TimeSpentStats, description="Time spent on public pages"
    )
