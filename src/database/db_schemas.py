"""
SQLAlchemy ORM models for the portfolio analytics database schema.

This module defines the tables used by the analytics service:
- User accounts (used for admin suppression and the access gate)
- Project and Skill catalogs (joined by the top-N ranking facets)
- The append-only analytics event store

Column types are dialect-neutral so the same models run on PostgreSQL in
production and on SQLite in the test suite.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)

from .db import Base


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    Account information and authentication data.

    Administrators manage the portfolio content; their own browsing is never
    recorded as visitor traffic.
    """

    __tablename__ = "user"
    __table_args__ = (
        # Index on email for fast login lookups
        Index("idx_user_email", "email"),
    )

    user_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    email = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    password = Column(String, nullable=False)  # argon2 hash
    is_admin = Column(Boolean, server_default="false", default=False, nullable=False)


class Project(Base):
    """
    Portfolio project shown on the public site.

    Only ``title`` is read by the analytics engine; the catalog itself is
    maintained elsewhere.
    """

    __tablename__ = "project"
    __table_args__ = (Index("idx_project_display_order", "display_order"),)

    project_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, server_default="true", default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)


class Skill(Base):
    """Portfolio skill entry; ``name`` is joined into the top skills facet."""

    __tablename__ = "skill"
    __table_args__ = (
        CheckConstraint("level BETWEEN 1 AND 10", name="ck_skill_level_range"),
        Index("idx_skill_display_order", "display_order"),
    )

    skill_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    level = Column(Integer, nullable=False, default=1)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, server_default="true", default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)


class AnalyticsEvent(Base):
    """
    One immutable visitor action.

    Rows are inserted once by the ingestion endpoint and never updated or
    deleted. ``created_at`` is assigned by the server and is the only column
    used for time windowing. ``user_id`` is an opaque reference without a
    foreign key so unknown accounts never block ingestion.
    """

    __tablename__ = "analytics_event"
    __table_args__ = (
        CheckConstraint("time_spent >= 0", name="ck_analytics_event_time_spent"),
        Index("idx_analytics_event_type_created_at", "type", "created_at"),
        Index("idx_analytics_event_visitor_created_at", "visitor_id", "created_at"),
        Index("idx_analytics_event_country_created_at", "country", "created_at"),
        Index("idx_analytics_event_path_created_at", "path", "created_at"),
    )

    event_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    type = Column(String, nullable=False)
    visitor_id = Column(String, nullable=False)
    user_id = Column(String, nullable=True)
    is_admin = Column(Boolean, server_default="false", default=False, nullable=False)
    ip = Column(String, nullable=False)
    country = Column(String, nullable=False, default="Unknown")
    city = Column(String, nullable=False, default="Unknown")
    user_agent = Column(Text, nullable=False)
    referrer = Column(Text, nullable=True)
    path = Column(Text, nullable=False)
    time_spent = Column(Integer, nullable=False, default=0)
    # "metadata" is reserved by the declarative base
    meta_data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
