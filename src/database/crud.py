import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

import Queries as Queries
from database import db_schemas
from utils import hash_password, is_valid_uuid, verify_password


# User
def create_user(db: Session, user: Queries.CreateUser) -> db_schemas.User:
    db_user = db_schemas.User(
        user_id=uuid.uuid4(),
        email=str(user.email),
        name=user.name,
        password=hash_password(user.password.get_secret_value()),
        is_admin=user.is_admin,
    )

    db.add(db_user)
    db.commit()
    return db_user


def get_user_by_id(db: Session, user_id: uuid.UUID) -> Optional[db_schemas.User]:
    return db.query(db_schemas.User).filter(db_schemas.User.user_id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[db_schemas.User]:
    return db.query(db_schemas.User).filter(db_schemas.User.email == email).first()


def get_user_by_email_password(
    db: Session, email: str, password: str
) -> Optional[db_schemas.User]:
    user = get_user_by_email(db, email)
    if user and verify_password(str(user.password), password):
        return user
    return None


def is_admin_user(db: Session, user_id: Optional[str]) -> bool:
    """
    Resolve an opaque account reference to its admin flag.

    Malformed or unknown references are not admins.
    """
    if not is_valid_uuid(user_id):
        return False
    user = get_user_by_id(db, uuid.UUID(user_id))
    return bool(user and user.is_admin)


# Catalogs
def create_project(db: Session, project: Queries.CreateProject) -> db_schemas.Project:
    db_project = db_schemas.Project(
        project_id=uuid.uuid4(),
        title=project.title,
        description=project.description,
        display_order=project.display_order,
    )
    db.add(db_project)
    db.commit()
    return db_project


def create_skill(db: Session, skill: Queries.CreateSkill) -> db_schemas.Skill:
    db_skill = db_schemas.Skill(
        skill_id=uuid.uuid4(),
        name=skill.name,
        level=skill.level,
        display_order=skill.display_order,
    )
    db.add(db_skill)
    db.commit()
    return db_skill


def _parse_uuids(ids: Iterable[str]) -> List[uuid.UUID]:
    parsed = []
    for raw_id in ids:
        try:
            parsed.append(uuid.UUID(str(raw_id)))
        except ValueError:
            continue
    return parsed


def get_project_titles(db: Session, project_ids: Iterable[str]) -> Dict[str, str]:
    """Map each existing project id (as str) to its current title."""
    parsed_ids = _parse_uuids(project_ids)
    if not parsed_ids:
        return {}
    rows = (
        db.query(db_schemas.Project.project_id, db_schemas.Project.title)
        .filter(db_schemas.Project.project_id.in_(parsed_ids))
        .all()
    )
    return {str(project_id): title for project_id, title in rows}


def get_skill_names(db: Session, skill_ids: Iterable[str]) -> Dict[str, str]:
    """Map each existing skill id (as str) to its current name."""
    parsed_ids = _parse_uuids(skill_ids)
    if not parsed_ids:
        return {}
    rows = (
        db.query(db_schemas.Skill.skill_id, db_schemas.Skill.name)
        .filter(db_schemas.Skill.skill_id.in_(parsed_ids))
        .all()
    )
    return {str(skill_id): name for skill_id, name in rows}


# Analytics events
def create_event(
    db: Session, event: Queries.TrackEvent, is_admin: bool = False
) -> db_schemas.AnalyticsEvent:
    db_event = db_schemas.AnalyticsEvent(
        event_id=uuid.uuid4(),
        type=event.type.value,
        visitor_id=event.visitorId,
        user_id=event.userId,
        is_admin=is_admin,
        ip=event.ip,
        country=event.country,
        city=event.city,
        user_agent=event.userAgent,
        referrer=event.referrer,
        path=event.path,
        time_spent=event.timeSpent,
        meta_data=event.metadata.model_dump(mode="json"),
        # created_at is assigned by the column default
    )
    db.add(db_event)
    db.commit()
    return db_event


def _visitor_events(db: Session, *columns, since: datetime):
    """Events inside the window that were not produced by an administrator."""
    return db.query(*columns).filter(
        db_schemas.AnalyticsEvent.created_at >= since,
        db_schemas.AnalyticsEvent.is_admin.is_not(True),
    )


def count_unique_visitors(db: Session, since: datetime) -> int:
    return (
        _visitor_events(
            db, func.count(distinct(db_schemas.AnalyticsEvent.visitor_id)), since=since
        ).scalar()
        or 0
    )


def count_events(
    db: Session,
    since: datetime,
    event_type: Queries.EventType,
    exclude_path_prefix: Optional[str] = None,
) -> int:
    query = _visitor_events(
        db, func.count(db_schemas.AnalyticsEvent.event_id), since=since
    ).filter(db_schemas.AnalyticsEvent.type == event_type.value)
    if exclude_path_prefix:
        query = query.filter(
            ~db_schemas.AnalyticsEvent.path.startswith(exclude_path_prefix, autoescape=True)
        )
    return query.scalar() or 0


def get_top_countries(db: Session, since: datetime, limit: int) -> List[Tuple[str, int]]:
    country = db_schemas.AnalyticsEvent.country
    event_count = func.count(db_schemas.AnalyticsEvent.event_id).label("event_count")
    rows = (
        _visitor_events(db, country, event_count, since=since)
        .group_by(country)
        .order_by(event_count.desc(), country.asc())
        .limit(limit)
        .all()
    )
    return [(row[0], int(row[1])) for row in rows]


def get_top_viewed_entities(
    db: Session,
    since: datetime,
    event_type: Queries.EventType,
    metadata_key: str,
    limit: int,
) -> List[Tuple[str, int]]:
    """
    Rank the ids stored under ``metadata_key`` for events of ``event_type``.

    Returns (entity id, view count) pairs ordered by count descending, ties
    broken by id so the order is stable between calls.
    """
    entity_id = db_schemas.AnalyticsEvent.meta_data[metadata_key].as_string()
    view_count = func.count(db_schemas.AnalyticsEvent.event_id).label("view_count")
    rows = (
        _visitor_events(db, entity_id, view_count, since=since)
        .filter(
            db_schemas.AnalyticsEvent.type == event_type.value,
            entity_id.is_not(None),
        )
        .group_by(entity_id)
        .order_by(view_count.desc(), entity_id.asc())
        .limit(limit)
        .all()
    )
    return [(row[0], int(row[1])) for row in rows]


def get_time_spent_stats(db: Session, since: datetime) -> Tuple[float, int]:
    """Average and total seconds over page views that reported a duration."""
    time_spent = db_schemas.AnalyticsEvent.time_spent
    average, total = (
        _visitor_events(db, func.avg(time_spent), func.sum(time_spent), since=since)
        .filter(
            db_schemas.AnalyticsEvent.type == Queries.EventType.page_view.value,
            time_spent > 0,
        )
        .one()
    )
    return float(average or 0), int(total or 0)
