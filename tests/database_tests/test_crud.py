import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

import database.crud as crud
import Queries
from database import db_schemas


@pytest.fixture(scope="function")
def admin_user(db_session):
    return crud.create_user(
        db_session,
        Queries.CreateUser(
            email="admin@example.com",
            name="Site Admin",
            password="ValidPassword123!",
            is_admin=True,
        ),
    )


@pytest.fixture(scope="function")
def regular_user(db_session):
    return crud.create_user(
        db_session,
        Queries.CreateUser(
            email="visitor@example.com", name="Visitor", password="AnotherPassword1!"
        ),
    )


def make_track_event(**overrides) -> Queries.TrackEvent:
    payload = {
        "type": "pageView",
        "visitorId": "v1",
        "ip": "127.0.0.1",
        "userAgent": "pytest",
        "path": "/",
    }
    payload.update(overrides)
    return Queries.TrackEvent.model_validate(payload)


class TestUserCrud:

    def test_create_user_hashes_password(self, db_session, admin_user):
        stored = crud.get_user_by_id(db_session, admin_user.user_id)

        assert stored is not None
        assert stored.is_admin is True
        assert stored.password != "ValidPassword123!"
        assert stored.password.startswith("$argon2")

    def test_duplicate_email_rejected(self, db_session, admin_user):
        with pytest.raises(IntegrityError):
            crud.create_user(
                db_session,
                Queries.CreateUser(
                    email="admin@example.com", name="Someone Else", password="Password1234"
                ),
            )
        db_session.rollback()

    def test_get_user_by_email_password(self, db_session, admin_user):
        assert (
            crud.get_user_by_email_password(
                db_session, "admin@example.com", "ValidPassword123!"
            ).user_id
            == admin_user.user_id
        )
        assert crud.get_user_by_email_password(db_session, "admin@example.com", "wrong") is None
        assert crud.get_user_by_email_password(db_session, "nobody@example.com", "x") is None

    def test_is_admin_user(self, db_session, admin_user, regular_user):
        assert crud.is_admin_user(db_session, str(admin_user.user_id)) is True
        assert crud.is_admin_user(db_session, str(regular_user.user_id)) is False
        assert crud.is_admin_user(db_session, str(uuid.uuid4())) is False
        assert crud.is_admin_user(db_session, "not-a-uuid") is False
        assert crud.is_admin_user(db_session, None) is False


class TestCatalogCrud:

    def test_project_titles(self, db_session):
        project = crud.create_project(db_session, Queries.CreateProject(title="Portfolio"))
        missing_id = str(uuid.uuid4())

        titles = crud.get_project_titles(
            db_session, [str(project.project_id), missing_id, "garbage"]
        )

        assert titles == {str(project.project_id): "Portfolio"}
        assert crud.get_project_titles(db_session, []) == {}

    def test_skill_names(self, db_session):
        skill = crud.create_skill(db_session, Queries.CreateSkill(name="Python", level=9))

        assert crud.get_skill_names(db_session, [str(skill.skill_id)]) == {
            str(skill.skill_id): "Python"
        }

    def test_skill_level_is_bounded(self):
        with pytest.raises(ValueError):
            Queries.CreateSkill(name="Python", level=11)


class TestEventCrud:

    def test_create_event_defaults(self, db_session, event_count):
        before = datetime.now(timezone.utc).replace(tzinfo=None)

        stored = crud.create_event(db_session, make_track_event())

        assert event_count() == 1
        assert stored.country == "Unknown"
        assert stored.city == "Unknown"
        assert stored.is_admin is False
        assert stored.time_spent == 0
        assert stored.meta_data == {}
        assert stored.created_at.replace(tzinfo=None) >= before - timedelta(seconds=1)

    def test_create_event_stores_metadata(self, db_session):
        project_id = str(uuid.uuid4())

        stored = crud.create_event(
            db_session,
            make_track_event(type="projectView", metadata={"projectId": project_id}),
        )

        reloaded = db_session.get(db_schemas.AnalyticsEvent, stored.event_id)
        assert reloaded.type == "projectView"
        assert reloaded.meta_data == {"projectId": project_id}

    def test_count_events_excludes_path_prefix(self, db_session):
        since = datetime.now(timezone.utc) - timedelta(days=1)
        crud.create_event(db_session, make_track_event(path="/"))
        crud.create_event(db_session, make_track_event(path="/admin/settings"))
        crud.create_event(db_session, make_track_event(path="/administrator-tips"))

        assert crud.count_events(db_session, since, Queries.EventType.page_view) == 3
        assert (
            crud.count_events(
                db_session, since, Queries.EventType.page_view, exclude_path_prefix="/admin"
            )
            == 1
        )

    def test_count_events_excludes_admin_rows(self, db_session, event_count):
        since = datetime.now(timezone.utc) - timedelta(days=1)
        crud.create_event(db_session, make_track_event(), is_admin=True)
        crud.create_event(db_session, make_track_event(visitorId="v2"))

        assert event_count() == 2
        assert crud.count_events(db_session, since, Queries.EventType.page_view) == 1
        assert crud.count_unique_visitors(db_session, since) == 1

    def test_top_viewed_entities_ties_are_stable(self, db_session):
        since = datetime.now(timezone.utc) - timedelta(days=1)
        first, second = sorted(str(uuid.uuid4()) for _ in range(2))
        for project_id in (second, first):
            crud.create_event(
                db_session,
                make_track_event(type="projectView", metadata={"projectId": project_id}),
            )

        ranked = crud.get_top_viewed_entities(
            db_session, since, Queries.EventType.project_view, "projectId", 5
        )

        assert ranked == [(first, 1), (second, 1)]

    def test_time_spent_stats_empty(self, db_session):
        since = datetime.now(timezone.utc) - timedelta(days=1)

        assert crud.get_time_spent_stats(db_session, since) == (0.0, 0)
