import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from App import App
from backend.Responses import AuthenticateUserError, InvalidEmailOrPassword
from backend.routers.user.authenticate import acquire_auth_token
from database import db_schemas
from main import app


class TestAuthenticate:

    @pytest.fixture(scope="function")
    def setup_app(self):
        mock_app = MagicMock()
        app.dependency_overrides[App.get_instance] = lambda: mock_app
        yield mock_app
        app.dependency_overrides.pop(App.get_instance, None)

    @pytest.fixture(scope="function")
    def client(self, setup_app):
        with TestClient(app) as client:
            client.mock_app = setup_app
            yield client

    @pytest.fixture(scope="function")
    def credentials(self):
        return {"email": "admin@example.com", "password": "ValidPassword123!"}

    def test_authenticate_user_success(self, client: TestClient, credentials: dict):
        mock_crud = MagicMock()
        db_user = db_schemas.User(
            user_id=uuid.uuid4(),
            joined_at=datetime.now(timezone.utc),
            email=credentials["email"],
            name="Site Admin",
            password="argon2-hash",
            is_admin=True,
        )
        mock_crud.get_user_by_email_password.return_value = db_user
        auth_token = str(uuid.uuid4())

        with patch(
            "backend.routers.user.authenticate.acquire_auth_token",
            return_value=auth_token,
        ), patch("backend.routers.user.authenticate.crud", mock_crud):
            response = client.post("/api/user/authenticate", json=credentials)

        assert response.status_code == 200
        response_result = response.json()
        assert response_result["token"] == auth_token
        assert response_result["user"]["user_id"] == str(db_user.user_id)
        assert response_result["user"]["is_admin"] is True
        assert "password" not in response_result["user"]
        mock_crud.get_user_by_email_password.assert_called_once()
        assert mock_crud.get_user_by_email_password.call_args[0][1:] == (
            credentials["email"],
            credentials["password"],
        )

    def test_authenticate_user_invalid(self, client: TestClient, credentials: dict):
        mock_crud = MagicMock()
        mock_crud.get_user_by_email_password.return_value = None

        with patch("backend.routers.user.authenticate.crud", mock_crud):
            response = client.post("/api/user/authenticate", json=credentials)

        assert response.status_code == 401
        assert response.json() == InvalidEmailOrPassword()

    def test_authenticate_user_malformed_email(self, client: TestClient):
        response = client.post(
            "/api/user/authenticate", json={"email": "nope", "password": "x"}
        )

        assert response.status_code == 400

    def test_authenticate_user_server_error(self, client: TestClient, credentials: dict):
        mock_crud = MagicMock()
        mock_crud.get_user_by_email_password.side_effect = Exception("db error")

        with patch("backend.routers.user.authenticate.crud", mock_crud):
            response = client.post("/api/user/authenticate", json=credentials)

        assert response.status_code == 500
        assert response.json() == AuthenticateUserError()


def test_acquire_auth_token_stores_user_id():
    redis_manager = MagicMock()

    token = acquire_auth_token("user-1", redis_manager)

    redis_manager.set.assert_called_once_with(
        "auth_token", token, {"user_id": "user-1"}
    )
    assert uuid.UUID(token)
