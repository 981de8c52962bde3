import json
from unittest.mock import MagicMock, patch

import pytest
import redis.exceptions

from backend.redis_manager import RedisManager


@pytest.fixture
def mock_redis():
    # Patch Redis so no real Redis is needed
    with patch("backend.redis_manager.Redis") as mock_redis_cls:
        mock_redis = MagicMock()
        mock_redis_cls.return_value = mock_redis
        mock_redis.ping.return_value = True
        yield mock_redis


@pytest.fixture
def redis_manager(mock_redis):
    return RedisManager(host="localhost", port=6379, auth_token_expires_in_seconds=600)


def test_set_starts_expiry(redis_manager, mock_redis):
    redis_manager.set("auth_token", "token123", {"user_id": "u1"})

    mock_redis.setex.assert_called_once_with(
        "auth_token:token123", 600, json.dumps({"user_id": "u1"})
    )


def test_get(redis_manager, mock_redis):
    mock_redis.get.return_value = '{"user_id": "u1"}'

    assert redis_manager.get("auth_token", "token123") == {"user_id": "u1"}
    mock_redis.get.assert_called_once_with("auth_token:token123")


def test_get_missing_or_empty_token(redis_manager, mock_redis):
    mock_redis.get.return_value = None

    assert redis_manager.get("auth_token", "expired") is None
    assert redis_manager.get("auth_token", "") is None
    mock_redis.get.assert_called_once_with("auth_token:expired")


def test_connection_failure(mock_redis):
    mock_redis.ping.side_effect = redis.exceptions.ConnectionError()

    with pytest.raises(Exception, match="Could not connect to Redis server"):
        RedisManager(host="localhost", port=6379)


def test_close_error_is_logged(redis_manager, mock_redis, caplog):
    mock_redis.close.side_effect = redis.exceptions.RedisError("gone")

    redis_manager.close()

    assert "Failed to close the Redis connection" in caplog.text
