import json
import logging
from typing import Optional

import redis.exceptions
from redis import Redis


class RedisManager:
    """
    RedisManager keeps bearer tokens issued at login in Redis as a fast-access store.
    It manages auth_token -> { user_id } pairs and lets Redis expire them.
    """

    def __init__(
        self,
        host: str,
        port: int,
        auth_token_expires_in_seconds: int = 86400,
    ):
        # Initialize Redis client with given host and port
        self.__redis_client = Redis(host=host, port=port, decode_responses=True)
        self.auth_token_expires_in_seconds = auth_token_expires_in_seconds

        # Test connection to Redis server
        try:
            self.__redis_client.ping()
            logging.info(f"Connected to Redis server at {host}:{port}.")
        except redis.exceptions.ConnectionError:
            raise Exception(
                "Could not connect to Redis server. Check your configuration."
            )

    def set(self, type: str, token: str, info: dict):
        """
        Store token information in Redis, (re)starting its expiration.
        """
        self.__redis_client.setex(
            f"{type}:{token}", self.auth_token_expires_in_seconds, json.dumps(info)
        )

    def get(self, type: str, token: str) -> Optional[dict]:
        """
        Retrieve token info from Redis, or None when the token is unknown or expired.
        """
        if not token:
            return None

        data = self.__redis_client.get(f"{type}:{token}")
        if data:
            return json.loads(data)  # Parse JSON string to dict
        return None

    def close(self):
        """
        Close the Redis connection gracefully.
        """
        try:
            self.__redis_client.close()
        except redis.exceptions.RedisError as e:
            logging.warning(f"Failed to close the Redis connection: {e}")
