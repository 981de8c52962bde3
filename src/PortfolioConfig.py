#!/usr/bin/env python3
"""
Configuration Management for the Portfolio Analytics service

This module provides the configuration class that manages all application
settings through environment variables and .env files using Pydantic
settings for validation and type safety.

Environment Variables:
    All configuration values are loaded from environment variables or .env file.
    See individual field documentation for specific variable names. Every
    field has a development default so the service starts without a .env file.

Usage:
    from PortfolioConfig import PortfolioConfig

    config = PortfolioConfig()
    print(f"Server running on {config.server_host}:{config.server_port}")
"""

from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PortfolioConfig(BaseSettings):
    """
    Configuration class for the portfolio analytics service.

    All fields are frozen to prevent accidental modification after initialization.
    Configuration is loaded from environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", case_sensitive=True
    )

    # -----------------------
    # General & Server Settings
    # -----------------------

    server_host: str = Field(
        alias="SERVER_HOST",
        default="0.0.0.0",
        frozen=True,
        min_length=1,
        description="Host address where the server will bind (e.g., '0.0.0.0', 'localhost')",
    )

    server_port: int = Field(
        alias="SERVER_PORT",
        default=5000,
        frozen=True,
        ge=1,
        le=65535,
        description="Port number where the server will listen",
    )

    test_mode: bool = Field(
        alias="TEST_MODE",
        default=False,
        frozen=True,
        description="Skip resource initialization and rate limiting (used by the test suite)",
    )

    debug_mode: bool = Field(
        alias="DEBUG_MODE",
        default=False,
        frozen=True,
        description="Enable uvicorn auto-reload",
    )

    cors_allowed_origins: list[str] = Field(
        alias="CORS_ALLOWED_ORIGINS",
        default=["*"],
        frozen=True,
        description="Origins allowed to call the API from a browser",
    )

    # -----------------------
    # Authentication & Rate Limits
    # -----------------------

    auth_token_expires_in_seconds: int = Field(
        alias="AUTHENTICATION_TOKEN_EXPIRES_IN_SECONDS",
        default=86400,
        frozen=True,
        ge=1,
        description="Expiration time for bearer tokens in seconds",
    )

    default_max_request_rate_per_hour: int = Field(
        alias="DEFAULT_MAX_REQUEST_RATE_PER_HOUR",
        default=1000,
        frozen=True,
        ge=1,
        description="Default maximum number of requests allowed per hour per client",
    )

    max_request_rate_per_hour_config: Dict[str, int] = Field(
        alias="MAX_REQUEST_RATE_PER_HOUR_CONFIG",
        frozen=True,
        default_factory=dict,
        description="Dictionary mapping endpoints to their specific rate limits",
    )

    # -----------------------
    # Database Configuration
    # -----------------------

    db_host: str = Field(
        alias="DB_HOST",
        default="localhost",
        frozen=True,
        min_length=1,
        description="Database server hostname or IP address",
    )

    db_port: int = Field(
        alias="DB_PORT",
        default=5432,
        frozen=True,
        ge=1,
        le=65535,
        description="Database server port number",
    )

    db_user: str = Field(
        alias="DB_USER",
        default="postgres",
        frozen=True,
        min_length=1,
        description="Database username for authentication",
    )

    db_password: str = Field(
        alias="DB_PASSWORD",
        default="postgres",
        frozen=True,
        min_length=1,
        description="Database password for authentication",
    )

    db_name: str = Field(
        alias="DB_NAME",
        default="portfolio",
        frozen=True,
        min_length=1,
        description="Name of the database to connect to",
    )

    db_pool_size: int = Field(
        alias="DB_POOL_SIZE",
        default=10,
        frozen=True,
        ge=1,
        description="Database connection pool size",
    )

    db_max_overflow: int = Field(
        alias="DB_MAX_OVERFLOW",
        default=10,
        frozen=True,
        ge=0,
        description="Maximum number of connections to create beyond the pool size",
    )

    db_pool_timeout: int = Field(
        alias="DB_POOL_TIMEOUT",
        default=30,
        frozen=True,
        ge=1,
        description="Database connection timeout in seconds",
    )

    db_pool_recycle: int = Field(
        alias="DB_POOL_RECYCLE",
        default=1800,
        frozen=True,
        ge=1,
        description="Time in seconds after which a connection is recycled",
    )

    # -----------------------
    # Redis Configuration
    # -----------------------

    redis_host: str = Field(
        alias="REDIS_HOST",
        default="localhost",
        frozen=True,
        min_length=1,
        description="Redis server hostname or IP address",
    )

    redis_port: int = Field(
        alias="REDIS_PORT",
        default=6379,
        frozen=True,
        ge=1,
        le=65535,
        description="Redis server port number",
    )

    # -----------------------
    # Analytics Configuration
    # -----------------------

    analytics_top_n: int = Field(
        alias="ANALYTICS_TOP_N",
        default=5,
        frozen=True,
        ge=1,
        le=100,
        description="Number of rows returned by the top locations/projects/skills facets",
    )

    analytics_admin_path_prefix: str = Field(
        alias="ANALYTICS_ADMIN_PATH_PREFIX",
        default="/admin",
        frozen=True,
        min_length=1,
        description="Paths starting with this prefix are not counted as page views",
    )

    analytics_max_workers: int = Field(
        alias="ANALYTICS_MAX_WORKERS",
        default=8,
        frozen=True,
        ge=1,
        le=32,
        description="Worker threads used to compute aggregation facets concurrently",
    )

    @property
    def database_url(self) -> str:
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    def __repr__(self) -> str:
        """Return a string representation of the configuration."""
        return f"PortfolioConfig(server={self.server_host}:{self.server_port})"
