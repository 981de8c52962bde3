#!/usr/bin/env python3
"""
FastAPI entry point of the Portfolio Analytics API.

Builds the application (CORS, per-client rate limiting, 400 responses for
malformed payloads, routers under ``/api``) and serves it with uvicorn.

Usage:
    python main.py

Environment:
    Reads an optional .env file; see PortfolioConfig for the variables.
"""

import logging
import threading
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Tuple

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from App import App
from backend.Responses import (
    InvalidRequestPayload,
    JsonResponseWithStatus,
    TooManyRequests,
    ValidationErrorItem,
)
from backend.routers import router
from PortfolioConfig import PortfolioConfig

load_dotenv()
config = PortfolioConfig()

RATE_LIMIT_WINDOW_SECONDS = 3600


def configure_logging() -> None:
    """Send INFO and above to the console with a timestamp."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
        force=True,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Create the App singleton (database, token store, aggregator) on startup
    and release it on shutdown. Nothing is created in test mode, where the
    test suite overrides ``App.get_instance``.
    """
    if config.test_mode:
        logging.info("Test mode: App resources are not initialized")
        yield
        return

    logging.info("Initializing database, token store and analytics aggregator...")
    portfolio_app = App()
    try:
        yield
    finally:
        logging.warning("Shutting down, releasing App resources...")
        portfolio_app.cleanup()


class SimpleRateLimiter(BaseHTTPMiddleware):
    """
    Per-client, per-endpoint request limit over fixed one-hour windows.

    A client is identified by its IP address. Limits come from
    ``MAX_REQUEST_RATE_PER_HOUR_CONFIG`` with
    ``DEFAULT_MAX_REQUEST_RATE_PER_HOUR`` as fallback. A window starts with
    the first request of a client on an endpoint. Expired windows are swept
    at most once per window length, so idle clients do not accumulate.
    """

    def __init__(self, app: FastAPI) -> None:
        super().__init__(app)
        # client key -> (window start, requests in window)
        self.windows: Dict[str, Tuple[float, int]] = {}
        self.last_sweep = time.monotonic()
        self.lock = threading.Lock()

    @staticmethod
    def _client_key(request: Request) -> str:
        ip = request.client.host if request.client else "unknown"
        return f"{ip}:{request.url.path}"

    @staticmethod
    def _limit_for(endpoint: str) -> int:
        return config.max_request_rate_per_hour_config.get(
            endpoint, config.default_max_request_rate_per_hour
        )

    def _allow(self, client_key: str, limit: int) -> bool:
        now = time.monotonic()
        with self.lock:
            if now - self.last_sweep >= RATE_LIMIT_WINDOW_SECONDS:
                self._sweep_expired(now)
            window_start, count = self.windows.get(client_key, (now, 0))
            if now - window_start >= RATE_LIMIT_WINDOW_SECONDS:
                window_start, count = now, 0
            if count >= limit:
                return False
            self.windows[client_key] = (window_start, count + 1)
            return True

    def _sweep_expired(self, now: float) -> None:
        """Drop every window older than an hour. Caller holds the lock."""
        expired = [
            key
            for key, (window_start, _) in self.windows.items()
            if now - window_start >= RATE_LIMIT_WINDOW_SECONDS
        ]
        for key in expired:
            del self.windows[key]
        self.last_sweep = now
        if expired:
            logging.info(f"Dropped {len(expired)} expired rate limit windows")

    async def dispatch(self, request: Request, call_next) -> Response:
        client_key = self._client_key(request)
        limit = self._limit_for(request.url.path)

        if not self._allow(client_key, limit):
            logging.warning(f"Rate limit of {limit}/hour exceeded for {client_key}")
            return JsonResponseWithStatus(status_code=429, content=TooManyRequests())

        return await call_next(request)


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JsonResponseWithStatus:
    """Answer malformed payloads with 400 and the list of failing fields."""
    errors = [
        ValidationErrorItem(
            loc=[str(part) for part in error.get("loc", ())],
            msg=str(error.get("msg", "")),
        )
        for error in exc.errors()
    ]
    logging.info(f"Rejected invalid payload for {request.url.path}: {len(errors)} error(s)")
    return JsonResponseWithStatus(
        status_code=400, content=InvalidRequestPayload(errors=errors)
    )


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Portfolio Analytics API",
        description="Visitor event tracking and admin analytics for the portfolio site",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None if config.test_mode else "/docs",
        redoc_url=None if config.test_mode else "/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    if config.test_mode:
        logging.info("Rate limiting disabled in test mode")
    else:
        app.add_middleware(SimpleRateLimiter)

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.include_router(router, prefix="/api")
    return app


app = create_app()


def main() -> None:
    logging.info(
        f"Starting Portfolio Analytics API on {config.server_host}:{config.server_port}"
    )
    uvicorn.run(
        "main:app",
        host=config.server_host,
        port=config.server_port,
        reload=config.debug_mode,
        log_level="info",
        access_log=True,
    )


if __name__ == "__main__":
    main()
