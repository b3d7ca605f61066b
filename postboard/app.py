"""
FastAPI application for postboard.

``create_app`` wires the two collection files into their repositories,
installs CORS/security-header middleware and turns persistence failures into
500 responses so a failed write is never reported as success.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from postboard import __version__
from postboard.core.config import Settings, get_settings
from postboard.core.logging_config import setup_logging
from postboard.core.rate_limiter import RateLimiter
from postboard.domain.errors import PersistenceError
from postboard.repositories import DocumentStore, PostRepository, UserRepository
from postboard.routers import auth as auth_router
from postboard.routers import posts as posts_router

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers on every JSON response."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


async def _persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"message": "Storage failure"}, status_code=500)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app; ``settings`` defaults to the environment."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title="postboard API", version=__version__)
    app.state.settings = settings
    app.state.rate_limiter = RateLimiter()

    users = UserRepository(DocumentStore(settings.users_file))
    app.state.users = users
    app.state.posts = PostRepository(
        DocumentStore(settings.posts_file),
        users,
        require_known_owner=settings.require_known_owner,
    )

    if settings.cors_origins:
        wildcard = "*" in settings.cors_origins
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"] if wildcard else sorted(settings.cors_origins),
            allow_credentials=not wildcard,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")
    app.add_exception_handler(PersistenceError, _persistence_error_handler)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(auth_router.router)
    app.include_router(posts_router.router)

    logger.info("postboard data directory: %s", settings.data_dir)
    return app
