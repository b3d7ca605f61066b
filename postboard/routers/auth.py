from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from postboard.core.config import get_settings
from postboard.core.rate_limiter import rate_limit_ip
from postboard.domain.errors import DuplicateUserError, InvalidCredentialsError
from postboard.repositories.users import UserRepository
from postboard.schemas import LoginRequest, RegisterRequest

router = APIRouter(tags=["auth"])


def _users(request: Request) -> UserRepository:
    repo = getattr(getattr(request.app, "state", None), "users", None)
    if not repo:
        raise RuntimeError("UserRepository not configured")
    return repo


def _limit(request: Request, scope: str) -> None:
    settings = getattr(request.app.state, "settings", None) or get_settings()
    rate_limit_ip(request, scope, limit=settings.auth_rate_limit, window_seconds=settings.auth_rate_window_seconds)


@router.post("/register", status_code=201)
def register(body: RegisterRequest, request: Request):
    _limit(request, "auth:register")
    try:
        _users(request).register(body.username, body.email, body.password, body.mobile)
    except DuplicateUserError as exc:
        return JSONResponse({"message": exc.message}, status_code=400)
    return {"message": "User registered successfully."}


@router.post("/login")
def login(body: LoginRequest, request: Request):
    _limit(request, "auth:login")
    try:
        role = _users(request).authenticate(body.email, body.password)
    except InvalidCredentialsError as exc:
        return JSONResponse({"message": exc.message}, status_code=401)
    # No session is minted; callers pass the role back explicitly.
    return {"message": "Login successful", "userRole": role.value}
