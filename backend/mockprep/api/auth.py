"""Registration, login and password reset endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from ..container import Container
from ..core.errors import InvalidCredentials, NotFoundError
from ..core.security import verify_credential
from ..domain.models import User
from ..domain.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserOut,
)
from .deps import get_container, get_current_user
from .responses import envelope

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _session(container: Container, user: User) -> dict:
    return {"user": UserOut.render(user), "token": container.tokens.issue_token(user.id)}


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, container: Container = Depends(get_container)) -> dict:
    user = container.users.create(
        body.name, body.email, container.hash_password(body.password)
    )
    return envelope(_session(container, user), message="User registered successfully")


@router.post("/login")
def login(body: LoginRequest, container: Container = Depends(get_container)) -> dict:
    user = container.users.find_by_email(body.email)
    if user is None or not verify_credential(body.password, user.password_hash):
        raise InvalidCredentials("Invalid credentials")
    return envelope(_session(container, user), message="Login successful")


@router.get("/profile")
def profile(user: User = Depends(get_current_user)) -> dict:
    return envelope(UserOut.render(user))


@router.post("/forgot-password")
def forgot_password(
    body: ForgotPasswordRequest, container: Container = Depends(get_container)
) -> dict:
    user = container.users.find_by_email(body.email)
    if user is None:
        raise NotFoundError("User not found with this email")
    reset_token = container.tokens.issue_reset_token(user.id)
    # No mail transport; operators deliver the token from the log.
    logger.info(
        "password reset requested", extra={"user_id": user.id, "reset_token": reset_token}
    )
    data = None
    if container.settings.ENVIRONMENT != "production":
        data = {"resetToken": reset_token}
    return envelope(data, message="Password reset instructions sent")


@router.put("/reset-password/{token}")
def reset_password(
    token: str, body: ResetPasswordRequest, container: Container = Depends(get_container)
) -> dict:
    user_id = container.tokens.resolve_reset_token(token)
    container.users.set_password(user_id, container.hash_password(body.password))
    logger.info("password reset", extra={"user_id": user_id})
    return envelope(message="Password reset successful")
