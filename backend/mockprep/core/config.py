"""Application configuration utilities."""

from __future__ import annotations

import os
import re
from datetime import timedelta
from functools import lru_cache

from pydantic import BaseModel

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([dhms]?)\s*$")
_DURATION_UNITS = {"d": "days", "h": "hours", "m": "minutes", "s": "seconds", "": "seconds"}


def parse_duration(value: str) -> timedelta:
    """Parse ``30d``/``12h``/``45m``/``90`` style durations."""
    match = _DURATION_RE.match(value or "")
    if not match:
        raise ValueError(f"invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    APP_NAME: str = "MockInterviewPrep API"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    TZ: str = "Asia/Kolkata"

    JWT_SECRET: str = "change-me"
    JWT_EXPIRE: str = "30d"
    RESET_TOKEN_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 10

    FRONTEND_URL: str = "http://localhost:5173"
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    MEETING_BASE_URL: str = "https://meet.google.com/mock-interview-"

    SEED_DEMO_DATA: bool = True
    ADMIN_EMAIL: str = ""
    ADMIN_PASSWORD: str = ""

    # Older deployments let feedback complete a cancelled interview.
    ALLOW_FEEDBACK_ON_CANCELLED: bool = False

    @property
    def token_lifetime(self) -> timedelta:
        return parse_duration(self.JWT_EXPIRE)


@lru_cache
def get_settings() -> Settings:
    return Settings(
        APP_NAME=os.getenv("APP_NAME", "MockInterviewPrep API"),
        ENVIRONMENT=os.getenv("ENVIRONMENT", "development"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        TZ=os.getenv("TZ", "Asia/Kolkata"),
        JWT_SECRET=os.getenv("JWT_SECRET", "change-me"),
        JWT_EXPIRE=os.getenv("JWT_EXPIRE", "30d"),
        RESET_TOKEN_MINUTES=int(os.getenv("RESET_TOKEN_MINUTES", "60")),
        BCRYPT_ROUNDS=int(os.getenv("BCRYPT_ROUNDS", "10")),
        FRONTEND_URL=os.getenv("FRONTEND_URL", "http://localhost:5173"),
        UPLOAD_DIR=os.getenv("UPLOAD_DIR", "uploads"),
        MAX_UPLOAD_BYTES=int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024))),
        MEETING_BASE_URL=os.getenv(
            "MEETING_BASE_URL", "https://meet.google.com/mock-interview-"
        ),
        SEED_DEMO_DATA=_flag("SEED_DEMO_DATA", True),
        ADMIN_EMAIL=os.getenv("ADMIN_EMAIL", ""),
        ADMIN_PASSWORD=os.getenv("ADMIN_PASSWORD", ""),
        ALLOW_FEEDBACK_ON_CANCELLED=_flag("ALLOW_FEEDBACK_ON_CANCELLED", False),
    )


settings = get_settings()
