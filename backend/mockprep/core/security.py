"""Credential hashing and bearer token issue/resolve."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from .config import Settings
from .errors import NotAuthenticated

JWT_ALGORITHM = "HS256"
RESET_PURPOSE = "password-reset"


def hash_password(plaintext: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_credential(plaintext: str, stored_hash: str) -> bool:
    """Check ``plaintext`` against a bcrypt hash; malformed hashes never match."""
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), stored_hash.encode("ascii"))
    except ValueError:
        return False


class TokenService:
    """Issues and resolves HS256 tokens for sessions and password resets."""

    def __init__(self, settings: Settings) -> None:
        self._secret = settings.JWT_SECRET
        self._session_lifetime = settings.token_lifetime
        self._reset_lifetime = timedelta(minutes=settings.RESET_TOKEN_MINUTES)

    def _encode(self, claims: dict, lifetime: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {**claims, "iat": now, "exp": now + lifetime}
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def _decode(self, token: str) -> dict:
        try:
            return jwt.decode(token, self._secret, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError as exc:
            raise NotAuthenticated("Token has expired", reason="token_expired") from exc
        except jwt.PyJWTError as exc:
            raise NotAuthenticated("Not authorized to access this route") from exc

    def issue_token(self, user_id: str) -> str:
        return self._encode({"id": user_id}, self._session_lifetime)

    def resolve_token(self, token: str) -> str:
        claims = self._decode(token)
        if claims.get("purpose") or not claims.get("id"):
            raise NotAuthenticated("Not authorized to access this route")
        return claims["id"]

    def issue_reset_token(self, user_id: str) -> str:
        return self._encode({"id": user_id, "purpose": RESET_PURPOSE}, self._reset_lifetime)

    def resolve_reset_token(self, token: str) -> str:
        claims = self._decode(token)
        if claims.get("purpose") != RESET_PURPOSE or not claims.get("id"):
            raise NotAuthenticated("Invalid or expired reset token", reason="invalid_reset_token")
        return claims["id"]
