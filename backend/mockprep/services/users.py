"""User service: account CRUD over the user repository."""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Optional

from ..core.errors import AlreadyExists, NotFoundError
from ..core.timeutil import Clock
from ..domain.models import Role, User
from ..storage import Repository
from .booking import BookingService

logger = logging.getLogger(__name__)

_IMMUTABLE_FIELDS = {"id", "password_hash", "role", "created_at"}


class UserService:
    def __init__(self, users: Repository[User], bookings: BookingService, *, clock: Clock) -> None:
        self._users = users
        self._bookings = bookings
        self._clock = clock
        # Serializes email uniqueness checks with the writes they guard.
        self._email_lock = threading.Lock()

    def create(
        self, name: str, email: str, password_hash: str, role: Role = Role.student
    ) -> User:
        with self._email_lock:
            if self.find_by_email(email) is not None:
                raise AlreadyExists("User already exists with this email")
            now = self._clock()
            user = User(
                id=str(uuid.uuid4()),
                name=name,
                email=email,
                password_hash=password_hash,
                role=role,
                profile_completed=False,
                resume_url=None,
                created_at=now,
                updated_at=now,
            )
            self._users.add(user)
        logger.info("user registered", extra={"user_id": user.id, "role": role.value})
        return user

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        return self._users.find_one(lambda u: u.email == email)

    def update(self, user_id: str, **changes: Any) -> Optional[User]:
        """Shallow-merge ``changes`` into the stored user."""
        return self._users.update(user_id, **changes, updated_at=self._clock())

    def update_profile(self, user_id: str, **changes: Any) -> User:
        changes = {k: v for k, v in changes.items() if k not in _IMMUTABLE_FIELDS}
        email = changes.get("email")
        with self._email_lock:
            if email:
                owner = self.find_by_email(email)
                if owner is not None and owner.id != user_id:
                    raise AlreadyExists("User already exists with this email")
            updated = self.update(user_id, **changes, profile_completed=True)
        if updated is None:
            raise NotFoundError("User not found")
        return updated

    def attach_resume(self, user_id: str, resume_url: str) -> User:
        updated = self.update(user_id, resume_url=resume_url)
        if updated is None:
            raise NotFoundError("User not found")
        return updated

    def set_password(self, user_id: str, password_hash: str) -> User:
        updated = self.update(user_id, password_hash=password_hash)
        if updated is None:
            raise NotFoundError("User not found")
        return updated

    def set_role(self, user_id: str, role: Role) -> Optional[User]:
        return self.update(user_id, role=role)

    def delete(self, user_id: str) -> bool:
        """Remove the account after cancelling its upcoming interviews."""
        if self.find_by_id(user_id) is None:
            return False
        cancelled = self._bookings.cancel_all_for_user(user_id)
        deleted = self._users.delete(user_id)
        logger.info(
            "user deleted", extra={"user_id": user_id, "cancelled_interviews": cancelled}
        )
        return deleted

    def get_stats(self) -> dict:
        users = self._users.all()
        return {
            "total": len(users),
            "students": sum(1 for u in users if u.role is Role.student),
            "completed_profiles": sum(1 for u in users if u.profile_completed),
        }
