"""Wiring of repositories, services and collaborators for one app instance."""

from __future__ import annotations

from dataclasses import dataclass, field

from .core.config import Settings
from .core.security import TokenService, hash_password
from .core.timeutil import Clock, make_clock
from .core.uploads import UploadStore
from .data.seed import seed_admin, seed_demo_data
from .domain.models import (
    Interview,
    Interviewer,
    InterviewerApplication,
    InterviewSlot,
    User,
)
from .services import BookingService, InterviewerService, UserService
from .storage import InMemoryRepository, Repository


@dataclass
class Stores:
    users: Repository[User] = field(default_factory=InMemoryRepository)
    slots: Repository[InterviewSlot] = field(default_factory=InMemoryRepository)
    interviews: Repository[Interview] = field(default_factory=InMemoryRepository)
    interviewers: Repository[Interviewer] = field(default_factory=InMemoryRepository)
    applications: Repository[InterviewerApplication] = field(default_factory=InMemoryRepository)


@dataclass
class Container:
    settings: Settings
    clock: Clock
    stores: Stores
    tokens: TokenService
    uploads: UploadStore
    users: UserService
    bookings: BookingService
    interviewers: InterviewerService

    def hash_password(self, plaintext: str) -> str:
        return hash_password(plaintext, rounds=self.settings.BCRYPT_ROUNDS)


def build_container(settings: Settings, stores: Stores | None = None) -> Container:
    """Build services over ``stores`` (fresh in-memory stores by default)."""
    clock = make_clock(settings.TZ)
    stores = stores or Stores()

    bookings = BookingService(
        stores.slots,
        stores.interviews,
        stores.interviewers,
        clock=clock,
        meeting_base_url=settings.MEETING_BASE_URL,
        allow_feedback_on_cancelled=settings.ALLOW_FEEDBACK_ON_CANCELLED,
    )
    users = UserService(stores.users, bookings, clock=clock)
    interviewers = InterviewerService(
        stores.interviewers, stores.applications, stores.slots, users, clock=clock
    )
    container = Container(
        settings=settings,
        clock=clock,
        stores=stores,
        tokens=TokenService(settings),
        uploads=UploadStore(settings.UPLOAD_DIR, settings.MAX_UPLOAD_BYTES),
        users=users,
        bookings=bookings,
        interviewers=interviewers,
    )

    if settings.SEED_DEMO_DATA:
        seed_demo_data(
            users,
            stores.interviewers,
            stores.slots,
            clock=clock,
            hash_password=container.hash_password,
        )
    if settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD:
        seed_admin(users, settings.ADMIN_EMAIL, container.hash_password(settings.ADMIN_PASSWORD))
    return container
