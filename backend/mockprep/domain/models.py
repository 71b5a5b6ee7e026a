"""Core domain entities represented as immutable dataclasses.

Entities are independent of any persistence concerns. Repositories hand out
instances and accept replacements built with :func:`dataclasses.replace`, so a
reader can never observe a half-applied update.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple


class Role(str, Enum):
    student = "student"
    interviewer = "interviewer"
    admin = "admin"


class InterviewStatus(str, Enum):
    upcoming = "upcoming"
    completed = "completed"
    cancelled = "cancelled"


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"


class ApplicationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


@dataclass(frozen=True)
class User:
    """Registered account.

    Example:
        >>> User(
        ...     id="user_1",
        ...     name="Sarah Johnson",
        ...     email="sarah@example.com",
        ...     password_hash="$2b$10$...",
        ... )
    """

    id: str
    name: str
    email: str
    password_hash: str
    phone: Optional[str] = None
    college: Optional[str] = None
    course: Optional[str] = None
    current_year: Optional[int] = None
    graduation_year: Optional[int] = None
    linkedin_url: Optional[str] = None
    preferred_language: Optional[str] = None
    role: Role = Role.student
    profile_completed: bool = False
    resume_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class InterviewSlot:
    """Bookable interviewer offering.

    ``time`` is a free-text label ("2:00 PM"), not a normalized timestamp.

    Example:
        >>> InterviewSlot(
        ...     id="slot_1",
        ...     interviewer_id="iv_1",
        ...     interviewer_name="Jane Smith",
        ...     date=date(2024, 7, 29),
        ...     time="11:00 AM",
        ... )
    """

    id: str
    interviewer_id: str
    interviewer_name: str
    date: date
    time: str
    interviewer_company: Optional[str] = None
    interviewer_avatar: Optional[str] = None
    duration: int = 60
    price: float = 0.0
    type: str = "Technical"
    domain: str = "Technical"
    profile: str = "Software"
    available: bool = True


@dataclass(frozen=True)
class Interview:
    """Confirmed booking derived from a slot.

    Example:
        >>> Interview(
        ...     id="int_1",
        ...     user_id="user_1",
        ...     slot_id="slot_1",
        ...     interviewer_id="iv_1",
        ...     interviewer_name="Jane Smith",
        ...     date=date(2024, 7, 29),
        ...     time="11:00 AM",
        ... )
    """

    id: str
    user_id: str
    slot_id: Optional[str]
    interviewer_id: str
    interviewer_name: str
    date: date
    time: str
    interviewer_company: Optional[str] = None
    type: str = "Technical"
    interview_type: str = "Placement"
    domain: str = "Technical"
    profile: str = "Software"
    duration: int = 60
    status: InterviewStatus = InterviewStatus.upcoming
    payment_status: PaymentStatus = PaymentStatus.paid
    meeting_link: Optional[str] = None
    price: float = 0.0
    feedback: Optional[str] = None
    rating: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status is InterviewStatus.upcoming


@dataclass(frozen=True)
class Interviewer:
    """Professional listed in the interviewer directory.

    Example:
        >>> Interviewer(id="iv_1", name="Jane Smith", company="Google")
    """

    id: str
    name: str
    company: str
    designation: Optional[str] = None
    experience: int = 0
    hourly_rate: float = 0.0
    domains: Tuple[str, ...] = ()
    rating: float = 0.0
    total_interviews: int = 0
    avatar: Optional[str] = None
    user_id: Optional[str] = None


@dataclass(frozen=True)
class InterviewerApplication:
    """Request from a professional to join as an interviewer."""

    id: str
    full_name: str
    email: str
    linkedin_url: str
    company: str
    designation: str
    experience: int
    hourly_rate: float
    expertise_domains: str
    availability: str
    resume_url: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.pending
    applied_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None


@dataclass(frozen=True)
class Caller:
    """Authenticated identity handed to service operations.

    Example:
        >>> Caller(user_id="user_1").owns("user_1")
        True
    """

    user_id: str
    role: Role = Role.student
    name: str = field(default="", compare=False)

    def owns(self, owner_id: Optional[str]) -> bool:
        return owner_id is not None and owner_id == self.user_id

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles

    @classmethod
    def for_user(cls, user: User) -> "Caller":
        return cls(user_id=user.id, role=user.role, name=user.name)


@dataclass(frozen=True)
class FeedbackView:
    """Feedback as shown to the interview owner."""

    feedback: str
    rating: Optional[int]
    interviewer: str
    company: Optional[str]
