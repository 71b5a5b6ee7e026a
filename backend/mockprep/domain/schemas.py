"""Pydantic models used for request and response bodies.

These data transfer objects (DTOs) mirror the domain models but add
validation and serialization helpers for the API layer. JSON field names are
camelCase; Python attributes stay snake_case.
"""

import datetime as dt
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


InterviewType = Literal["Internship", "Placement"]
Domain = Literal["Technical", "Non-Technical"]
Profile = Literal["AI", "Data Science", "Software"]
SlotType = Literal["Technical", "Behavioral"]

PHONE_PATTERN = r"^\+?[\d\s()-]+$"


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class RequestModel(CamelModel):
    class Config:
        extra = "forbid"


class ResponseModel(CamelModel):
    class Config:
        from_attributes = True

    @classmethod
    def render(cls, obj: Any) -> dict:
        """Validate a domain object and dump it as camelCase JSON data."""
        return cls.model_validate(obj).model_dump(by_alias=True, mode="json")


# ---------------------------------------------------------------- requests


class RegisterRequest(RequestModel):
    """Account registration form.

    Example:
        >>> RegisterRequest(
        ...     name="Test User",
        ...     email="t@example.com",
        ...     password="password123",
        ...     confirmPassword="password123",
        ...     terms=True,
        ... )
    """

    name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)
    confirm_password: str
    terms: bool

    @field_validator("confirm_password")
    @classmethod
    def _passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if "password" in info.data and value != info.data["password"]:
            raise ValueError("Passwords do not match")
        return value

    @field_validator("terms")
    @classmethod
    def _terms_accepted(cls, value: bool) -> bool:
        if value is not True:
            raise ValueError("You must accept the terms and conditions")
        return value

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Test User",
                "email": "t@example.com",
                "password": "password123",
                "confirmPassword": "password123",
                "terms": True,
            }
        }


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ForgotPasswordRequest(RequestModel):
    email: EmailStr


class ResetPasswordRequest(RequestModel):
    password: str = Field(min_length=6)


class ProfileUpdateRequest(RequestModel):
    """Partial profile update; only provided fields are merged."""

    name: Optional[str] = Field(None, min_length=2, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    college: Optional[str] = Field(None, max_length=100)
    course: Optional[str] = Field(None, max_length=100)
    current_year: Optional[int] = Field(None, ge=1, le=6)
    graduation_year: Optional[int] = Field(None, ge=2024, le=2030)
    linkedin_url: Optional[str] = Field(None, pattern=r"^https?://\S+$")
    preferred_language: Optional[str] = Field(None, max_length=50)


class BookInterviewRequest(RequestModel):
    """Booking request naming the slot explicitly.

    ``date``, ``time``, ``domain``, ``profile`` and ``interviewerId`` are
    optional echoes of the slot and are checked against it.

    Example:
        >>> BookInterviewRequest(slotId="slot_1", interviewType="Placement")
    """

    slot_id: str = Field(min_length=1)
    interview_type: InterviewType
    date: Optional[dt.date] = None
    time: Optional[str] = None
    domain: Optional[Domain] = None
    profile: Optional[Profile] = None
    interviewer_id: Optional[str] = None


class FeedbackRequest(RequestModel):
    feedback: str = Field(min_length=1, max_length=5000)
    rating: Optional[int] = Field(None, ge=1, le=5)


class InterviewerApplicationRequest(RequestModel):
    full_name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    linkedin_url: str = Field(pattern=r"^https?://\S*linkedin\.com\S*$")
    company: str = Field(min_length=2, max_length=100)
    designation: str = Field(min_length=2, max_length=100)
    experience: int = Field(ge=1, le=50)
    hourly_rate: float = Field(ge=10, le=1000)
    expertise_domains: str = Field(min_length=10, max_length=500)
    availability: str = Field(min_length=10, max_length=500)
    resume_url: Optional[str] = None
    terms: bool

    @field_validator("terms")
    @classmethod
    def _terms_accepted(cls, value: bool) -> bool:
        if value is not True:
            raise ValueError("You must agree to the terms and conditions")
        return value


class ReviewApplicationRequest(RequestModel):
    status: Literal["approved", "rejected"]
    review_notes: Optional[str] = Field(None, max_length=1000)


class PublishSlotRequest(RequestModel):
    date: dt.date
    time: str = Field(min_length=1, max_length=20)
    duration: int = Field(60, ge=15, le=180)
    price: Optional[float] = Field(None, ge=0)
    type: SlotType = "Technical"
    domain: Domain = "Technical"
    profile: Profile = "Software"


# --------------------------------------------------------------- responses


class UserOut(ResponseModel):
    """User as returned to clients; the password hash is never included."""

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    college: Optional[str] = None
    course: Optional[str] = None
    current_year: Optional[int] = None
    graduation_year: Optional[int] = None
    linkedin_url: Optional[str] = None
    preferred_language: Optional[str] = None
    role: str
    profile_completed: bool
    resume_url: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class SlotOut(ResponseModel):
    id: str
    interviewer_id: str
    interviewer_name: str
    interviewer_company: Optional[str] = None
    interviewer_avatar: Optional[str] = None
    date: dt.date
    time: str
    duration: int
    price: float
    type: str
    domain: str
    profile: str
    available: bool


class InterviewOut(ResponseModel):
    id: str
    user_id: str
    slot_id: Optional[str] = None
    interviewer_id: str
    interviewer_name: str
    interviewer_company: Optional[str] = None
    type: str
    interview_type: str
    domain: str
    profile: str
    date: dt.date
    time: str
    duration: int
    status: str
    payment_status: str
    meeting_link: Optional[str] = None
    price: float
    feedback: Optional[str] = None
    rating: Optional[int] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None


class FeedbackOut(ResponseModel):
    feedback: str
    rating: Optional[int] = None
    interviewer: str
    company: Optional[str] = None


class InterviewerOut(ResponseModel):
    id: str
    name: str
    company: str
    designation: Optional[str] = None
    experience: int
    hourly_rate: float
    domains: List[str]
    rating: float
    total_interviews: int
    avatar: Optional[str] = None


class ApplicationOut(ResponseModel):
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
    status: str
    applied_at: Optional[dt.datetime] = None
    reviewed_at: Optional[dt.datetime] = None
    review_notes: Optional[str] = None


class InterviewStatsOut(ResponseModel):
    total: int
    upcoming: int
    completed: int
    cancelled: int
    total_revenue: float


class UserStatsOut(ResponseModel):
    total: int
    students: int
    completed_profiles: int
