"""Domain services operating on injected repositories."""

from .booking import BookingContext, BookingService, SlotFilters
from .interviewers import InterviewerService
from .users import UserService

__all__ = [
    "BookingContext",
    "BookingService",
    "InterviewerService",
    "SlotFilters",
    "UserService",
]
