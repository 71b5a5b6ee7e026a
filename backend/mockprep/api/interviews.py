"""Slot browsing, booking, cancellation and feedback endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from ..container import Container
from ..core.errors import NotFoundError
from ..domain.models import Caller, Role
from ..domain.schemas import (
    BookInterviewRequest,
    FeedbackOut,
    FeedbackRequest,
    InterviewOut,
    InterviewStatsOut,
    SlotOut,
)
from ..services import BookingContext, SlotFilters
from .deps import get_caller, get_container, require_roles
from .responses import envelope

router = APIRouter(prefix="/api/interviews", tags=["interviews"])


@router.get("/available")
def available_slots(
    type: Optional[str] = None,
    domain: Optional[str] = None,
    profile: Optional[str] = None,
    date: Optional[str] = None,
    container: Container = Depends(get_container),
) -> dict:
    filters = SlotFilters(type=type, domain=domain, profile=profile, date=date)
    slots = container.bookings.get_available_slots(filters)
    return envelope([SlotOut.render(s) for s in slots], count=len(slots))


@router.get("/stats")
def interview_stats(
    _: Caller = Depends(require_roles(Role.admin)),
    container: Container = Depends(get_container),
) -> dict:
    return envelope(InterviewStatsOut.render(container.bookings.get_stats()))


@router.get("/user/{user_id}")
def user_interviews(
    user_id: str,
    caller: Caller = Depends(get_caller),
    container: Container = Depends(get_container),
) -> dict:
    interviews = container.bookings.list_user_interviews(user_id, caller)
    return envelope([InterviewOut.render(i) for i in interviews], count=len(interviews))


@router.post("/book", status_code=status.HTTP_201_CREATED)
def book_interview(
    body: BookInterviewRequest,
    caller: Caller = Depends(get_caller),
    container: Container = Depends(get_container),
) -> dict:
    context = BookingContext(
        interviewer_id=body.interviewer_id,
        date=body.date,
        time=body.time,
        domain=body.domain,
        profile=body.profile,
    )
    interview = container.bookings.book_interview(
        caller, body.slot_id, body.interview_type, context
    )
    return envelope(InterviewOut.render(interview), message="Interview booked successfully")


@router.put("/{interview_id}/cancel")
def cancel_interview(
    interview_id: str,
    caller: Caller = Depends(get_caller),
    container: Container = Depends(get_container),
) -> dict:
    if not container.bookings.cancel_interview(interview_id, caller):
        raise NotFoundError("Interview not found")
    return envelope(message="Interview cancelled successfully")


@router.get("/{interview_id}/feedback")
def get_feedback(
    interview_id: str,
    caller: Caller = Depends(get_caller),
    container: Container = Depends(get_container),
) -> dict:
    view = container.bookings.get_feedback(interview_id, caller)
    return envelope(FeedbackOut.render(view))


@router.post("/{interview_id}/feedback")
def submit_feedback(
    interview_id: str,
    body: FeedbackRequest,
    caller: Caller = Depends(get_caller),
    container: Container = Depends(get_container),
) -> dict:
    if not container.bookings.add_feedback(interview_id, body.feedback, body.rating, caller):
        raise NotFoundError("Interview not found")
    return envelope(message="Feedback submitted successfully")
