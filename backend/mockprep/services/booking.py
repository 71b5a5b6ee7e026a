"""Booking service: couples slot availability to the interview lifecycle.

Every path that reads a slot's ``available`` flag and then writes either the
slot or an interview derived from it runs under that slot's lock, so for any
``upcoming`` interview the originating slot is unavailable.
"""

from __future__ import annotations

import contextlib
import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterator, List, Optional, Union

from ..core.errors import (
    AccessDenied,
    FeedbackNotAvailable,
    InterviewStateError,
    NotFoundError,
    SlotUnavailable,
    ValidationFailed,
)
from ..core.timeutil import Clock, as_day
from ..domain.models import (
    Caller,
    FeedbackView,
    Interview,
    Interviewer,
    InterviewSlot,
    InterviewStatus,
    PaymentStatus,
    Role,
)
from ..storage import Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotFilters:
    """Conjunctive filters for :meth:`BookingService.get_available_slots`."""

    type: Optional[str] = None
    domain: Optional[str] = None
    profile: Optional[str] = None
    date: Optional[Union[str, date]] = None


@dataclass(frozen=True)
class BookingContext:
    """Slot details a client may echo back when booking.

    Each given field must agree with the slot being booked.
    """

    interviewer_id: Optional[str] = None
    date: Optional[Union[str, date]] = None
    time: Optional[str] = None
    domain: Optional[str] = None
    profile: Optional[str] = None


class SlotLocks:
    """Registry of one exclusive lock per slot id."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def _lock_for(self, slot_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(slot_id)
            if lock is None:
                lock = self._locks[slot_id] = threading.Lock()
            return lock

    @contextlib.contextmanager
    def hold(self, slot_id: Optional[str]) -> Iterator[None]:
        if slot_id is None:
            yield
            return
        with self._lock_for(slot_id):
            yield


class BookingService:
    def __init__(
        self,
        slots: Repository[InterviewSlot],
        interviews: Repository[Interview],
        interviewers: Repository[Interviewer],
        *,
        clock: Clock,
        meeting_base_url: str,
        allow_feedback_on_cancelled: bool = False,
    ) -> None:
        self._slots = slots
        self._interviews = interviews
        self._interviewers = interviewers
        self._clock = clock
        self._meeting_base_url = meeting_base_url
        self._allow_feedback_on_cancelled = allow_feedback_on_cancelled
        self._locks = SlotLocks()

    # -- slots ---------------------------------------------------------

    def get_available_slots(self, filters: Optional[SlotFilters] = None) -> List[InterviewSlot]:
        filters = filters or SlotFilters()
        day = as_day(filters.date) if filters.date else None

        def matches(slot: InterviewSlot) -> bool:
            return (
                slot.available
                and (not filters.type or slot.type == filters.type)
                and (not filters.domain or slot.domain == filters.domain)
                and (not filters.profile or slot.profile == filters.profile)
                and (day is None or slot.date == day)
            )

        return self._slots.find(matches)

    def get_slot(self, slot_id: str) -> InterviewSlot:
        slot = self._slots.get(slot_id)
        if slot is None:
            raise NotFoundError("Slot not found")
        return slot

    # -- interviews ----------------------------------------------------

    def get_interview(self, interview_id: str) -> Interview:
        interview = self._interviews.get(interview_id)
        if interview is None:
            raise NotFoundError("Interview not found")
        return interview

    def list_user_interviews(self, user_id: str, caller: Caller) -> List[Interview]:
        if not caller.owns(user_id):
            raise AccessDenied("Access denied")
        return self._interviews.find(lambda i: i.user_id == user_id)

    def book_interview(
        self,
        caller: Caller,
        slot_id: str,
        interview_type: str,
        context: Optional[BookingContext] = None,
    ) -> Interview:
        with self._locks.hold(slot_id):
            slot = self.get_slot(slot_id)
            if context is not None:
                self._check_context(slot, context)
            if slot.date < self._clock().date():
                raise ValidationFailed(
                    "Cannot book a slot in the past", reason="slot_in_past"
                )
            if not slot.available:
                raise SlotUnavailable("Slot is no longer available")

            now = self._clock()
            interview = Interview(
                id=str(uuid.uuid4()),
                user_id=caller.user_id,
                slot_id=slot.id,
                interviewer_id=slot.interviewer_id,
                interviewer_name=slot.interviewer_name,
                interviewer_company=slot.interviewer_company,
                date=slot.date,
                time=slot.time,
                type=slot.type,
                interview_type=interview_type,
                domain=slot.domain,
                profile=slot.profile,
                duration=slot.duration,
                status=InterviewStatus.upcoming,
                payment_status=PaymentStatus.paid,
                meeting_link=f"{self._meeting_base_url}{uuid.uuid4().hex[:12]}",
                price=slot.price,
                created_at=now,
                updated_at=now,
            )
            self._interviews.add(interview)
            self._slots.update(slot.id, available=False)

        logger.info(
            "interview booked",
            extra={"interview_id": interview.id, "slot_id": slot_id, "user_id": caller.user_id},
        )
        return interview

    def cancel_interview(self, interview_id: str, caller: Caller) -> bool:
        interview = self._interviews.get(interview_id)
        if interview is None:
            return False
        if not caller.owns(interview.user_id):
            raise AccessDenied("Access denied")
        self._cancel(interview.id, interview.slot_id)
        return True

    def cancel_all_for_user(self, user_id: str) -> int:
        """Cancel every upcoming interview owned by ``user_id``."""
        cancelled = 0
        for interview in self._interviews.find(lambda i: i.user_id == user_id and i.is_active):
            try:
                self._cancel(interview.id, interview.slot_id)
            except InterviewStateError:
                # Completed between the scan and the lock.
                logger.warning("skipped cascade cancel", extra={"interview_id": interview.id})
                continue
            cancelled += 1
        return cancelled

    def _cancel(self, interview_id: str, slot_id: Optional[str]) -> None:
        with self._locks.hold(slot_id):
            current = self.get_interview(interview_id)
            if current.status is InterviewStatus.completed:
                raise InterviewStateError(
                    "Unable to cancel a completed interview", reason="interview_completed"
                )
            if current.status is not InterviewStatus.cancelled:
                self._interviews.update(
                    current.id, status=InterviewStatus.cancelled, updated_at=self._clock()
                )
            self._release_slot(slot_id, exclude=current.id)

        logger.info("interview cancelled", extra={"interview_id": interview_id, "slot_id": slot_id})

    def _release_slot(self, slot_id: Optional[str], exclude: str) -> None:
        # Caller holds the slot lock.
        if slot_id is None or self._slots.get(slot_id) is None:
            return
        still_held = self._interviews.find_one(
            lambda i: i.slot_id == slot_id and i.id != exclude and i.is_active
        )
        if still_held is None:
            self._slots.update(slot_id, available=True)

    # -- feedback ------------------------------------------------------

    def add_feedback(
        self, interview_id: str, feedback: str, rating: Optional[int], caller: Caller
    ) -> bool:
        interview = self._interviews.get(interview_id)
        if interview is None:
            return False
        self._check_feedback_author(interview, caller)

        with self._locks.hold(interview.slot_id):
            current = self.get_interview(interview_id)
            if current.status is InterviewStatus.completed:
                raise InterviewStateError(
                    "Feedback has already been submitted", reason="feedback_already_submitted"
                )
            if current.status is InterviewStatus.cancelled and not self._allow_feedback_on_cancelled:
                raise InterviewStateError(
                    "Cannot submit feedback for a cancelled interview",
                    reason="interview_cancelled",
                )
            self._interviews.update(
                current.id,
                feedback=feedback,
                rating=rating,
                status=InterviewStatus.completed,
                updated_at=self._clock(),
            )

        logger.info("feedback submitted", extra={"interview_id": interview_id, "rating": rating})
        return True

    def get_feedback(self, interview_id: str, caller: Caller) -> FeedbackView:
        interview = self.get_interview(interview_id)
        if not caller.owns(interview.user_id):
            raise AccessDenied("Access denied")
        if not interview.feedback:
            raise FeedbackNotAvailable("Feedback not available yet")
        return FeedbackView(
            feedback=interview.feedback,
            rating=interview.rating,
            interviewer=interview.interviewer_name,
            company=interview.interviewer_company,
        )

    def _check_feedback_author(self, interview: Interview, caller: Caller) -> None:
        if caller.has_role(Role.admin):
            return
        if caller.has_role(Role.interviewer):
            assigned = self._interviewers.get(interview.interviewer_id)
            if assigned is not None and caller.owns(assigned.user_id):
                return
        raise AccessDenied("Only the assigned interviewer can submit feedback")

    # -- reporting -----------------------------------------------------

    def get_stats(self) -> dict:
        interviews = self._interviews.all()

        def count(status: InterviewStatus) -> int:
            return sum(1 for i in interviews if i.status is status)

        return {
            "total": len(interviews),
            "upcoming": count(InterviewStatus.upcoming),
            "completed": count(InterviewStatus.completed),
            "cancelled": count(InterviewStatus.cancelled),
            "total_revenue": round(
                sum(i.price for i in interviews if i.payment_status is PaymentStatus.paid), 2
            ),
        }

    @staticmethod
    def _check_context(slot: InterviewSlot, context: BookingContext) -> None:
        mismatched = []
        if context.interviewer_id and context.interviewer_id != slot.interviewer_id:
            mismatched.append("interviewerId")
        if context.date and as_day(context.date) != slot.date:
            mismatched.append("date")
        if context.time and context.time.strip() != slot.time:
            mismatched.append("time")
        if context.domain and context.domain != slot.domain:
            mismatched.append("domain")
        if context.profile and context.profile != slot.profile:
            mismatched.append("profile")
        if mismatched:
            raise ValidationFailed(
                "Booking details do not match the selected slot",
                reason="slot_mismatch",
                details=[
                    {"field": name, "message": "does not match the selected slot"}
                    for name in mismatched
                ],
            )
