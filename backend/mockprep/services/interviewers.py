"""Interviewer directory, applications and slot publishing."""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import date
from typing import List, Optional

from ..core.errors import AccessDenied, AppError, NotFoundError, ValidationFailed
from ..core.timeutil import Clock
from ..domain.models import (
    ApplicationStatus,
    Caller,
    Interviewer,
    InterviewerApplication,
    InterviewSlot,
    Role,
)
from ..storage import Repository
from .users import UserService

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = "/api/placeholder/40/40"


def split_domains(text: str) -> tuple:
    return tuple(d.strip() for d in text.split(",") if d.strip())


class InterviewerService:
    def __init__(
        self,
        interviewers: Repository[Interviewer],
        applications: Repository[InterviewerApplication],
        slots: Repository[InterviewSlot],
        users: UserService,
        *,
        clock: Clock,
    ) -> None:
        self._interviewers = interviewers
        self._applications = applications
        self._slots = slots
        self._users = users
        self._clock = clock
        self._review_lock = threading.Lock()

    def list_interviewers(
        self,
        domain: Optional[str] = None,
        experience: Optional[int] = None,
        rating: Optional[float] = None,
    ) -> List[Interviewer]:
        needle = domain.lower() if domain else None

        def matches(iv: Interviewer) -> bool:
            if needle and not any(needle in d.lower() for d in iv.domains):
                return False
            if experience is not None and iv.experience < experience:
                return False
            if rating is not None and iv.rating < rating:
                return False
            return True

        return self._interviewers.find(matches)

    def apply(
        self,
        *,
        full_name: str,
        email: str,
        linkedin_url: str,
        company: str,
        designation: str,
        experience: int,
        hourly_rate: float,
        expertise_domains: str,
        availability: str,
        resume_url: Optional[str] = None,
    ) -> InterviewerApplication:
        application = InterviewerApplication(
            id=str(uuid.uuid4()),
            full_name=full_name,
            email=email,
            linkedin_url=linkedin_url,
            company=company,
            designation=designation,
            experience=experience,
            hourly_rate=hourly_rate,
            expertise_domains=expertise_domains,
            availability=availability,
            resume_url=resume_url,
            status=ApplicationStatus.pending,
            applied_at=self._clock(),
        )
        self._applications.add(application)
        logger.info("interviewer application received", extra={"application_id": application.id})
        return application

    def list_applications(
        self, caller: Caller, status: Optional[ApplicationStatus] = None
    ) -> List[InterviewerApplication]:
        self._require_admin(caller)
        return self._applications.find(lambda a: status is None or a.status is status)

    def review_application(
        self,
        caller: Caller,
        application_id: str,
        status: ApplicationStatus,
        review_notes: Optional[str] = None,
    ) -> InterviewerApplication:
        self._require_admin(caller)
        with self._review_lock:
            application = self._applications.get(application_id)
            if application is None:
                raise NotFoundError("Application not found")
            if application.status is not ApplicationStatus.pending:
                raise AppError("Application has already been reviewed", reason="already_reviewed")

            reviewed = self._applications.update(
                application_id,
                status=status,
                review_notes=review_notes,
                reviewed_at=self._clock(),
            )
            if status is ApplicationStatus.approved:
                self._onboard(reviewed)
        logger.info(
            "interviewer application reviewed",
            extra={"application_id": application_id, "status": status.value},
        )
        return reviewed

    def _onboard(self, application: InterviewerApplication) -> Interviewer:
        user = self._users.find_by_email(application.email)
        interviewer = Interviewer(
            id=str(uuid.uuid4()),
            name=application.full_name,
            company=application.company,
            designation=application.designation,
            experience=application.experience,
            hourly_rate=application.hourly_rate,
            domains=split_domains(application.expertise_domains),
            rating=0.0,
            total_interviews=0,
            avatar=DEFAULT_AVATAR,
            user_id=user.id if user else None,
        )
        self._interviewers.add(interviewer)
        if user is not None and user.role is Role.student:
            self._users.set_role(user.id, Role.interviewer)
        return interviewer

    def get_profile(self, caller: Caller) -> Interviewer:
        interviewer = self._interviewers.find_one(lambda iv: caller.owns(iv.user_id))
        if interviewer is None:
            raise NotFoundError("Interviewer profile not found")
        return interviewer

    def publish_slot(
        self,
        caller: Caller,
        *,
        date: date,
        time: str,
        duration: int,
        type: str,
        domain: str,
        profile: str,
        price: Optional[float] = None,
    ) -> InterviewSlot:
        if not caller.has_role(Role.interviewer):
            raise AccessDenied("Only interviewers can publish slots")
        if date < self._clock().date():
            raise ValidationFailed(
                "Slot date cannot be in the past",
                details=[{"field": "date", "message": "must be today or later"}],
            )
        interviewer = self.get_profile(caller)
        if price is None:
            price = round(interviewer.hourly_rate * duration / 60, 2)
        slot = InterviewSlot(
            id=str(uuid.uuid4()),
            interviewer_id=interviewer.id,
            interviewer_name=interviewer.name,
            interviewer_company=interviewer.company,
            interviewer_avatar=interviewer.avatar,
            date=date,
            time=time.strip(),
            duration=duration,
            price=price,
            type=type,
            domain=domain,
            profile=profile,
            available=True,
        )
        self._slots.add(slot)
        logger.info("slot published", extra={"slot_id": slot.id, "interviewer_id": interviewer.id})
        return slot

    @staticmethod
    def _require_admin(caller: Caller) -> None:
        if not caller.has_role(Role.admin):
            raise AccessDenied(f"User role {caller.role.value} is not authorized to access this route")
