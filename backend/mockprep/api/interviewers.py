"""Interviewer directory, applications and slot publishing endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status

from ..container import Container
from ..domain.models import ApplicationStatus, Caller, Role
from ..domain.schemas import (
    ApplicationOut,
    InterviewerApplicationRequest,
    InterviewerOut,
    PublishSlotRequest,
    ReviewApplicationRequest,
    SlotOut,
)
from .deps import get_caller, get_container, require_roles
from .responses import envelope

router = APIRouter(prefix="/api/interviewers", tags=["interviewers"])


@router.get("")
def list_interviewers(
    domain: Optional[str] = None,
    experience: Optional[int] = None,
    rating: Optional[float] = None,
    container: Container = Depends(get_container),
) -> dict:
    found = container.interviewers.list_interviewers(domain, experience, rating)
    return envelope([InterviewerOut.render(iv) for iv in found], count=len(found))


@router.post("/apply", status_code=status.HTTP_201_CREATED)
def apply(
    body: InterviewerApplicationRequest, container: Container = Depends(get_container)
) -> dict:
    application = container.interviewers.apply(**body.model_dump(exclude={"terms"}))
    return envelope(
        {"applicationId": application.id, "status": application.status.value},
        message="Application submitted successfully",
    )


@router.post("/upload-resume")
def upload_resume(
    resume: Optional[UploadFile] = File(None),
    container: Container = Depends(get_container),
) -> dict:
    resume_url = container.uploads.save(resume, "interviewer-resumes")
    return envelope({"resumeUrl": resume_url}, message="Resume uploaded successfully")


@router.get("/profile")
def interviewer_profile(
    caller: Caller = Depends(get_caller),
    container: Container = Depends(get_container),
) -> dict:
    return envelope(InterviewerOut.render(container.interviewers.get_profile(caller)))


@router.post("/slots", status_code=status.HTTP_201_CREATED)
def publish_slot(
    body: PublishSlotRequest,
    caller: Caller = Depends(require_roles(Role.interviewer)),
    container: Container = Depends(get_container),
) -> dict:
    slot = container.interviewers.publish_slot(caller, **body.model_dump())
    return envelope(SlotOut.render(slot), message="Slot published successfully")


@router.get("/applications")
def list_applications(
    status: Optional[ApplicationStatus] = None,
    caller: Caller = Depends(require_roles(Role.admin)),
    container: Container = Depends(get_container),
) -> dict:
    applications = container.interviewers.list_applications(caller, status)
    return envelope([ApplicationOut.render(a) for a in applications], count=len(applications))


@router.put("/applications/{application_id}/review")
def review_application(
    application_id: str,
    body: ReviewApplicationRequest,
    caller: Caller = Depends(require_roles(Role.admin)),
    container: Container = Depends(get_container),
) -> dict:
    reviewed = container.interviewers.review_application(
        caller, application_id, ApplicationStatus(body.status), body.review_notes
    )
    return envelope(ApplicationOut.render(reviewed), message="Application reviewed successfully")
