"""Profile management endpoints for the signed-in user."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ..container import Container
from ..core.errors import NotFoundError
from ..domain.models import Caller, Role, User
from ..domain.schemas import ProfileUpdateRequest, UserOut, UserStatsOut
from .deps import get_container, get_current_user, require_roles
from .responses import envelope

router = APIRouter(prefix="/api/users", tags=["users"])


@router.put("/profile")
def update_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
) -> dict:
    updated = container.users.update_profile(user.id, **body.model_dump(exclude_unset=True))
    return envelope(UserOut.render(updated), message="Profile updated successfully")


@router.post("/upload-resume")
def upload_resume(
    resume: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
) -> dict:
    resume_url = container.uploads.save(resume, "resumes")
    container.users.attach_resume(user.id, resume_url)
    return envelope({"resumeUrl": resume_url}, message="Resume uploaded successfully")


@router.delete("/profile")
def delete_account(
    user: User = Depends(get_current_user),
    container: Container = Depends(get_container),
) -> dict:
    if not container.users.delete(user.id):
        raise NotFoundError("User not found")
    return envelope(message="User account deleted successfully")


@router.get("/stats")
def user_stats(
    _: Caller = Depends(require_roles(Role.admin)),
    container: Container = Depends(get_container),
) -> dict:
    return envelope(UserStatsOut.render(container.users.get_stats()))
