"""HTTP routers."""

from fastapi import APIRouter

from . import auth, health, interviewers, interviews, users

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(interviews.router)
api_router.include_router(interviewers.router)

__all__ = ["api_router"]
