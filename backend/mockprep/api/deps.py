"""Request-scoped dependencies: container lookup and caller identity."""

from __future__ import annotations

from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..container import Container
from ..core.errors import AccessDenied, NotAuthenticated
from ..domain.models import Caller, Role, User

bearer_scheme = HTTPBearer(auto_error=False)


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    container: Container = Depends(get_container),
) -> User:
    if credentials is None or not credentials.credentials:
        raise NotAuthenticated("Not authorized to access this route")
    user_id = container.tokens.resolve_token(credentials.credentials)
    user = container.users.find_by_id(user_id)
    if user is None:
        raise NotAuthenticated("User not found", reason="user_not_found")
    return user


def get_caller(user: User = Depends(get_current_user)) -> Caller:
    return Caller.for_user(user)


def require_roles(*roles: Role) -> Callable[..., Caller]:
    """Dependency factory rejecting callers outside ``roles``."""

    def _check(caller: Caller = Depends(get_caller)) -> Caller:
        if not caller.has_role(*roles):
            raise AccessDenied(
                f"User role {caller.role.value} is not authorized to access this route"
            )
        return caller

    return _check
