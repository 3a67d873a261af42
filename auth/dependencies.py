"""
auth/dependencies.py -- FastAPI Depends() helpers for authorization.

The identity itself is established by auth/middleware.py, which leaves either
a User or None on request.state.user. These helpers only read it:

  current_user_or_none() is the soft variant (never raises).
  get_current_user() raises Unauthenticated (401) for anonymous requests.
  require_permission(op) builds a dependency that runs auth.permissions.authorize().

Layer rule: no imports from api/ or items/.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import User
from auth.permissions import ALLOWED_ROLES, authorize
from core.errors import Unauthenticated


def current_user_or_none(request: Request) -> User | None:
    return getattr(request.state, "user", None)


def get_current_user(request: Request) -> User:
    """Require authentication.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(user: User = Depends(get_current_user)): ...
    """
    user = current_user_or_none(request)
    if user is None:
        raise Unauthenticated()
    return user


def require_permission(operation: str):
    """Return a dependency that allows only roles listed for operation.

    Use as a FastAPI dependency:
        @router.post("/items")
        async def route(user: User = Depends(require_permission(REGISTER_ITEM))): ...
    """
    if operation not in ALLOWED_ROLES:
        raise ValueError(f"Unknown operation: {operation!r}")

    def dependency(request: Request) -> User:
        return authorize(current_user_or_none(request), operation)

    return dependency
