"""
auth/permissions.py -- Allowed-roles table and the single authorization check.

Every privileged operation has one row in ALLOWED_ROLES. Route handlers name
the operation (via auth.dependencies.require_permission) instead of listing
roles inline, so the whole policy is readable here.

Layer rule: no imports from api/ or items/.
"""

from __future__ import annotations

from auth.models import Role, User
from core.errors import Forbidden, Unauthenticated

REGISTER_ITEM = "register_item"
CLAIM_ITEM = "claim_item"
REGISTER_USER = "register_user"

ALLOWED_ROLES: dict[str, frozenset[Role]] = {
    REGISTER_ITEM: frozenset({Role.SECRETARY, Role.ADMIN}),
    CLAIM_ITEM: frozenset({Role.SECRETARY, Role.ADMIN}),
    REGISTER_USER: frozenset({Role.ADMIN}),
}


def authorize(user: User | None, operation: str) -> User:
    """Return user if it may perform operation.

    Raises:
        Unauthenticated: no identity on the request, whatever the operation.
        Forbidden:       the user's role is not in the operation's set.
        KeyError:        operation is not in ALLOWED_ROLES (programming error).
    """
    allowed = ALLOWED_ROLES[operation]
    if user is None:
        raise Unauthenticated()
    if user.role not in allowed:
        raise Forbidden()
    return user
