"""
auth/service.py -- Login and user registration.

Each function is one self-contained orchestration over a UserStore; none keeps
state between calls.

Registration policy: admin-gated, no auto-login. An administrator creates the
account (the route requires the register_user permission) and nothing is
returned; the new user logs in separately.

Layer rule: no imports from api/ or items/.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError

from auth.models import User, parse_role
from auth.tokens import burn_password_check, create_access_token, hash_password, verify_password
from core.errors import DuplicateUser, InvalidCredentials, InvalidRole

if TYPE_CHECKING:
    from auth.store import UserStore

logger = logging.getLogger("ufind.auth")


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Check an email/password pair with timing equalization.

    Always runs bcrypt whether or not the email exists:
    - Unknown email: burn_password_check() runs bcrypt (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(email)
    if user is None:
        # Do NOT return before running bcrypt
        burn_password_check(password)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def login(store: UserStore, email: str, password: str) -> str:
    """Return a fresh access token for valid credentials.

    Raises InvalidCredentials with the same message for an unknown email and
    for a wrong password.
    """
    user = authenticate_user(store, email, password)
    if user is None:
        raise InvalidCredentials()
    logger.info("User %s logged in", user.email)
    return create_access_token(user.email, user.role.value)


def register_user(store: UserStore, username: str, email: str, password: str, role_name: str) -> None:
    """Create a user account.

    Order matters:
      1. role_name is validated before the store is touched at all.
      2. Email uniqueness is checked before the password is hashed.
      3. Exactly one insert. A concurrent registration that slips past the
         existence check hits the UNIQUE constraint and is reported as
         DuplicateUser too.
    """
    role = parse_role(role_name)
    if role is None:
        raise InvalidRole(role_name)

    if store.exists_by_email(email):
        raise DuplicateUser()

    user = User(
        username=username,
        email=email,
        hashed_password=hash_password(password),
        role=role,
    )
    try:
        store.create_user(user)
    except IntegrityError as exc:
        raise DuplicateUser() from exc
    logger.info("Registered user %s with role %s", email, role.value)
