"""
auth/models.py -- Domain types for authentication entities.

Pattern: Data class (pure data container, zero logic), same approach as
items/models.py. Stores and services do the work.

Layer rule: no imports from api/ or items/.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Closed set of privileged roles.

    The wire value carries the ROLE_ prefix and is matched exactly -- see
    parse_role(). There is no unprivileged role: the public browses items
    anonymously.
    """

    SECRETARY = "ROLE_SECRETARY"
    ADMIN = "ROLE_ADMIN"


def parse_role(name: str) -> Role | None:
    """Return the Role whose wire value equals name, or None.

    Case-sensitive and prefix-sensitive: "SECRETARY" and "role_admin" are not
    roles.
    """
    for role in Role:
        if role.value == name:
            return role
    return None


@dataclass
class User:
    """An identity that can log in and act on items.

    email is the natural key and the JWT subject. hashed_password is a bcrypt
    hash; the plaintext is never stored.
    """

    username: str
    email: str
    hashed_password: str
    role: Role
    id: str | None = None
    created_at: str | None = None
