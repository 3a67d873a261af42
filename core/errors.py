"""
core/errors.py -- Domain error taxonomy for UFind.

Every failure that reaches the HTTP boundary is an AppError subclass. Each
subclass fixes its HTTP status, so api/main.py needs a single exception
handler to turn any of them into the {"error": "<message>"} envelope.

Services raise these; routes do not catch them.

Layer rule: core/ is the kernel. No imports from api/, auth/, or items/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for handled application errors."""

    status_code: int = 400
    default_message: str = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


class InvalidCredentials(AppError):
    """Unknown email or wrong password. One message for both cases."""

    status_code = 401
    default_message = "Bad Credentials."


class DuplicateUser(AppError):
    status_code = 400
    default_message = "This user already exists."


class InvalidRole(AppError):
    status_code = 401

    def __init__(self, role_name: str) -> None:
        self.role_name = role_name
        super().__init__(f"Invalid role {role_name}")


# ---------------------------------------------------------------------------
# Token validation
# ---------------------------------------------------------------------------


class TokenError(AppError):
    """Any failure validating the session cookie. The filter clears the cookie."""

    status_code = 401


class TokenExpired(TokenError):
    default_message = "Token expired."


class MalformedToken(TokenError):
    default_message = "Invalid token."


class UnknownSubject(TokenError):
    default_message = "User not found."


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Authentication required."


class Forbidden(AppError):
    status_code = 403
    default_message = "Access denied."


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


class ItemNotFound(AppError):
    status_code = 404
    default_message = "Item not found."
