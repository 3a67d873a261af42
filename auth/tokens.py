"""
auth/tokens.py -- JWT, password hashing, and session cookie utilities.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with SECRET_KEY and carry the
       user's email as subject, the role, the issue time, and the expiry.
       Verification raises TokenExpired or MalformedToken; the request filter
       turns either into a 401 and clears the cookie.

  Passwords: bcrypt. burn_password_check() enables timing equalization in
       auth.service.authenticate_user() so response time does not reveal
       whether an email is registered.

  SECRET_KEY: sourced from core.config.get_settings() once at module load and
       never rotated while the process runs.

Layer rule: no imports from api/ or items/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from core.config import get_settings
from core.errors import MalformedToken, TokenExpired

logger = logging.getLogger("ufind.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt, used directly)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    bcrypt only looks at the first 72 bytes. The API layer caps passwords at
    72 characters so inputs stay below the truncation threshold.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Corrupt hash or over-long input
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("ufind_timing_dummy")


def burn_password_check(plain: str) -> None:
    """Run one bcrypt check against a throwaway hash and discard the result.

    Called when the email is unknown so the response takes as long as a real
    wrong-password check.
    """
    verify_password(plain, _DUMMY_HASH)


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(subject: str, role: str, expire_seconds: int = 0) -> str:
    """Encode a signed JWT binding subject and role to an absolute expiry.

    Args:
        subject:        User email, stored as the "sub" claim.
        role:           Role wire value, e.g. "ROLE_ADMIN".
        expire_seconds: Lifetime in seconds. If 0 (default), uses
                        Settings.token_expire_seconds.
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "role": role,
        "iat": now,
        "exp": now + timedelta(seconds=duration),
    }
    return jwt.encode(payload, _settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify a JWT and return its payload.

    Raises:
        TokenExpired:   the signature is good but now >= exp.
        MalformedToken: the token does not parse, the signature does not
                        verify, or "sub"/"role"/"exp" is missing.

    Whether the subject still exists is the caller's check.
    """
    try:
        payload = jwt.decode(
            token,
            _settings.secret_key,
            algorithms=[_ALGORITHM],
            options={"require_exp": True},
        )
    except ExpiredSignatureError as exc:
        raise TokenExpired() from exc
    except JWTError as exc:
        raise MalformedToken() from exc
    if not payload.get("sub") or not payload.get("role") or "exp" not in payload:
        raise MalformedToken()
    # jose only rejects exp < now; a token is already dead at exp == now.
    if payload["exp"] <= int(datetime.now(timezone.utc).timestamp()):
        raise TokenExpired()
    return payload


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def set_auth_cookie(response, token: str, expire_seconds: int = 0) -> None:
    """Write the JWT as an httpOnly cookie on the response.

    httponly=True: JS cannot read the cookie (XSS mitigation).
    samesite="strict": never sent on cross-site requests (CSRF mitigation).
    secure: only sent over HTTPS when SECURE_COOKIES=true.
    max_age: matches the JWT expiry so both expire together.
    """
    duration = expire_seconds if expire_seconds > 0 else _settings.token_expire_seconds
    response.set_cookie(
        _settings.auth_cookie_name,
        value=token,
        max_age=duration,
        path="/",
        httponly=True,
        samesite="strict",
        secure=_settings.secure_cookies,
    )


def clear_auth_cookie(response) -> None:
    """Overwrite the session cookie with an empty value and Max-Age=0."""
    response.set_cookie(
        _settings.auth_cookie_name,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        samesite="strict",
        secure=_settings.secure_cookies,
    )
