"""
auth/middleware.py -- Per-request session cookie validation.

authenticate_request() is registered as an HTTP middleware in api/main.py and
runs before any route handler:

  1. No session cookie: request.state.user = None, continue anonymously.
     Whether that is acceptable is decided later by the route's permission
     dependency.
  2. Cookie present: decode the JWT, then resolve its subject to a live user.
  3. Any failure (expired, malformed, unknown subject): respond 401 with
     {"error": ...}, clear the cookie, and never call the route.

Layer rule: no imports from api/ or items/. Importing fastapi/starlette is
allowed because this module is part of the HTTP pipeline.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from auth.store import UserStore
from auth.tokens import clear_auth_cookie, decode_access_token
from core.config import get_settings
from core.errors import TokenError, UnknownSubject

logger = logging.getLogger("ufind.auth")


async def authenticate_request(request: Request, call_next):
    request.state.user = None

    token = request.cookies.get(get_settings().auth_cookie_name)
    if not token:
        return await call_next(request)

    user_store: UserStore = request.app.state.user_store
    try:
        payload = decode_access_token(token)
        user = user_store.get_by_email(payload["sub"])
        if user is None:
            raise UnknownSubject()
    except TokenError as exc:
        logger.warning(
            "Rejected session cookie on %s %s: %s",
            request.method,
            request.url.path,
            exc.message,
        )
        response = JSONResponse(status_code=exc.status_code, content={"error": exc.message})
        clear_auth_cookie(response)
        return response

    request.state.user = user
    return await call_next(request)
