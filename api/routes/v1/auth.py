"""
api/routes/v1/auth.py -- Authentication and user registration REST endpoints.

Routes:
  POST /api/v1/auth/login      -- password login; sets JWT cookie
  POST /api/v1/auth/logout     -- clears cookie; 204
  POST /api/v1/auth/register   -- create user (register_user permission: admin only)
  GET  /api/v1/auth/me         -- current identity (requires auth)

Security:
  POST /login is rate-limited per IP (LOGIN_RATE_LIMIT, default 10/minute).
  auth.service.login() provides timing equalization -- use it, never inline
  the lookup + bcrypt check.
  Cache-Control: no-store on login responses.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import LoginRequest, MeResponse, RegisterUserRequest, SuccessResponse
from auth import service
from auth.dependencies import get_current_user, require_permission
from auth.models import User
from auth.permissions import REGISTER_USER
from auth.store import UserStore
from auth.tokens import clear_auth_cookie, set_auth_cookie
from core.config import get_settings

# Auth policy:
# - POST /api/v1/auth/login:     public -- login endpoint must be unauthenticated
# - POST /api/v1/auth/logout:    public -- clearing a cookie needs no prior auth
# - POST /api/v1/auth/register:  require_permission(REGISTER_USER)
# - GET  /api/v1/auth/me:        requires auth (get_current_user)
router = APIRouter()


@limiter.limit(get_settings().login_rate_limit)  # must be ABOVE @router to preserve FastAPI introspection
@router.post("/auth/login", response_model=SuccessResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; set the session cookie.

    Wrong email and wrong password produce the same InvalidCredentials error,
    rendered by the AppError handler as 401 {"error": "Bad Credentials."}.
    """
    user_store: UserStore = request.app.state.user_store
    token = service.login(user_store, body.email, body.password)
    resp = JSONResponse(status_code=200, content=SuccessResponse().model_dump())
    set_auth_cookie(resp, token)
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/auth/logout", status_code=204)
async def logout() -> Response:
    """Clear the session cookie. There is no server-side session to end."""
    resp = Response(status_code=204)
    clear_auth_cookie(resp)
    return resp


@router.post("/auth/register", status_code=201)
def register(
    request: Request,
    body: RegisterUserRequest,
    current_user: User = Depends(require_permission(REGISTER_USER)),
) -> Response:
    """Create a user account. Admin only; the new user is not logged in."""
    user_store: UserStore = request.app.state.user_store
    service.register_user(user_store, body.username, body.email, body.password, body.role)
    return Response(status_code=201)


@router.get("/auth/me", response_model=MeResponse)
async def me(current_user: User = Depends(get_current_user)) -> MeResponse:
    """Return identity information for the currently authenticated user."""
    return MeResponse.from_user(current_user)
