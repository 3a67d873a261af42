"""
tests/conftest.py -- Shared test fixtures for UFind integration tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users + items
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api: module-scoped ApiContext (TestClient, stores, admin/secretary tokens)
  - client: the same TestClient with an empty cookie jar for every test

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.

DEBUG must be set before any auth/core import so get_settings() auto-generates
SECRET_KEY in dev mode rather than raising ValueError. LOGIN_RATE_LIMIT is
raised so login-heavy test modules never trip the limiter.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass

# CRITICAL: set before any auth/core import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOGIN_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import Role, User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password
from core.config import get_settings
from items.store import ItemStore

ADMIN_EMAIL = "admin@ufind.local"
ADMIN_PASSWORD = "adminpass123"
SECRETARY_EMAIL = "maria.santos@ufind.local"
SECRETARY_PASSWORD = "password@2026"


@dataclass
class ApiContext:
    client: TestClient
    user_store: UserStore
    item_store: ItemStore
    admin_token: str
    secretary_token: str

    def cookie(self, token: str) -> dict[str, str]:
        """Headers carrying token in the session cookie."""
        return {"Cookie": f"{get_settings().auth_cookie_name}={token}"}

    def as_admin(self) -> dict[str, str]:
        return self.cookie(self.admin_token)

    def as_secretary(self) -> dict[str, str]:
        return self.cookie(self.secretary_token)


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, ItemStore]:
    """Create isolated named shared-memory SQLite stores.

    Args:
        db_suffix: Unique string appended to the DB name so test modules don't
                   share state.
    """
    users_url = f"sqlite:///file:test_users_{db_suffix}?mode=memory&cache=shared&uri=true"
    items_url = f"sqlite:///file:test_items_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url=users_url), ItemStore(db_url=items_url)


def _patch_lifespan(user_store: UserStore, item_store: ItemStore):
    """Return a lifespan that installs pre-created test stores on app.state."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.item_store = item_store
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api(request) -> Generator[ApiContext, None, None]:
    """Yield an ApiContext backed by fresh stores for this test module.

    One admin and one secretary exist before the client starts; their tokens
    are minted directly so tests don't depend on the login route.
    """
    suffix = request.module.__name__.rsplit(".", 1)[-1]
    user_store, item_store = _make_test_stores(suffix)

    user_store.create_user(
        User(username="admin", email=ADMIN_EMAIL, hashed_password=hash_password(ADMIN_PASSWORD), role=Role.ADMIN)
    )
    user_store.create_user(
        User(
            username="maria.santos",
            email=SECRETARY_EMAIL,
            hashed_password=hash_password(SECRETARY_PASSWORD),
            role=Role.SECRETARY,
        )
    )
    admin_token = create_access_token(ADMIN_EMAIL, Role.ADMIN.value)
    secretary_token = create_access_token(SECRETARY_EMAIL, Role.SECRETARY.value)

    app.router.lifespan_context = _patch_lifespan(user_store, item_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiContext(
            client=client,
            user_store=user_store,
            item_store=item_store,
            admin_token=admin_token,
            secretary_token=secretary_token,
        )

    user_store.close()
    item_store.close()


@pytest.fixture
def client(api: ApiContext) -> Generator[TestClient, None, None]:
    """The module's TestClient with an empty cookie jar.

    Login responses set the session cookie on the client; clearing it keeps one
    test's login from authenticating the next test's requests.
    """
    api.client.cookies.clear()
    yield api.client
    api.client.cookies.clear()
