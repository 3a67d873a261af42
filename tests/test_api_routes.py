"""
tests/test_api_routes.py -- Integration tests for the auth and item routes.

These tests exercise the full stack: FastAPI routing -> cookie middleware ->
permission dependency -> service -> store -> response model / error envelope.

Coverage:
  - Login: cookie attributes, uniform 401 for bad credentials, cookie reuse
  - Logout: 204 and cookie cleared
  - Register user: admin 201, secretary 403, anonymous 401, duplicate 400,
    invalid role 401
  - Items: public list/search/detail, privileged register/claim, 404s, 422

Fixtures used (from conftest.py):
  - api:    ApiContext with admin and secretary tokens
  - client: the module TestClient with an empty cookie jar
"""

from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from conftest import ADMIN_EMAIL, SECRETARY_EMAIL, SECRETARY_PASSWORD, ApiContext
from core.config import get_settings


def _set_cookie_headers(resp) -> list[str]:
    return [v for k, v in resp.headers.multi_items() if k.lower() == "set-cookie"]


def _session_cookie(resp) -> str:
    name = get_settings().auth_cookie_name
    matches = [h for h in _set_cookie_headers(resp) if h.startswith(f"{name}=")]
    assert len(matches) == 1, f"Expected one {name} Set-Cookie header, got: {_set_cookie_headers(resp)}"
    return matches[0]


_ITEM = {
    "title": "Lost Wallet",
    "description": "Black leather wallet found in the reading room",
    "date_found": "2026-02-05",
    "location_found": "Central Library",
    "contact_info": "library@ufind.local",
}


def _register_item(client: TestClient, api: ApiContext, **overrides) -> None:
    resp = client.post("/api/v1/items", json={**_ITEM, **overrides}, headers=api.as_secretary())
    assert resp.status_code == 201, resp.text


def _find_item_id(client: TestClient, title: str) -> str:
    resp = client.get("/api/v1/items/search", params={"query": title})
    assert resp.status_code == 200, resp.text
    matches = [i for i in resp.json()["content"] if i["title"] == title]
    assert matches, f"No item titled {title!r}"
    return matches[0]["id"]


# ---------------------------------------------------------------------------
# Login / logout / me
# ---------------------------------------------------------------------------


class TestLogin:
    def test_valid_credentials_set_session_cookie(self, client: TestClient) -> None:
        resp = client.post("/api/v1/auth/login", json={"email": SECRETARY_EMAIL, "password": SECRETARY_PASSWORD})
        assert resp.status_code == 200, resp.text
        assert resp.json() == {"success": True}
        assert resp.headers["cache-control"] == "no-store"
        cookie = _session_cookie(resp).lower()
        assert "httponly" in cookie
        assert "samesite=strict" in cookie
        assert "path=/" in cookie
        assert f"max-age={get_settings().token_expire_seconds}" in cookie

    def test_cookie_from_login_authenticates_next_request(self, client: TestClient) -> None:
        client.post("/api/v1/auth/login", json={"email": SECRETARY_EMAIL, "password": SECRETARY_PASSWORD})
        resp = client.get("/api/v1/auth/me")
        assert resp.status_code == 200, resp.text
        assert resp.json()["email"] == SECRETARY_EMAIL
        assert resp.json()["role"] == "ROLE_SECRETARY"

    def test_wrong_password_and_unknown_email_look_identical(self, client: TestClient) -> None:
        wrong = client.post("/api/v1/auth/login", json={"email": SECRETARY_EMAIL, "password": "wrongPassword"})
        unknown = client.post("/api/v1/auth/login", json={"email": "nobody@ufind.local", "password": "wrongPassword"})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {"error": "Bad Credentials."}
        assert not _set_cookie_headers(wrong)

    def test_malformed_body_is_422(self, client: TestClient) -> None:
        resp = client.post("/api/v1/auth/login", json={"email": "not-an-email", "password": "x"})
        assert resp.status_code == 422
        assert "error" in resp.json()


class TestLogout:
    def test_logout_clears_cookie(self, client: TestClient) -> None:
        resp = client.post("/api/v1/auth/logout")
        assert resp.status_code == 204
        cookie = _session_cookie(resp).lower()
        assert "max-age=0" in cookie

    def test_logged_out_client_is_anonymous(self, client: TestClient) -> None:
        client.post("/api/v1/auth/login", json={"email": SECRETARY_EMAIL, "password": SECRETARY_PASSWORD})
        client.post("/api/v1/auth/logout")
        resp = client.get("/api/v1/auth/me")
        assert resp.status_code == 401


class TestMe:
    def test_anonymous(self, client: TestClient) -> None:
        resp = client.get("/api/v1/auth/me")
        assert resp.status_code == 401
        assert resp.json() == {"error": "Authentication required."}

    def test_admin(self, client: TestClient, api: ApiContext) -> None:
        resp = client.get("/api/v1/auth/me", headers=api.as_admin())
        assert resp.status_code == 200
        assert resp.json()["email"] == ADMIN_EMAIL
        assert resp.json()["role"] == "ROLE_ADMIN"


# ---------------------------------------------------------------------------
# User registration
# ---------------------------------------------------------------------------


class TestRegisterUser:
    def _body(self, email: str, role: str = "ROLE_SECRETARY") -> dict:
        return {"username": email.split("@")[0], "email": email, "password": "password@2026", "role": role}

    def test_admin_registers_user_without_auto_login(self, client: TestClient, api: ApiContext) -> None:
        resp = client.post("/api/v1/auth/register", json=self._body("joao@ufind.local"), headers=api.as_admin())
        assert resp.status_code == 201, resp.text
        assert resp.content == b""
        assert not _set_cookie_headers(resp)
        # The new account can log in on its own
        login = client.post("/api/v1/auth/login", json={"email": "joao@ufind.local", "password": "password@2026"})
        assert login.status_code == 200

    def test_secretary_is_forbidden(self, client: TestClient, api: ApiContext) -> None:
        resp = client.post("/api/v1/auth/register", json=self._body("ana@ufind.local"), headers=api.as_secretary())
        assert resp.status_code == 403
        assert resp.json() == {"error": "Access denied."}
        assert api.user_store.get_by_email("ana@ufind.local") is None

    def test_anonymous_is_rejected(self, client: TestClient, api: ApiContext) -> None:
        resp = client.post("/api/v1/auth/register", json=self._body("eve@ufind.local"))
        assert resp.status_code == 401
        assert api.user_store.get_by_email("eve@ufind.local") is None

    def test_duplicate_email_is_400(self, client: TestClient, api: ApiContext) -> None:
        resp = client.post("/api/v1/auth/register", json=self._body(SECRETARY_EMAIL), headers=api.as_admin())
        assert resp.status_code == 400
        assert resp.json() == {"error": "This user already exists."}

    def test_invalid_role_is_401(self, client: TestClient, api: ApiContext) -> None:
        resp = client.post(
            "/api/v1/auth/register", json=self._body("carl@ufind.local", role="ROLE_USER"), headers=api.as_admin()
        )
        assert resp.status_code == 401
        assert resp.json() == {"error": "Invalid role ROLE_USER"}


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


class TestItemRegistration:
    def test_secretary_registers_item_available_by_default(self, client: TestClient, api: ApiContext) -> None:
        resp = client.post("/api/v1/items", json={**_ITEM, "title": "Red Scarf"}, headers=api.as_secretary())
        assert resp.status_code == 201, resp.text
        assert resp.content == b""
        item_id = _find_item_id(client, "Red Scarf")
        detail = client.get(f"/api/v1/items/{item_id}").json()
        assert detail["status"] == "AVAILABLE"
        assert detail["location_found"] == "Central Library"
        assert detail["created_at"] == detail["updated_at"]

    def test_admin_registers_item(self, client: TestClient, api: ApiContext) -> None:
        resp = client.post("/api/v1/items", json={**_ITEM, "title": "Blue Cap"}, headers=api.as_admin())
        assert resp.status_code == 201

    def test_anonymous_cannot_register(self, client: TestClient) -> None:
        resp = client.post("/api/v1/items", json=_ITEM)
        assert resp.status_code == 401
        assert resp.json() == {"error": "Authentication required."}

    def test_missing_title_is_422(self, client: TestClient, api: ApiContext) -> None:
        body = {k: v for k, v in _ITEM.items() if k != "title"}
        resp = client.post("/api/v1/items", json=body, headers=api.as_secretary())
        assert resp.status_code == 422
        assert "title" in resp.json()["error"]


class TestItemReads:
    def test_list_is_public_and_paginated(self, client: TestClient, api: ApiContext) -> None:
        for n in range(3):
            _register_item(client, api, title=f"Notebook {n}")
        resp = client.get("/api/v1/items", params={"page": 0, "size": 2})
        assert resp.status_code == 200
        data = resp.json()
        assert data["page"] == 0
        assert data["size"] == 2
        assert len(data["content"]) == 2
        assert data["total_elements"] >= 3
        assert data["total_pages"] == -(-data["total_elements"] // 2)

    def test_page_size_is_capped(self, client: TestClient) -> None:
        resp = client.get("/api/v1/items", params={"size": 1000})
        assert resp.status_code == 422

    def test_search_is_case_insensitive(self, client: TestClient, api: ApiContext) -> None:
        _register_item(client, api, title="Graphing Calculator", location_found="Lab 3")
        resp = client.get("/api/v1/items/search", params={"query": "GRAPHING calc"})
        assert resp.status_code == 200
        titles = [i["title"] for i in resp.json()["content"]]
        assert titles == ["Graphing Calculator"]

    def test_search_status_filter(self, client: TestClient, api: ApiContext) -> None:
        _register_item(client, api, title="Violin Case")
        resp = client.get("/api/v1/items/search", params={"query": "violin", "status": "CLAIMED"})
        assert resp.status_code == 200
        assert resp.json()["content"] == []

    def test_get_unknown_item_is_404(self, client: TestClient) -> None:
        missing = uuid.uuid4()
        resp = client.get(f"/api/v1/items/{missing}")
        assert resp.status_code == 404
        assert resp.json() == {"error": f"Item not found with id: {missing}"}

    def test_get_with_non_uuid_id_is_422(self, client: TestClient) -> None:
        resp = client.get("/api/v1/items/not-a-uuid")
        assert resp.status_code == 422


class TestClaim:
    def test_claim_transitions_and_is_idempotent(self, client: TestClient, api: ApiContext) -> None:
        _register_item(client, api, title="Silver Ring")
        item_id = _find_item_id(client, "Silver Ring")

        first = client.patch("/api/v1/items", json={"id": item_id}, headers=api.as_secretary())
        assert first.status_code == 200, first.text
        assert client.get(f"/api/v1/items/{item_id}").json()["status"] == "CLAIMED"

        second = client.patch("/api/v1/items", json={"id": item_id}, headers=api.as_admin())
        assert second.status_code == 200
        assert client.get(f"/api/v1/items/{item_id}").json()["status"] == "CLAIMED"

    def test_claim_unknown_item_is_404(self, client: TestClient, api: ApiContext) -> None:
        resp = client.patch("/api/v1/items", json={"id": str(uuid.uuid4())}, headers=api.as_secretary())
        assert resp.status_code == 404
        assert "wasn't found" in resp.json()["error"]

    def test_anonymous_cannot_claim(self, client: TestClient, api: ApiContext) -> None:
        _register_item(client, api, title="Headphones")
        item_id = _find_item_id(client, "Headphones")
        resp = client.patch("/api/v1/items", json={"id": item_id})
        assert resp.status_code == 401
        assert client.get(f"/api/v1/items/{item_id}").json()["status"] == "AVAILABLE"
