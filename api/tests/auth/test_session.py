"""Tests for login, logout, refresh and the session lookup."""

from datetime import datetime, timedelta, timezone

from freezegun import freeze_time
from httpx import AsyncClient

from folio.auth.jwt import create_refresh_token, decode_token
from folio.services.dashboard import dashboard_key


class TestLogin:
    async def test_login_with_valid_credentials_sets_cookies(self, async_client: AsyncClient, test_user: dict):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": test_user["email"], "password": test_user["password"]},
        )

        assert response.status_code == 200
        assert response.json()["user_id"] == test_user["user_id"]
        assert "access_token" in response.cookies
        assert "refresh_token" in response.cookies

    async def test_login_cookies_are_httponly_and_strict(self, async_client: AsyncClient, test_user: dict):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": test_user["email"], "password": test_user["password"]},
        )
        set_cookie = response.headers.get("set-cookie", "").lower()
        assert "httponly" in set_cookie
        assert "samesite=strict" in set_cookie

    async def test_wrong_password_returns_401(self, async_client: AsyncClient, test_user: dict):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": test_user["email"], "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["detail"]["error"]["code"] == "UNAUTHORIZED"

    async def test_unknown_email_returns_401(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": "whatever"},
        )
        assert response.status_code == 401


class TestSession:
    async def test_session_returns_identity(self, async_client: AsyncClient, test_user: dict):
        response = await async_client.get("/api/v1/auth/session", headers=test_user["headers"])

        assert response.status_code == 200
        assert response.json()["email"] == test_user["email"]

    async def test_session_accepts_access_cookie(self, async_client: AsyncClient, test_user: dict):
        token = test_user["headers"]["Authorization"].removeprefix("Bearer ")
        async_client.cookies.set("access_token", token)

        response = await async_client.get("/api/v1/auth/session")

        assert response.status_code == 200

    async def test_session_without_token_returns_401(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/auth/session")
        assert response.status_code == 401

    async def test_refresh_token_is_not_an_access_token(self, async_client: AsyncClient, test_user: dict):
        token = create_refresh_token(test_user["user_id"])

        response = await async_client.get(
            "/api/v1/auth/session", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401


class TestRefresh:
    async def test_refresh_issues_new_cookies(self, async_client: AsyncClient, test_user: dict):
        async_client.cookies.set("refresh_token", create_refresh_token(test_user["user_id"]))

        response = await async_client.post("/api/v1/auth/refresh")

        assert response.status_code == 200
        assert "access_token" in response.cookies
        assert response.json()["user_id"] == test_user["user_id"]

    async def test_refresh_without_cookie_returns_401(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/auth/refresh")
        assert response.status_code == 401

    async def test_expired_refresh_token_is_rejected(self, async_client: AsyncClient, test_user: dict):
        issued = datetime.now(timezone.utc) - timedelta(days=8)
        with freeze_time(issued):
            token = create_refresh_token(test_user["user_id"])
        async_client.cookies.set("refresh_token", token)

        response = await async_client.post("/api/v1/auth/refresh")

        assert response.status_code == 401

    def test_refresh_token_lifetime_is_seven_days(self):
        with freeze_time("2026-01-01 00:00:00"):
            token = create_refresh_token("user")
        with freeze_time("2026-01-07 23:59:00"):
            assert decode_token(token, expected_type="refresh") is not None
        with freeze_time("2026-01-08 00:01:00"):
            assert decode_token(token) is None


class TestLogout:
    async def test_logout_returns_204(self, async_client: AsyncClient, test_user: dict):
        response = await async_client.post("/api/v1/auth/logout", headers=test_user["headers"])
        assert response.status_code == 204

    async def test_logout_clears_cached_dashboard(self, async_client: AsyncClient, test_user: dict, app_cache):
        await async_client.get("/api/v1/dashboard", headers=test_user["headers"])
        assert app_cache.get(dashboard_key(test_user["user_id"])) is not None

        await async_client.post("/api/v1/auth/logout", headers=test_user["headers"])

        assert app_cache.get(dashboard_key(test_user["user_id"])) is None
        assert len(app_cache) == 0

    async def test_logout_without_session_still_succeeds(self, async_client: AsyncClient):
        response = await async_client.post("/api/v1/auth/logout")
        assert response.status_code == 204

    async def test_next_user_never_sees_previous_users_data(
        self, async_client: AsyncClient, test_user: dict, second_user: dict
    ):
        await async_client.post("/api/v1/projects", json={"title": "Private"}, headers=test_user["headers"])
        await async_client.get("/api/v1/dashboard", headers=test_user["headers"])
        await async_client.post("/api/v1/auth/logout", headers=test_user["headers"])

        response = await async_client.get("/api/v1/dashboard", headers=second_user["headers"])

        assert response.json()["projects"] == []
        assert response.json()["profile"]["id"] == second_user["user_id"]
