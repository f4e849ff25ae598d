"""Tests for the public portfolio endpoints and the template catalogue."""

from httpx import AsyncClient


async def _publish_profile(client: AsyncClient, user: dict, username: str = "ada") -> None:
    response = await client.patch("/api/v1/profile", json={"username": username}, headers=user["headers"])
    assert response.status_code == 200


class TestPublicPortfolio:
    async def test_unknown_username_returns_404(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/portfolios/nobody")

        assert response.status_code == 404
        assert response.json()["detail"]["error"]["code"] == "NOT_FOUND"

    async def test_portfolio_needs_no_authentication(self, async_client: AsyncClient, test_user: dict):
        await _publish_profile(async_client, test_user)
        await async_client.post("/api/v1/projects", json={"title": "Demo"}, headers=test_user["headers"])

        response = await async_client.get("/api/v1/portfolios/ada")

        assert response.status_code == 200
        data = response.json()
        assert data["profile"]["username"] == "ada"
        assert [project["title"] for project in data["projects"]] == ["Demo"]
        assert data["template"] == "minimal"

    async def test_only_published_blogs_are_shown(self, async_client: AsyncClient, test_user: dict):
        headers = test_user["headers"]
        await _publish_profile(async_client, test_user)
        await async_client.post("/api/v1/blogs", json={"title": "Draft", "content": "x"}, headers=headers)

        empty = await async_client.get("/api/v1/portfolios/ada")
        await async_client.post(
            "/api/v1/blogs", json={"title": "Live", "content": "x", "published": True}, headers=headers
        )
        published = await async_client.get("/api/v1/portfolios/ada")

        assert empty.json()["blogs"] == []
        assert [blog["slug"] for blog in published.json()["blogs"]] == ["live"]

    async def test_owner_edits_show_up_on_next_read(self, async_client: AsyncClient, test_user: dict):
        await _publish_profile(async_client, test_user)
        await async_client.get("/api/v1/portfolios/ada")

        await async_client.patch("/api/v1/profile", json={"headline": "Updated"}, headers=test_user["headers"])
        response = await async_client.get("/api/v1/portfolios/ada")

        assert response.json()["profile"]["headline"] == "Updated"

    async def test_renamed_username_frees_old_portfolio(self, async_client: AsyncClient, test_user: dict):
        await _publish_profile(async_client, test_user, "ada")
        await async_client.get("/api/v1/portfolios/ada")

        await _publish_profile(async_client, test_user, "countess")

        assert (await async_client.get("/api/v1/portfolios/ada")).status_code == 404
        assert (await async_client.get("/api/v1/portfolios/countess")).status_code == 200


class TestPublicBlog:
    async def test_published_post_by_slug(self, async_client: AsyncClient, test_user: dict):
        await _publish_profile(async_client, test_user)
        await async_client.post(
            "/api/v1/blogs",
            json={"title": "Hello World", "content": "Body", "published": True},
            headers=test_user["headers"],
        )

        response = await async_client.get("/api/v1/portfolios/ada/blogs/hello-world")

        assert response.status_code == 200
        assert response.json()["content"] == "Body"

    async def test_draft_is_not_public(self, async_client: AsyncClient, test_user: dict):
        await _publish_profile(async_client, test_user)
        await async_client.post(
            "/api/v1/blogs", json={"title": "Secret", "content": "Body"}, headers=test_user["headers"]
        )

        response = await async_client.get("/api/v1/portfolios/ada/blogs/secret")

        assert response.status_code == 404


class TestTemplates:
    async def test_lists_all_templates(self, async_client: AsyncClient):
        response = await async_client.get("/api/v1/templates")

        assert response.status_code == 200
        assert [item["id"] for item in response.json()["items"]] == [
            "minimal",
            "modern",
            "creative",
            "professional",
        ]
