"""Tests for the /api/v1/experience endpoints."""

from httpx import AsyncClient


class TestExperience:
    async def test_current_job_drops_end_date(self, async_client: AsyncClient, test_user: dict):
        response = await async_client.post(
            "/api/v1/experience",
            json={
                "company": "Acme",
                "position": "Engineer",
                "start_date": "2022-01-01",
                "end_date": "2023-01-01",
                "current_job": True,
            },
            headers=test_user["headers"],
        )

        assert response.status_code == 201
        assert response.json()["current_job"] is True
        assert response.json()["end_date"] is None

    async def test_end_before_start_returns_422(self, async_client: AsyncClient, test_user: dict):
        response = await async_client.post(
            "/api/v1/experience",
            json={"company": "Acme", "position": "Engineer", "start_date": "2023-01-01", "end_date": "2022-01-01"},
            headers=test_user["headers"],
        )
        assert response.status_code == 422

    async def test_update_and_delete(self, async_client: AsyncClient, test_user: dict):
        headers = test_user["headers"]
        created = (
            await async_client.post(
                "/api/v1/experience", json={"company": "Acme", "position": "Engineer"}, headers=headers
            )
        ).json()

        updated = await async_client.patch(
            f"/api/v1/experience/{created['id']}", json={"position": "Lead"}, headers=headers
        )
        listed = await async_client.get("/api/v1/experience", headers=headers)
        deleted = await async_client.delete(f"/api/v1/experience/{created['id']}", headers=headers)

        assert updated.json()["position"] == "Lead"
        assert listed.json()[0]["position"] == "Lead"
        assert deleted.status_code == 204

    async def test_unknown_id_returns_404(self, async_client: AsyncClient, test_user: dict):
        response = await async_client.patch(
            "/api/v1/experience/00000000-0000-0000-0000-000000000000",
            json={"position": "Lead"},
            headers=test_user["headers"],
        )
        assert response.status_code == 404
