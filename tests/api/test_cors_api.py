"""
API tests for cross-origin access from the web front-end
"""

import pytest

from core.config import AuthConfig, LazyMintConfig
from core.config.service_config import ServiceConfig

FRONTEND_ORIGIN = "https://lazymint.com"


@pytest.fixture
def settings():
    return LazyMintConfig(
        environment="testing",
        services=ServiceConfig(cors_origins=[FRONTEND_ORIGIN]),
        auth=AuthConfig(jwt_secret="api-test-jwt-secret", internal_service_secret="api-test-internal-secret"),
    )


class TestCorsAPI:

    @pytest.mark.asyncio
    async def test_preflight_for_claim_submission(self, client):
        response = await client.options(
            "/claims",
            headers={
                "Origin": FRONTEND_ORIGIN,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == FRONTEND_ORIGIN
        assert "POST" in response.headers["access-control-allow-methods"]

    @pytest.mark.asyncio
    async def test_status_poll_carries_origin_header(self, client, active_campaign):
        # Given: a submitted claim
        submitted = await client.post(
            "/claims", json={"campaign_id": active_campaign.id, "email": "fan@example.com"}
        )
        claim_id = submitted.json()["data"]["claim_id"]

        # When: the front-end polls its status cross-origin
        response = await client.get(f"/claims/{claim_id}/status", headers={"Origin": FRONTEND_ORIGIN})

        # Then
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == FRONTEND_ORIGIN

    @pytest.mark.asyncio
    async def test_unknown_origin_rejected(self, client):
        response = await client.options(
            "/claims/verify",
            headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "POST"},
        )

        assert response.status_code == 400
        assert "access-control-allow-origin" not in response.headers
