"""
API tests for campaign routes
"""

import io

import pytest
from PIL import Image

from microservices.campaign_service.models import CampaignStatus
from tests.fixtures import make_campaign

CAMPAIGN_BODY = {
    "title": "Spring Drop",
    "description": "Limited spring collectible drop for early fans",
    "max_claims": 100,
    "is_public": True,
}


class TestCampaignCrudAPI:

    @pytest.mark.asyncio
    async def test_create_requires_auth(self, client):
        response = await client.post("/campaigns", json=CAMPAIGN_BODY)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_get_update_archive(self, client, owner, owner_headers):
        # Create
        created = await client.post("/campaigns", json=CAMPAIGN_BODY, headers=owner_headers)
        assert created.status_code == 201
        campaign = created.json()["data"]
        assert campaign["status"] == "draft"
        assert campaign["creator_id"] == owner.subject_id

        # Get (public, anonymous)
        fetched = await client.get(f"/campaigns/{campaign['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["data"]["title"] == "Spring Drop"

        # Activate
        updated = await client.put(
            f"/campaigns/{campaign['id']}", json={"status": "active"}, headers=owner_headers
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["status"] == "active"

        # Archive
        archived = await client.delete(f"/campaigns/{campaign['id']}", headers=owner_headers)
        assert archived.status_code == 200
        assert archived.json()["data"]["status"] == "archived"

    @pytest.mark.asyncio
    async def test_invalid_create_is_400(self, client, owner_headers):
        response = await client.post(
            "/campaigns", json={**CAMPAIGN_BODY, "max_claims": 20000}, headers=owner_headers
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_invalid_transition_is_400(self, client, store, owner, owner_headers):
        campaign = make_campaign(creator_id=owner.subject_id, status=CampaignStatus.DRAFT)
        store.seed("campaigns", campaign.id, campaign.to_document())

        response = await client.put(
            f"/campaigns/{campaign.id}", json={"status": "completed"}, headers=owner_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_STATUS_TRANSITION"

    @pytest.mark.asyncio
    async def test_unknown_status_value_is_400(self, client, active_campaign, owner_headers):
        response = await client.put(
            f"/campaigns/{active_campaign.id}", json={"status": "launched"}, headers=owner_headers
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_private_campaign_hidden_from_others(self, client, store, owner, owner_headers, stranger_headers):
        campaign = make_campaign(creator_id=owner.subject_id, is_public=False)
        store.seed("campaigns", campaign.id, campaign.to_document())

        assert (await client.get(f"/campaigns/{campaign.id}", headers=owner_headers)).status_code == 200
        assert (await client.get(f"/campaigns/{campaign.id}", headers=stranger_headers)).status_code == 403
        assert (await client.get(f"/campaigns/{campaign.id}")).status_code == 403


class TestCampaignListingsAPI:

    @pytest.mark.asyncio
    async def test_public_listing(self, client, active_campaign):
        response = await client.get("/campaigns/public")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 1
        assert body["data"][0]["id"] == active_campaign.id

    @pytest.mark.asyncio
    async def test_my_listing(self, client, active_campaign, owner_headers, stranger_headers):
        mine = await client.get("/campaigns/my", headers=owner_headers)
        theirs = await client.get("/campaigns/my", headers=stranger_headers)

        assert [c["id"] for c in mine.json()["data"]] == [active_campaign.id]
        assert theirs.json()["data"] == []

    @pytest.mark.asyncio
    async def test_my_listing_requires_auth(self, client):
        assert (await client.get("/campaigns/my")).status_code == 401


class TestCampaignAssetsAPI:

    @pytest.mark.asyncio
    async def test_generate_qr(self, client, active_campaign, owner_headers, object_store):
        response = await client.post(f"/campaigns/{active_campaign.id}/qr", headers=owner_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["qr_data"]["campaign_id"] == active_campaign.id
        assert f"qrcodes/{active_campaign.id}/campaign-qr.png" in object_store.objects

    @pytest.mark.asyncio
    async def test_upload_logo(self, client, active_campaign, owner, owner_headers):
        buffer = io.BytesIO()
        Image.new("RGB", (800, 400), (10, 120, 200)).save(buffer, format="PNG")

        response = await client.post(
            f"/campaigns/{active_campaign.id}/logo",
            files={"logo": ("logo.png", buffer.getvalue(), "image/png")},
            headers=owner_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["path"] == f"logos/{owner.subject_id}/{active_campaign.id}-logo.jpg"
        assert data["logo_url"].endswith(data["path"])

    @pytest.mark.asyncio
    async def test_upload_without_file(self, client, active_campaign, owner_headers):
        response = await client.post(f"/campaigns/{active_campaign.id}/logo", headers=owner_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "NO_FILE_UPLOADED"

    @pytest.mark.asyncio
    async def test_upload_wrong_type(self, client, active_campaign, owner_headers):
        response = await client.post(
            f"/campaigns/{active_campaign.id}/logo",
            files={"logo": ("notes.txt", b"hello", "text/plain")},
            headers=owner_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILE_TYPE"
