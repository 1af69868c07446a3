"""
Component Tests for outbound HTTP: notification delivery and logo fetch

Requests are answered by httpx.MockTransport.
"""

import io
import json

import httpx
import pytest
from PIL import Image

from microservices.claim_service.clients.notification_client import NotificationClient
from microservices.claim_service.ticket_renderer import TicketRenderer
from tests.fixtures import make_campaign, make_claim


class TestNotificationClient:

    @pytest.mark.asyncio
    async def test_posts_email_payload(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "notification_id": "ntf_1"})

        client = NotificationClient("http://notify.test/", transport=httpx.MockTransport(handler))

        response = await client.send_email(
            recipient_email="fan@example.com",
            subject="Verify",
            html_content="<p>hi</p>",
            text_content="hi",
            metadata={"claim_id": "clm_1"},
        )

        assert response["notification_id"] == "ntf_1"
        assert captured["url"] == "http://notify.test/api/v1/notifications/send"
        assert captured["body"]["type"] == "email"
        assert captured["body"]["recipient_email"] == "fan@example.com"
        assert captured["body"]["content"] == "hi"
        assert captured["body"]["html_content"] == "<p>hi</p>"
        assert captured["body"]["metadata"] == {"claim_id": "clm_1"}

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(503, text="down"))
        client = NotificationClient("http://notify.test", transport=transport)

        with pytest.raises(httpx.HTTPStatusError):
            await client.send_email("fan@example.com", "s", "<p/>", "t")


class TestTicketLogoFetch:

    @staticmethod
    def png(color) -> bytes:
        buffer = io.BytesIO()
        Image.new("RGB", (300, 300), color).save(buffer, format="PNG")
        return buffer.getvalue()

    @pytest.mark.asyncio
    async def test_logo_drawn_when_fetch_succeeds(self):
        logo = self.png((0, 0, 255))
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=logo))
        renderer = TicketRenderer(transport=transport)
        campaign = make_campaign(logo_url="https://cdn.test/logo.png")

        ticket = await renderer.render_ticket(campaign, make_claim(campaign))

        image = Image.open(io.BytesIO(ticket)).convert("RGB")
        assert image.size == (800, 600)
        assert image.getpixel((100, 100)) == (0, 0, 255)

    @pytest.mark.asyncio
    async def test_ticket_rendered_without_logo_on_fetch_failure(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        renderer = TicketRenderer(transport=transport)
        campaign = make_campaign(logo_url="https://cdn.test/missing.png")

        ticket = await renderer.render_ticket(campaign, make_claim(campaign))

        image = Image.open(io.BytesIO(ticket)).convert("RGB")
        assert image.getpixel((100, 100)) == (255, 255, 255)
