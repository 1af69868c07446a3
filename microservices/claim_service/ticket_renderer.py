"""
Ticket Renderer

Composes the 800x600 PNG ticket for a claim: campaign logo, title, claim
number, description, claim date, footer, and a verification QR code.
"""

import asyncio
import logging
from typing import Optional

import httpx
from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from core.imaging import fit_within, image_to_bytes, open_image, render_qr_image
from microservices.campaign_service.models import Campaign
from .models import Claim

logger = logging.getLogger(__name__)

FONT_CANDIDATES = ("DejaVuSans.ttf", "Arial.ttf", "arial.ttf")
BOLD_FONT_CANDIDATES = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")


def _load_font(size: int, bold: bool = False):
    for name in BOLD_FONT_CANDIDATES if bold else FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default()


def truncate_description(description: str, limit: int = 100) -> str:
    if len(description) <= limit:
        return description
    return description[:limit] + "..."


class TicketRenderer:
    """Pillow ticket renderer"""

    WIDTH = 800
    HEIGHT = 600
    LOGO_BOX = (150, 150)
    LOGO_POSITION = (50, 50)
    QR_SIZE = 150
    QR_MARGIN = 1
    QR_POSITION = (600, 400)
    TEXT_X = 250

    def __init__(
        self,
        verify_base_url: str = "https://lazymint.com/verify",
        http_timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.verify_base_url = verify_base_url.rstrip("/")
        self.http_timeout = http_timeout
        self._transport = transport

    async def _fetch_logo(self, url: str) -> Optional[Image.Image]:
        try:
            async with httpx.AsyncClient(timeout=self.http_timeout, transport=self._transport) as client:
                response = await client.get(url, follow_redirects=True)
                response.raise_for_status()
            return open_image(response.content)
        except (httpx.HTTPError, UnidentifiedImageError, OSError) as e:
            logger.warning(f"Could not load campaign logo {url}: {e}")
            return None

    def ticket_qr_data(self, campaign: Campaign, claim: Claim) -> dict:
        return {
            "type": "lazymint_ticket",
            "claim_id": claim.id,
            "campaign_id": campaign.id,
            "claim_number": claim.claim_number,
            "verify_url": f"{self.verify_base_url}/{claim.id}",
        }

    def compose(self, campaign: Campaign, claim: Claim, logo: Optional[Image.Image] = None) -> bytes:
        """Draw the ticket synchronously and return PNG bytes"""
        ticket = Image.new("RGB", (self.WIDTH, self.HEIGHT), (255, 255, 255))

        if logo is not None:
            logo = fit_within(logo.convert("RGBA"), self.LOGO_BOX, enlarge=False)
            ticket.paste(logo, self.LOGO_POSITION, logo)

        draw = ImageDraw.Draw(ticket)
        title_font = _load_font(36, bold=True)
        number_font = _load_font(48, bold=True)
        body_font = _load_font(18)
        footer_font = _load_font(14)

        # y values are text baselines
        draw.text((self.TEXT_X, 100 - 36), campaign.title, fill="#333333", font=title_font)
        draw.text((self.TEXT_X, 200 - 48), f"Claim #{claim.claim_number}", fill="#007bff", font=number_font)
        draw.text(
            (self.TEXT_X, 250 - 18),
            truncate_description(campaign.description),
            fill="#666666",
            font=body_font,
        )
        draw.text(
            (self.TEXT_X, 500 - 14),
            f"Claimed: {claim.created_at.strftime('%Y-%m-%d')}",
            fill="#999999",
            font=footer_font,
        )
        draw.text((self.TEXT_X, 530 - 14), "LazyMint Digital Ticket", fill="#999999", font=footer_font)

        qr = render_qr_image(self.ticket_qr_data(campaign, claim), self.QR_SIZE, self.QR_MARGIN)
        ticket.paste(qr, self.QR_POSITION)

        return image_to_bytes(ticket, "PNG")

    async def render_ticket(self, campaign: Campaign, claim: Claim) -> bytes:
        logo = await self._fetch_logo(campaign.logo_url) if campaign.logo_url else None
        return await asyncio.to_thread(self.compose, campaign, claim, logo)
