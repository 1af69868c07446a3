"""
Campaign Asset Service

Owner-only generation of the campaign QR code and upload of the campaign
logo. Images are rendered with qrcode and Pillow and stored in the object
store; the resulting public URL is written back onto the campaign.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from core.document_store import DocumentStoreProtocol, TransactionProtocol
from core.errors import ErrorCode, ValidationError
from core.imaging import fit_within, image_to_bytes, open_image, render_qr_png
from core.jwt_manager import Identity
from core.object_store import ObjectStoreProtocol
from .campaign_service import CampaignService
from .models import AssetUploadResponse

logger = logging.getLogger(__name__)


class AssetService:
    """Campaign QR and logo assets"""

    QR_SIZE = 512
    QR_MARGIN = 2
    LOGO_BOX = (300, 300)
    LOGO_JPEG_QUALITY = 85
    DEFAULT_LOGO_MAX_BYTES = 5 * 1024 * 1024

    def __init__(
        self,
        store: DocumentStoreProtocol,
        campaign_service: CampaignService,
        object_store: ObjectStoreProtocol,
        claim_base_url: str = "https://lazymint.com/claim",
        logo_max_bytes: int = DEFAULT_LOGO_MAX_BYTES,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.campaign_service = campaign_service
        self.object_store = object_store
        self.claim_base_url = claim_base_url.rstrip("/")
        self.logo_max_bytes = logo_max_bytes
        self._now = clock or (lambda: datetime.now(timezone.utc))

    @staticmethod
    def qr_path(campaign_id: str) -> str:
        return f"qrcodes/{campaign_id}/campaign-qr.png"

    @staticmethod
    def logo_path(owner_id: str, campaign_id: str) -> str:
        return f"logos/{owner_id}/{campaign_id}-logo.jpg"

    async def _set_campaign_field(self, campaign_id: str, field: str, url: str) -> None:
        async def body(tx: TransactionProtocol) -> None:
            await self.campaign_service.repository.update_campaign(
                tx, campaign_id, {field: url, "updated_at": self._now()}
            )

        await self.store.run_transaction(body)

    async def generate_campaign_qr(self, campaign_id: str, caller: Identity) -> Dict[str, Any]:
        """Render the campaign's claim-link QR code and store its URL on the campaign"""
        campaign = await self.campaign_service.get_owned_campaign(campaign_id, caller)

        qr_data = {
            "type": "lazymint_campaign",
            "campaign_id": campaign.id,
            "title": campaign.title,
            "claim_url": f"{self.claim_base_url}/{campaign.id}",
        }
        png = await asyncio.to_thread(render_qr_png, qr_data, self.QR_SIZE, self.QR_MARGIN)

        path = self.qr_path(campaign.id)
        url = await self.object_store.put_object(
            path,
            png,
            "image/png",
            metadata={
                "campaign_id": campaign.id,
                "created_by": caller.subject_id,
                "created_at": self._now().isoformat(),
            },
        )
        await self._set_campaign_field(campaign.id, "qr_code_url", url)

        logger.info(f"Campaign QR generated: {campaign.id}")
        return {"qr_code_url": url, "qr_data": qr_data}

    def _optimize_logo(self, data: bytes) -> bytes:
        try:
            image = open_image(data)
        except UnidentifiedImageError:
            raise ValidationError("File must be an image", code=ErrorCode.INVALID_FILE_TYPE, field="logo")

        image = ImageOps.exif_transpose(image)
        if image.mode != "RGB":
            # JPEG has no alpha; flatten onto white
            background = Image.new("RGB", image.size, (255, 255, 255))
            rgba = image.convert("RGBA")
            background.paste(rgba, mask=rgba.split()[-1])
            image = background
        image = fit_within(image, self.LOGO_BOX, enlarge=False)
        return image_to_bytes(image, "JPEG", quality=self.LOGO_JPEG_QUALITY)

    async def upload_campaign_logo(
        self,
        campaign_id: str,
        caller: Identity,
        data: bytes,
        content_type: Optional[str],
    ) -> AssetUploadResponse:
        """
        Resize an uploaded logo to fit 300x300 and store it as JPEG

        Raises:
            ValidationError: NO_FILE_UPLOADED, INVALID_FILE_TYPE or FILE_TOO_LARGE
        """
        if not data:
            raise ValidationError("No file uploaded", code=ErrorCode.NO_FILE_UPLOADED, field="logo")
        if not content_type or not content_type.startswith("image/"):
            raise ValidationError("File must be an image", code=ErrorCode.INVALID_FILE_TYPE, field="logo")
        if len(data) > self.logo_max_bytes:
            raise ValidationError(
                f"Logo must be at most {self.logo_max_bytes // (1024 * 1024)}MB",
                code=ErrorCode.FILE_TOO_LARGE,
                field="logo",
            )

        campaign = await self.campaign_service.get_owned_campaign(campaign_id, caller)
        jpeg = await asyncio.to_thread(self._optimize_logo, data)

        path = self.logo_path(caller.subject_id, campaign.id)
        url = await self.object_store.put_object(
            path,
            jpeg,
            "image/jpeg",
            metadata={
                "campaign_id": campaign.id,
                "uploaded_by": caller.subject_id,
                "uploaded_at": self._now().isoformat(),
            },
        )
        await self._set_campaign_field(campaign.id, "logo_url", url)

        logger.info(f"Campaign logo uploaded: {campaign.id} ({len(data)} -> {len(jpeg)} bytes)")
        return AssetUploadResponse(campaign_id=campaign.id, url=url, path=path)
