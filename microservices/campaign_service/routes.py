"""
Campaign API routes
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status

from core.auth_dependencies import optional_user, require_user
from core.jwt_manager import Identity
from core.responses import success_response
from microservices.container import get_asset_service, get_campaign_service
from .asset_service import AssetService
from .campaign_service import CampaignService
from .models import CampaignCreateRequest, CampaignUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


@router.post("")
async def create_campaign(
    request: CampaignCreateRequest,
    caller: Identity = Depends(require_user),
    service: CampaignService = Depends(get_campaign_service),
):
    campaign = await service.create_campaign(caller, request)
    return success_response(
        campaign,
        status_code=status.HTTP_201_CREATED,
        message="Campaign created successfully",
    )


@router.get("/public")
async def list_public_campaigns(
    caller: Optional[Identity] = Depends(optional_user),
    service: CampaignService = Depends(get_campaign_service),
):
    campaigns = await service.list_public_campaigns()
    return success_response(campaigns, count=len(campaigns))


@router.get("/my")
async def list_my_campaigns(
    caller: Identity = Depends(require_user),
    service: CampaignService = Depends(get_campaign_service),
):
    campaigns = await service.list_my_campaigns(caller)
    return success_response(campaigns, count=len(campaigns))


@router.get("/{campaign_id}")
async def get_campaign(
    campaign_id: str,
    caller: Optional[Identity] = Depends(optional_user),
    service: CampaignService = Depends(get_campaign_service),
):
    return success_response(await service.get_campaign(campaign_id, caller))


@router.put("/{campaign_id}")
async def update_campaign(
    campaign_id: str,
    request: CampaignUpdateRequest,
    caller: Identity = Depends(require_user),
    service: CampaignService = Depends(get_campaign_service),
):
    campaign = await service.update_campaign(campaign_id, caller, request)
    return success_response(campaign, message="Campaign updated successfully")


@router.delete("/{campaign_id}")
async def archive_campaign(
    campaign_id: str,
    caller: Identity = Depends(require_user),
    service: CampaignService = Depends(get_campaign_service),
):
    campaign = await service.archive_campaign(campaign_id, caller)
    return success_response(campaign, message="Campaign archived successfully")


@router.post("/{campaign_id}/qr")
async def generate_campaign_qr(
    campaign_id: str,
    caller: Identity = Depends(require_user),
    assets: AssetService = Depends(get_asset_service),
):
    return success_response(await assets.generate_campaign_qr(campaign_id, caller))


@router.post("/{campaign_id}/logo")
async def upload_campaign_logo(
    campaign_id: str,
    logo: Optional[UploadFile] = File(None),
    caller: Identity = Depends(require_user),
    assets: AssetService = Depends(get_asset_service),
):
    data = await logo.read() if logo is not None else b""
    content_type = logo.content_type if logo is not None else None
    result = await assets.upload_campaign_logo(campaign_id, caller, data, content_type)
    return success_response({"logo_url": result.url, "path": result.path})
