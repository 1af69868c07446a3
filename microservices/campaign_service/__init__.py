"""
Campaign Service

Campaign lifecycle for LazyMint creators: create, read, update, archive,
listing, and campaign assets (QR code, logo).
"""

from .models import Campaign, CampaignStatus
from .campaign_service import CampaignService
from .asset_service import AssetService

__all__ = [
    "Campaign",
    "CampaignStatus",
    "CampaignService",
    "AssetService",
]
