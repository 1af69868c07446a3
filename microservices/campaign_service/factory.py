"""
Campaign Service Factory

Builds campaign and asset services over shared collaborators.
"""

from datetime import datetime
from typing import Callable, Optional

from core.config import LazyMintConfig
from core.document_store import DocumentStoreProtocol
from core.object_store import ObjectStoreProtocol
from microservices.user_service.user_repository import UserRepository
from .asset_service import AssetService
from .campaign_repository import CampaignRepository
from .campaign_service import CampaignService


def create_campaign_service(
    store: DocumentStoreProtocol,
    settings: Optional[LazyMintConfig] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> CampaignService:
    """Create CampaignService with real repositories"""
    settings = settings or LazyMintConfig()
    return CampaignService(
        store=store,
        repository=CampaignRepository(store),
        user_repository=UserRepository(store),
        clock=clock,
        my_campaigns_limit=settings.claims.list_my_campaigns_limit,
        public_campaigns_limit=settings.claims.list_public_campaigns_limit,
    )


def create_asset_service(
    store: DocumentStoreProtocol,
    campaign_service: CampaignService,
    object_store: ObjectStoreProtocol,
    settings: Optional[LazyMintConfig] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> AssetService:
    settings = settings or LazyMintConfig()
    return AssetService(
        store=store,
        campaign_service=campaign_service,
        object_store=object_store,
        claim_base_url=settings.services.claim_base_url,
        logo_max_bytes=settings.claims.logo_max_bytes,
        clock=clock,
    )
