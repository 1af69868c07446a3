"""
Claim Service Factory

Factory for creating claim service instances with proper dependency injection.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from core.config import LazyMintConfig
from core.document_store import DocumentStoreProtocol
from core.object_store import ObjectStoreProtocol
from microservices.campaign_service.campaign_repository import CampaignRepository
from .claim_repository import ClaimRepository
from .claim_service import ClaimService
from .clients.notification_client import NotificationClient
from .protocols import NotificationClientProtocol, TicketRendererProtocol
from .ticket_renderer import TicketRenderer

logger = logging.getLogger(__name__)


def create_claim_service(
    store: DocumentStoreProtocol,
    object_store: ObjectStoreProtocol,
    settings: Optional[LazyMintConfig] = None,
    ticket_renderer: Optional[TicketRendererProtocol] = None,
    notification_client: Optional[NotificationClientProtocol] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> ClaimService:
    """
    Create ClaimService with real dependencies.

    Renderer and notification client default to the Pillow renderer and
    the notification_service HTTP client configured from settings.
    """
    settings = settings or LazyMintConfig()
    services = settings.services

    if ticket_renderer is None:
        ticket_renderer = TicketRenderer(
            verify_base_url=services.verify_base_url,
            http_timeout=services.http_timeout,
        )
    if notification_client is None:
        notification_client = NotificationClient(
            base_url=services.notification_service_url,
            timeout=services.http_timeout,
        )

    logger.debug(f"Claim service token TTL: {settings.claims.token_ttl_hours}h")
    return ClaimService(
        store=store,
        claim_repository=ClaimRepository(store),
        campaign_repository=CampaignRepository(store),
        ticket_renderer=ticket_renderer,
        object_store=object_store,
        notification_client=notification_client,
        clock=clock,
        token_ttl=timedelta(hours=settings.claims.token_ttl_hours),
        verify_base_url=services.verify_base_url,
        list_limit=settings.claims.list_claims_limit,
    )
