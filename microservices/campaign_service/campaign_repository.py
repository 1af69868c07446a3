"""
Campaign Repository

Data access for the ``campaigns`` collection.
"""

import logging
from typing import Any, Dict, List, Optional

from core.document_store import DocumentStoreProtocol, TransactionProtocol, encode_changes
from .models import Campaign, CampaignStatus

logger = logging.getLogger(__name__)


class CampaignRepository:
    """Campaign data access layer"""

    COLLECTION = "campaigns"

    def __init__(self, store: DocumentStoreProtocol):
        self.store = store

    async def get_campaign(
        self, campaign_id: str, tx: Optional[TransactionProtocol] = None
    ) -> Optional[Campaign]:
        if tx is not None:
            doc = await tx.get(self.COLLECTION, campaign_id)
        else:
            doc = await self.store.get_document(self.COLLECTION, campaign_id)
        return Campaign.model_validate(doc) if doc else None

    async def create_campaign(self, tx: TransactionProtocol, campaign: Campaign) -> Campaign:
        await tx.create(self.COLLECTION, campaign.id, campaign.to_document())
        return campaign

    async def update_campaign(
        self, tx: TransactionProtocol, campaign_id: str, changes: Dict[str, Any]
    ) -> None:
        await tx.update(self.COLLECTION, campaign_id, encode_changes(changes))

    async def list_by_creator(self, creator_id: str, limit: int) -> List[Campaign]:
        docs = await self.store.query_documents(
            self.COLLECTION,
            [
                ("creator_id", "==", creator_id),
                ("status", "!=", CampaignStatus.ARCHIVED.value),
            ],
            order_by="created_at",
            descending=True,
            limit=limit,
        )
        return [Campaign.model_validate(doc) for doc in docs]

    async def list_public(self, limit: int) -> List[Campaign]:
        docs = await self.store.query_documents(
            self.COLLECTION,
            [
                ("is_public", "==", True),
                ("status", "==", CampaignStatus.ACTIVE.value),
            ],
            order_by="created_at",
            descending=True,
            limit=limit,
        )
        return [Campaign.model_validate(doc) for doc in docs]
