"""
Claim Repository

Data access for the ``claims`` collection.
"""

import logging
from typing import Any, Dict, List, Optional

from core.document_store import DocumentStoreProtocol, TransactionProtocol, encode_changes
from .models import Claim, ClaimStatus

logger = logging.getLogger(__name__)


class ClaimRepository:
    """Claim data access layer"""

    COLLECTION = "claims"

    def __init__(self, store: DocumentStoreProtocol):
        self.store = store

    async def get_claim(self, claim_id: str, tx: Optional[TransactionProtocol] = None) -> Optional[Claim]:
        if tx is not None:
            doc = await tx.get(self.COLLECTION, claim_id)
        else:
            doc = await self.store.get_document(self.COLLECTION, claim_id)
        return Claim.model_validate(doc) if doc else None

    async def find_claims_for_email(
        self, tx: TransactionProtocol, campaign_id: str, email: str
    ) -> List[Claim]:
        docs = await tx.query(
            self.COLLECTION,
            [("campaign_id", "==", campaign_id), ("email", "==", email)],
        )
        return [Claim.model_validate(doc) for doc in docs]

    async def create_claim(self, tx: TransactionProtocol, claim: Claim) -> Claim:
        await tx.create(self.COLLECTION, claim.id, claim.to_document())
        return claim

    async def update_claim(self, tx: TransactionProtocol, claim_id: str, changes: Dict[str, Any]) -> None:
        await tx.update(self.COLLECTION, claim_id, encode_changes(changes))

    async def list_campaign_claims(self, campaign_id: str, limit: int) -> List[Claim]:
        docs = await self.store.query_documents(
            self.COLLECTION,
            [("campaign_id", "==", campaign_id)],
            order_by="claim_number",
            limit=limit,
        )
        return [Claim.model_validate(doc) for doc in docs]

    async def list_claims_by_status(self, status: ClaimStatus, limit: Optional[int] = None) -> List[Claim]:
        docs = await self.store.query_documents(
            self.COLLECTION,
            [("status", "==", status.value)],
            order_by="created_at",
            limit=limit,
        )
        return [Claim.model_validate(doc) for doc in docs]
