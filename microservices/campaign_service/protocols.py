"""
Campaign Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from core.document_store import TransactionProtocol
from .models import Campaign


@runtime_checkable
class CampaignRepositoryProtocol(Protocol):
    """Interface for Campaign Repository"""

    async def get_campaign(
        self, campaign_id: str, tx: Optional[TransactionProtocol] = None
    ) -> Optional[Campaign]:
        ...

    async def create_campaign(self, tx: TransactionProtocol, campaign: Campaign) -> Campaign:
        ...

    async def update_campaign(
        self, tx: TransactionProtocol, campaign_id: str, changes: Dict[str, Any]
    ) -> None:
        ...

    async def list_by_creator(self, creator_id: str, limit: int) -> List[Campaign]:
        """Non-archived campaigns of a creator, newest first"""
        ...

    async def list_public(self, limit: int) -> List[Campaign]:
        """Public active campaigns, newest first"""
        ...
