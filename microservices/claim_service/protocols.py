"""
Claim Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from core.document_store import TransactionProtocol
from microservices.campaign_service.models import Campaign
from .models import Claim, ClaimStatus


@runtime_checkable
class ClaimRepositoryProtocol(Protocol):
    """Interface for Claim Repository"""

    async def get_claim(self, claim_id: str, tx: Optional[TransactionProtocol] = None) -> Optional[Claim]:
        ...

    async def find_claims_for_email(
        self, tx: TransactionProtocol, campaign_id: str, email: str
    ) -> List[Claim]:
        ...

    async def create_claim(self, tx: TransactionProtocol, claim: Claim) -> Claim:
        ...

    async def update_claim(self, tx: TransactionProtocol, claim_id: str, changes: Dict[str, Any]) -> None:
        ...

    async def list_campaign_claims(self, campaign_id: str, limit: int) -> List[Claim]:
        """Claims of a campaign ordered by claim_number ascending"""
        ...

    async def list_claims_by_status(self, status: ClaimStatus, limit: Optional[int] = None) -> List[Claim]:
        ...


@runtime_checkable
class TicketRendererProtocol(Protocol):
    """Produces a ticket image for a claim"""

    async def render_ticket(self, campaign: Campaign, claim: Claim) -> bytes:
        """Return PNG bytes"""
        ...


@runtime_checkable
class NotificationClientProtocol(Protocol):
    """Delivers verification emails"""

    async def send_email(
        self,
        recipient_email: str,
        subject: str,
        html_content: str,
        text_content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        ...
