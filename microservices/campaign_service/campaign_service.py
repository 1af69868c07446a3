"""
Campaign Service Business Logic

Implements the campaign lifecycle for creators: create in draft, owner
status transitions, soft delete by archiving, and listings. Mutations
that touch the creator's denormalized campaign_count run in one
document-store transaction with the campaign write.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from core.document_store import DocumentStoreProtocol, TransactionProtocol
from core.errors import (
    ErrorCode,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
)
from core.jwt_manager import Identity
from core.validation import require_document_id, validate_campaign_data
from microservices.user_service.protocols import UserRepositoryProtocol
from .models import (
    Campaign,
    CampaignCreateRequest,
    CampaignStatus,
    CampaignUpdateRequest,
)
from .protocols import CampaignRepositoryProtocol

logger = logging.getLogger(__name__)


class CampaignService:
    """Campaign service business logic layer"""

    # Owner-driven transitions; archiving happens only through archive_campaign
    VALID_TRANSITIONS = {
        CampaignStatus.DRAFT: [CampaignStatus.ACTIVE],
        CampaignStatus.ACTIVE: [CampaignStatus.PAUSED, CampaignStatus.COMPLETED],
        CampaignStatus.PAUSED: [CampaignStatus.ACTIVE, CampaignStatus.COMPLETED],
        CampaignStatus.COMPLETED: [],  # Terminal state
        CampaignStatus.ARCHIVED: [],  # Terminal state
    }

    DEFAULT_MY_LIMIT = 50
    DEFAULT_PUBLIC_LIMIT = 20

    def __init__(
        self,
        store: DocumentStoreProtocol,
        repository: CampaignRepositoryProtocol,
        user_repository: UserRepositoryProtocol,
        clock: Optional[Callable[[], datetime]] = None,
        my_campaigns_limit: int = DEFAULT_MY_LIMIT,
        public_campaigns_limit: int = DEFAULT_PUBLIC_LIMIT,
    ):
        self.store = store
        self.repository = repository
        self.user_repository = user_repository
        self._now = clock or (lambda: datetime.now(timezone.utc))
        self.my_campaigns_limit = my_campaigns_limit
        self.public_campaigns_limit = public_campaigns_limit

    # ====================
    # Helpers
    # ====================

    @classmethod
    def can_transition(cls, current: CampaignStatus, target: CampaignStatus) -> bool:
        return target in cls.VALID_TRANSITIONS.get(current, [])

    @staticmethod
    def _ensure_owner(campaign: Campaign, caller: Identity) -> None:
        if campaign.creator_id != caller.subject_id:
            raise PermissionDeniedError("You do not own this campaign")

    async def get_owned_campaign(
        self, campaign_id: str, caller: Identity, tx: Optional[TransactionProtocol] = None
    ) -> Campaign:
        """Load a campaign and check the caller owns it"""
        require_document_id(campaign_id, "campaign_id")
        campaign = await self.repository.get_campaign(campaign_id, tx)
        if not campaign:
            raise NotFoundError("Campaign not found", code=ErrorCode.CAMPAIGN_NOT_FOUND)
        self._ensure_owner(campaign, caller)
        return campaign

    # ====================
    # Campaign CRUD
    # ====================

    async def create_campaign(self, caller: Identity, request: CampaignCreateRequest) -> Campaign:
        """
        Create a campaign in draft status owned by the caller.

        The caller's campaign_count is incremented in the same transaction
        when the caller has a profile.
        """
        validate_campaign_data(request.model_dump())

        now = self._now()
        campaign = Campaign(
            id=f"cmp_{uuid.uuid4().hex[:16]}",
            creator_id=caller.subject_id,
            title=request.title.strip(),
            description=request.description.strip(),
            max_claims=request.max_claims,
            current_claims=0,
            status=CampaignStatus.DRAFT,
            is_public=request.is_public,
            logo_url=request.logo_url,
            ticket_background_url=request.ticket_background_url,
            created_at=now,
            updated_at=now,
        )

        async def body(tx: TransactionProtocol) -> Campaign:
            await self.user_repository.adjust_campaign_count(tx, caller.subject_id, 1)
            return await self.repository.create_campaign(tx, campaign)

        created = await self.store.run_transaction(body)
        logger.info(f"Campaign created: {created.id} by {caller.subject_id}")
        return created

    async def get_campaign(self, campaign_id: str, caller: Optional[Identity] = None) -> Campaign:
        """Public campaigns are readable by anyone; private ones only by the owner"""
        require_document_id(campaign_id, "campaign_id")
        campaign = await self.repository.get_campaign(campaign_id)
        if not campaign:
            raise NotFoundError("Campaign not found", code=ErrorCode.CAMPAIGN_NOT_FOUND)
        if not campaign.is_public and (caller is None or caller.subject_id != campaign.creator_id):
            raise PermissionDeniedError("Campaign is private")
        return campaign

    async def update_campaign(
        self, campaign_id: str, caller: Identity, request: CampaignUpdateRequest
    ) -> Campaign:
        changes = request.model_dump(exclude_unset=True, exclude_none=True)
        validate_campaign_data(changes)
        for field in ("title", "description"):
            if field in changes:
                changes[field] = changes[field].strip()

        async def body(tx: TransactionProtocol) -> Campaign:
            campaign = await self.get_owned_campaign(campaign_id, caller, tx)

            if campaign.status == CampaignStatus.ARCHIVED:
                raise InvalidStateError(
                    "Archived campaigns cannot be modified",
                    code=ErrorCode.CAMPAIGN_ARCHIVED,
                    current_status=campaign.status.value,
                )

            target = changes.get("status")
            if target is not None and target != campaign.status:
                if not self.can_transition(campaign.status, target):
                    raise InvalidStateError(
                        f"Cannot change status from {campaign.status.value} to {target.value}",
                        code=ErrorCode.INVALID_STATUS_TRANSITION,
                        current_status=campaign.status.value,
                    )

            if "max_claims" in changes and changes["max_claims"] < campaign.current_claims:
                raise InvalidStateError(
                    f"Max claims cannot be lower than current claims ({campaign.current_claims})",
                    code=ErrorCode.MAX_CLAIMS_BELOW_CURRENT,
                )

            changes["updated_at"] = self._now()
            await self.repository.update_campaign(tx, campaign_id, changes)
            return campaign.model_copy(update=changes)

        updated = await self.store.run_transaction(body)
        logger.info(f"Campaign updated: {campaign_id} fields={sorted(changes)}")
        return updated

    async def archive_campaign(self, campaign_id: str, caller: Identity) -> Campaign:
        """Soft delete: status becomes archived, claims and counters are kept"""

        async def body(tx: TransactionProtocol) -> Campaign:
            campaign = await self.get_owned_campaign(campaign_id, caller, tx)
            if campaign.status == CampaignStatus.ARCHIVED:
                return campaign

            changes = {"status": CampaignStatus.ARCHIVED, "updated_at": self._now()}
            await self.repository.update_campaign(tx, campaign_id, changes)
            await self.user_repository.adjust_campaign_count(tx, caller.subject_id, -1)
            return campaign.model_copy(update=changes)

        archived = await self.store.run_transaction(body)
        logger.info(f"Campaign archived: {campaign_id}")
        return archived

    # ====================
    # Listings
    # ====================

    async def list_my_campaigns(self, caller: Identity) -> List[Campaign]:
        return await self.repository.list_by_creator(caller.subject_id, self.my_campaigns_limit)

    async def list_public_campaigns(self) -> List[Campaign]:
        return await self.repository.list_public(self.public_campaigns_limit)
