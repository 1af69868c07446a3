"""
Claim Service Business Logic

Claim admission, verification, and ticket issuance.

Every state change runs inside one document-store transaction; the store
guarantees that two transactions reading the same campaign or claim
cannot both commit. Ticket rendering happens after the verification
commit, so a claim can be observed as ``verified`` without a ticket until
attach_ticket succeeds. attach_ticket is idempotent and is re-driven by
recover_missing_tickets.
"""

import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple

from core.document_store import DELETE_FIELD, DocumentStoreProtocol, TransactionProtocol
from core.errors import (
    ConflictError,
    ErrorCode,
    ExpiredError,
    InternalError,
    InvalidStateError,
    LazyMintError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.jwt_manager import Identity
from core.object_store import ObjectStoreProtocol
from core.validation import (
    normalize_email,
    require_document_id,
    validate_claim_request,
    validate_verification_request,
)
from microservices.campaign_service.models import Campaign, CampaignStatus
from microservices.campaign_service.protocols import CampaignRepositoryProtocol
from .email_templates import build_verification_url, render_verification_email
from .models import (
    CampaignClaimList,
    Claim,
    ClaimStatus,
    ClaimStatusResponse,
    ClaimSubmission,
    ClaimSummary,
    ClaimVerification,
    ExpirySweepResult,
    TicketRecoveryResult,
)
from .protocols import (
    ClaimRepositoryProtocol,
    NotificationClientProtocol,
    TicketRendererProtocol,
)

logger = logging.getLogger(__name__)


class ClaimService:
    """Claim admission and verification workflow"""

    TOKEN_BYTES = 32
    CLAIM_ID_BYTES = 16
    DEFAULT_TOKEN_TTL = timedelta(hours=24)
    DEFAULT_LIST_LIMIT = 100

    def __init__(
        self,
        store: DocumentStoreProtocol,
        claim_repository: ClaimRepositoryProtocol,
        campaign_repository: CampaignRepositoryProtocol,
        ticket_renderer: TicketRendererProtocol,
        object_store: ObjectStoreProtocol,
        notification_client: Optional[NotificationClientProtocol] = None,
        clock: Optional[Callable[[], datetime]] = None,
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
        verify_base_url: str = "https://lazymint.com/verify",
        list_limit: int = DEFAULT_LIST_LIMIT,
    ):
        self.store = store
        self.claim_repository = claim_repository
        self.campaign_repository = campaign_repository
        self.ticket_renderer = ticket_renderer
        self.object_store = object_store
        self.notification_client = notification_client
        self._now = clock or (lambda: datetime.now(timezone.utc))
        self.token_ttl = token_ttl
        self.verify_base_url = verify_base_url
        self.list_limit = list_limit

    # ====================
    # Helpers
    # ====================

    def is_stale(self, claim: Claim, now: datetime) -> bool:
        """A pending claim past its verification window counts as expired"""
        return claim.status == ClaimStatus.PENDING and now > claim.created_at + self.token_ttl

    @staticmethod
    def ticket_path(claim: Claim) -> str:
        return f"tickets/{claim.campaign_id}/claim-{claim.id}-ticket.png"

    @staticmethod
    def _tokens_match(stored: Optional[str], presented: str) -> bool:
        if not stored:
            return False
        return hmac.compare_digest(stored.encode("utf-8"), presented.encode("utf-8"))

    def _expiry_changes(self, now: datetime) -> dict:
        return {
            "status": ClaimStatus.EXPIRED,
            "verification_token": DELETE_FIELD,
            "updated_at": now,
        }

    # ====================
    # Admission
    # ====================

    async def submit_claim(self, campaign_id: str, email: str) -> ClaimSubmission:
        """
        Admit a claim for an email address.

        Checks, in order and within one transaction: campaign exists, is
        active, has capacity, and has no live claim for this email.

        Raises:
            ValidationError: malformed campaign id or email
            NotFoundError: CAMPAIGN_NOT_FOUND
            InvalidStateError: CAMPAIGN_NOT_ACTIVE or MAX_CLAIMS_REACHED
            ConflictError: ALREADY_CLAIMED
        """
        validate_claim_request(campaign_id, email)
        email = normalize_email(email)

        async def body(tx: TransactionProtocol) -> Tuple[Claim, Campaign]:
            now = self._now()
            campaign = await self.campaign_repository.get_campaign(campaign_id, tx)
            if not campaign:
                raise NotFoundError("Campaign not found", code=ErrorCode.CAMPAIGN_NOT_FOUND)
            if campaign.status != CampaignStatus.ACTIVE:
                raise InvalidStateError(
                    "Campaign is not currently accepting claims",
                    code=ErrorCode.CAMPAIGN_NOT_ACTIVE,
                    current_status=campaign.status.value,
                )
            if campaign.is_full:
                raise InvalidStateError(
                    "Campaign has reached maximum number of claims",
                    code=ErrorCode.MAX_CLAIMS_REACHED,
                )

            for existing in await self.claim_repository.find_claims_for_email(tx, campaign_id, email):
                if existing.status == ClaimStatus.EXPIRED:
                    continue
                if self.is_stale(existing, now):
                    await self.claim_repository.update_claim(tx, existing.id, self._expiry_changes(now))
                    continue
                raise ConflictError(
                    "This email has already claimed this campaign",
                    code=ErrorCode.ALREADY_CLAIMED,
                )

            claim = Claim(
                id=f"clm_{secrets.token_hex(self.CLAIM_ID_BYTES)}",
                campaign_id=campaign.id,
                email=email,
                user_id="",
                creator_id=campaign.creator_id,
                claim_number=campaign.current_claims + 1,
                status=ClaimStatus.PENDING,
                verification_token=secrets.token_hex(self.TOKEN_BYTES),
                download_count=0,
                created_at=now,
                updated_at=now,
            )
            await self.claim_repository.create_claim(tx, claim)
            await self.campaign_repository.update_campaign(tx, campaign.id, {
                "current_claims": campaign.current_claims + 1,
                "updated_at": now,
            })
            return claim, campaign

        claim, campaign = await self.store.run_transaction(body)
        logger.info(f"Claim submitted: {claim.id} campaign={campaign.id} number={claim.claim_number}")

        await self._send_verification_email(claim, campaign)

        return ClaimSubmission(
            claim_id=claim.id,
            claim_number=claim.claim_number,
            campaign_title=campaign.title,
        )

    async def _send_verification_email(self, claim: Claim, campaign: Campaign) -> None:
        """Best effort; a failed dispatch never undoes the claim"""
        if self.notification_client is None:
            logger.warning(f"No notification client configured, verification email for {claim.id} not sent")
            return

        url = build_verification_url(self.verify_base_url, claim.id, claim.verification_token)
        template = render_verification_email(
            claim, campaign, url, ttl_hours=int(self.token_ttl.total_seconds() // 3600)
        )
        try:
            await self.notification_client.send_email(
                recipient_email=claim.email,
                subject=template.subject,
                html_content=template.html,
                text_content=template.text,
                metadata={"claim_id": claim.id, "campaign_id": campaign.id},
            )
            logger.info(f"Verification email dispatched for claim {claim.id}")
        except Exception as e:
            logger.error(f"Verification email dispatch failed for claim {claim.id}: {e}")

    # ====================
    # Verification
    # ====================

    async def verify_claim(self, claim_id: str, token: str) -> ClaimVerification:
        """
        Consume a claim's verification token and issue its ticket.

        Raises:
            NotFoundError: CLAIM_NOT_FOUND
            ConflictError: ALREADY_VERIFIED
            ValidationError: INVALID_VERIFICATION_TOKEN
            ExpiredError: TOKEN_EXPIRED
            InternalError: TICKET_GENERATION_FAILED (claim stays verified)
        """
        validate_verification_request(claim_id, token)

        async def body(tx: TransactionProtocol) -> Claim:
            now = self._now()
            claim = await self.claim_repository.get_claim(claim_id, tx)
            if not claim:
                raise NotFoundError("Claim not found", code=ErrorCode.CLAIM_NOT_FOUND)
            if claim.status in (ClaimStatus.VERIFIED, ClaimStatus.COMPLETED):
                raise ConflictError("Claim already verified", code=ErrorCode.ALREADY_VERIFIED)
            if claim.status == ClaimStatus.EXPIRED:
                raise ExpiredError("Verification token has expired", code=ErrorCode.TOKEN_EXPIRED)
            if not self._tokens_match(claim.verification_token, token):
                raise ValidationError(
                    "Invalid verification token", code=ErrorCode.INVALID_VERIFICATION_TOKEN
                )
            if self.is_stale(claim, now):
                raise ExpiredError("Verification token has expired", code=ErrorCode.TOKEN_EXPIRED)

            await self.claim_repository.update_claim(tx, claim.id, {
                "status": ClaimStatus.VERIFIED,
                "verified_at": now,
                "verification_token": DELETE_FIELD,
                "updated_at": now,
            })
            return claim.model_copy(update={
                "status": ClaimStatus.VERIFIED,
                "verified_at": now,
                "verification_token": None,
                "updated_at": now,
            })

        verified = await self.store.run_transaction(body)
        logger.info(f"Claim verified: {verified.id}")

        completed = await self.attach_ticket(verified.id)
        return ClaimVerification(
            claim_id=completed.id,
            claim_number=completed.claim_number,
            ticket_url=completed.ticket_url,
            status=completed.status,
        )

    async def attach_ticket(self, claim_id: str) -> Claim:
        """
        Render, store, and attach the ticket of a verified claim.

        Completed claims are returned unchanged.

        Raises:
            NotFoundError: CLAIM_NOT_FOUND
            InvalidStateError: CLAIM_NOT_VERIFIED for pending or expired claims
            InternalError: TICKET_GENERATION_FAILED
        """
        claim = await self.claim_repository.get_claim(claim_id)
        if not claim:
            raise NotFoundError("Claim not found", code=ErrorCode.CLAIM_NOT_FOUND)
        if claim.status == ClaimStatus.COMPLETED and claim.ticket_url:
            return claim
        if claim.status != ClaimStatus.VERIFIED:
            raise InvalidStateError(
                "Claim has not been verified",
                code=ErrorCode.CLAIM_NOT_VERIFIED,
                current_status=claim.status.value,
            )

        try:
            campaign = await self.campaign_repository.get_campaign(claim.campaign_id)
            if not campaign:
                raise LookupError(f"campaign {claim.campaign_id} missing")
            png = await self.ticket_renderer.render_ticket(campaign, claim)
            ticket_url = await self.object_store.put_object(
                self.ticket_path(claim),
                png,
                "image/png",
                metadata={
                    "campaign_id": claim.campaign_id,
                    "claim_id": claim.id,
                    "claim_number": str(claim.claim_number),
                    "created_at": self._now().isoformat(),
                },
            )
        except Exception as e:
            logger.error(f"Ticket generation failed for claim {claim.id}: {e}", exc_info=True)
            raise InternalError(
                f"Ticket generation failed for claim {claim.id}",
                code=ErrorCode.TICKET_GENERATION_FAILED,
            ) from e

        async def body(tx: TransactionProtocol) -> Claim:
            current = await self.claim_repository.get_claim(claim_id, tx)
            if not current:
                raise NotFoundError("Claim not found", code=ErrorCode.CLAIM_NOT_FOUND)
            if current.status == ClaimStatus.COMPLETED and current.ticket_url:
                return current
            if current.status != ClaimStatus.VERIFIED:
                raise InvalidStateError(
                    "Claim has not been verified",
                    code=ErrorCode.CLAIM_NOT_VERIFIED,
                    current_status=current.status.value,
                )
            changes = {
                "ticket_url": ticket_url,
                "status": ClaimStatus.COMPLETED,
                "updated_at": self._now(),
            }
            await self.claim_repository.update_claim(tx, claim_id, changes)
            return current.model_copy(update=changes)

        completed = await self.store.run_transaction(body)
        logger.info(f"Ticket attached: claim={completed.id} url={completed.ticket_url}")
        return completed

    # ====================
    # Status & listing
    # ====================

    async def get_claim_status(self, claim_id: str) -> ClaimStatusResponse:
        require_document_id(claim_id, "claim_id")
        claim = await self.claim_repository.get_claim(claim_id)
        if not claim:
            raise NotFoundError("Claim not found", code=ErrorCode.CLAIM_NOT_FOUND)
        status = ClaimStatusResponse.from_claim(claim)
        if self.is_stale(claim, self._now()):
            status.status = ClaimStatus.EXPIRED
        return status

    async def list_campaign_claims(self, campaign_id: str, caller: Identity) -> CampaignClaimList:
        require_document_id(campaign_id, "campaign_id")
        campaign = await self.campaign_repository.get_campaign(campaign_id)
        if not campaign:
            raise NotFoundError("Campaign not found", code=ErrorCode.CAMPAIGN_NOT_FOUND)
        if campaign.creator_id != caller.subject_id:
            raise PermissionDeniedError("Cannot access claims for this campaign")

        claims = await self.claim_repository.list_campaign_claims(campaign_id, self.list_limit)
        summaries = [ClaimSummary.from_claim(claim) for claim in claims]
        return CampaignClaimList(
            claims=summaries,
            count=len(summaries),
            campaign_title=campaign.title,
        )

    # ====================
    # Download
    # ====================

    async def download_ticket(self, claim_id: str) -> str:
        """Count a download of a completed claim's ticket and return its URL"""
        require_document_id(claim_id, "claim_id")

        async def body(tx: TransactionProtocol) -> str:
            claim = await self.claim_repository.get_claim(claim_id, tx)
            if not claim:
                raise NotFoundError("Claim not found", code=ErrorCode.CLAIM_NOT_FOUND)
            if claim.status != ClaimStatus.COMPLETED:
                raise InvalidStateError(
                    "Claim verification not completed",
                    code=ErrorCode.CLAIM_NOT_COMPLETED,
                    current_status=claim.status.value,
                )
            if not claim.ticket_url:
                raise InvalidStateError("Ticket not yet generated", code=ErrorCode.TICKET_NOT_AVAILABLE)

            await self.claim_repository.update_claim(tx, claim.id, {
                "download_count": claim.download_count + 1,
                "updated_at": self._now(),
            })
            return claim.ticket_url

        ticket_url = await self.store.run_transaction(body)
        logger.debug(f"Ticket download: {claim_id}")
        return ticket_url

    # ====================
    # Maintenance
    # ====================

    async def _expire_claim(self, claim_id: str) -> bool:
        async def body(tx: TransactionProtocol) -> bool:
            now = self._now()
            claim = await self.claim_repository.get_claim(claim_id, tx)
            if not claim or not self.is_stale(claim, now):
                return False
            await self.claim_repository.update_claim(tx, claim_id, self._expiry_changes(now))
            return True

        return await self.store.run_transaction(body)

    async def expire_stale_claims(self) -> ExpirySweepResult:
        """
        Mark pending claims past the verification window as expired.

        Capacity is not reclaimed: claim numbers stay dense over
        1..current_claims.
        """
        now = self._now()
        expired = []
        for claim in await self.claim_repository.list_claims_by_status(ClaimStatus.PENDING):
            if not self.is_stale(claim, now):
                continue
            if await self._expire_claim(claim.id):
                expired.append(claim.id)

        logger.info(f"Expiry sweep: {len(expired)} claims expired")
        return ExpirySweepResult(expired=len(expired), claim_ids=expired)

    async def recover_missing_tickets(self) -> TicketRecoveryResult:
        """Re-drive ticket attachment for verified claims that have no ticket"""
        result = TicketRecoveryResult(attempted=0)
        for claim in await self.claim_repository.list_claims_by_status(ClaimStatus.VERIFIED):
            result.attempted += 1
            try:
                await self.attach_ticket(claim.id)
                result.completed.append(claim.id)
            except LazyMintError as e:
                logger.warning(f"Ticket recovery failed for claim {claim.id}: {e.code}")
                result.failed.append(claim.id)

        logger.info(
            f"Ticket recovery: attempted={result.attempted} "
            f"completed={len(result.completed)} failed={len(result.failed)}"
        )
        return result
