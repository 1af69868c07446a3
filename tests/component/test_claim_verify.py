"""
Component Tests for Claim Verification and Ticket Issuance
"""

import pytest
import pytest_asyncio

from core.errors import (
    ConflictError,
    ErrorCode,
    ExpiredError,
    InternalError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from microservices.claim_service.models import ClaimStatus
from tests.component.mocks import PNG_SIGNATURE
from tests.fixtures import make_campaign, make_claim


@pytest_asyncio.fixture
async def submitted(claim_service, notifier, seed_campaign):
    """An active campaign and one submitted claim with its emailed token"""
    campaign = seed_campaign(make_campaign(max_claims=5))
    result = await claim_service.submit_claim(campaign.id, "fan@example.com")
    return campaign, result.claim_id, notifier.token_for(result.claim_id)


class TestVerifyClaim:

    @pytest.mark.asyncio
    async def test_verify_completes_claim_with_ticket(self, claim_service, store, object_store, submitted):
        campaign, claim_id, token = submitted

        # When: verifying with the emailed token
        result = await claim_service.verify_claim(claim_id, token)

        # Then: claim is completed and the ticket is stored
        path = f"tickets/{campaign.id}/claim-{claim_id}-ticket.png"
        assert result.status == ClaimStatus.COMPLETED
        assert result.claim_number == 1
        assert result.ticket_url == f"https://storage.googleapis.com/test-bucket/{path}"
        assert object_store.objects[path]["data"].startswith(PNG_SIGNATURE)
        assert object_store.objects[path]["content_type"] == "image/png"
        assert object_store.objects[path]["metadata"]["claim_number"] == "1"

        stored = store.raw("claims", claim_id)
        assert stored["status"] == "completed"
        assert stored["verified_at"]
        assert stored["ticket_url"] == result.ticket_url

    @pytest.mark.asyncio
    async def test_token_is_single_use(self, claim_service, store, submitted):
        _, claim_id, token = submitted
        await claim_service.verify_claim(claim_id, token)

        # When: the same token is presented again
        with pytest.raises(ConflictError) as exc:
            await claim_service.verify_claim(claim_id, token)

        # Then: already verified, and no token remains in storage
        assert exc.value.code == ErrorCode.ALREADY_VERIFIED
        assert exc.value.status_code == 409
        assert "verification_token" not in store.raw("claims", claim_id)

    @pytest.mark.asyncio
    async def test_wrong_token_rejected(self, claim_service, store, submitted):
        _, claim_id, token = submitted

        with pytest.raises(ValidationError) as exc:
            await claim_service.verify_claim(claim_id, "0" * 64)

        assert exc.value.code == ErrorCode.INVALID_VERIFICATION_TOKEN
        assert store.raw("claims", claim_id)["status"] == "pending"
        assert store.raw("claims", claim_id)["verification_token"] == token

    @pytest.mark.asyncio
    async def test_unknown_claim(self, claim_service):
        with pytest.raises(NotFoundError) as exc:
            await claim_service.verify_claim("clm_missing", "a" * 64)
        assert exc.value.code == ErrorCode.CLAIM_NOT_FOUND

    @pytest.mark.asyncio
    async def test_token_expires_after_window(self, claim_service, store, clock, submitted):
        # Given: 24 hours and one second have passed
        _, claim_id, token = submitted
        clock.advance(hours=24, seconds=1)

        # When/Then: verification is refused as expired
        with pytest.raises(ExpiredError) as exc:
            await claim_service.verify_claim(claim_id, token)
        assert exc.value.code == ErrorCode.TOKEN_EXPIRED
        assert store.raw("claims", claim_id)["status"] == "pending"

    @pytest.mark.asyncio
    async def test_token_valid_at_window_edge(self, claim_service, clock, submitted):
        _, claim_id, token = submitted
        clock.advance(hours=24)

        result = await claim_service.verify_claim(claim_id, token)

        assert result.status == ClaimStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_expired_claim_reports_expired(self, claim_service, seed_campaign, seed_claim):
        campaign = seed_campaign(make_campaign())
        claim = seed_claim(make_claim(campaign, status=ClaimStatus.EXPIRED))

        with pytest.raises(ExpiredError):
            await claim_service.verify_claim(claim.id, "a" * 64)


class TestTicketFailureAndRecovery:

    @pytest.mark.asyncio
    async def test_render_failure_leaves_claim_verified(self, claim_service, store, renderer, submitted):
        # Given: the renderer is broken
        _, claim_id, token = submitted
        renderer.fail = True

        # When: verifying
        with pytest.raises(InternalError) as exc:
            await claim_service.verify_claim(claim_id, token)

        # Then: verification stuck, ticket missing, token consumed
        assert exc.value.code == ErrorCode.TICKET_GENERATION_FAILED
        assert exc.value.status_code == 500
        stored = store.raw("claims", claim_id)
        assert stored["status"] == "verified"
        assert "ticket_url" not in stored
        assert "verification_token" not in stored

        # And: a retry of verify is refused, the token is spent
        with pytest.raises(ConflictError):
            await claim_service.verify_claim(claim_id, token)

    @pytest.mark.asyncio
    async def test_upload_failure_leaves_claim_verified(self, claim_service, store, object_store, submitted):
        _, claim_id, token = submitted
        object_store.fail_uploads = True

        with pytest.raises(InternalError):
            await claim_service.verify_claim(claim_id, token)

        assert store.raw("claims", claim_id)["status"] == "verified"

    @pytest.mark.asyncio
    async def test_recovery_attaches_missing_ticket(self, claim_service, store, renderer, submitted):
        _, claim_id, token = submitted
        renderer.fail = True
        with pytest.raises(InternalError):
            await claim_service.verify_claim(claim_id, token)

        # When: the renderer recovers and the recovery job runs
        renderer.fail = False
        result = await claim_service.recover_missing_tickets()

        # Then: the claim is completed
        assert result.attempted == 1
        assert result.completed == [claim_id]
        assert result.failed == []
        assert store.raw("claims", claim_id)["status"] == "completed"

    @pytest.mark.asyncio
    async def test_recovery_reports_failures(self, claim_service, renderer, submitted):
        _, claim_id, token = submitted
        renderer.fail = True
        with pytest.raises(InternalError):
            await claim_service.verify_claim(claim_id, token)

        result = await claim_service.recover_missing_tickets()

        assert result.attempted == 1
        assert result.failed == [claim_id]

    @pytest.mark.asyncio
    async def test_attach_ticket_is_idempotent(self, claim_service, renderer, submitted):
        _, claim_id, token = submitted
        await claim_service.verify_claim(claim_id, token)

        again = await claim_service.attach_ticket(claim_id)

        assert again.status == ClaimStatus.COMPLETED
        assert renderer.rendered == [claim_id]

    @pytest.mark.asyncio
    async def test_attach_ticket_requires_verification(self, claim_service, submitted):
        _, claim_id, _ = submitted

        with pytest.raises(InvalidStateError) as exc:
            await claim_service.attach_ticket(claim_id)
        assert exc.value.code == ErrorCode.CLAIM_NOT_VERIFIED
