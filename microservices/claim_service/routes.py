"""
Claim API routes

Claim submission, verification, status and download are public; the
per-campaign claim list is owner-only; maintenance routes require the
internal service secret.
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from core.auth_dependencies import require_internal_service, require_user
from core.jwt_manager import Identity
from core.responses import success_response
from microservices.container import get_claim_service
from .claim_service import ClaimService
from .models import ClaimRequest, VerifyClaimRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["claims"])


@router.post("/claims")
async def submit_claim(
    request: ClaimRequest,
    service: ClaimService = Depends(get_claim_service),
):
    submission = await service.submit_claim(request.campaign_id, request.email)
    return success_response(
        submission,
        status_code=status.HTTP_201_CREATED,
        message="Claim submitted successfully. Please check your email for verification.",
    )


@router.post("/claims/verify")
async def verify_claim(
    request: VerifyClaimRequest,
    service: ClaimService = Depends(get_claim_service),
):
    verification = await service.verify_claim(request.claim_id, request.verification_token)
    return success_response(verification, message="Claim verified successfully")


@router.get("/claims/{claim_id}/status")
async def get_claim_status(
    claim_id: str,
    service: ClaimService = Depends(get_claim_service),
):
    return success_response(await service.get_claim_status(claim_id))


@router.get("/claims/{claim_id}/download")
async def download_ticket(
    claim_id: str,
    service: ClaimService = Depends(get_claim_service),
):
    ticket_url = await service.download_ticket(claim_id)
    return RedirectResponse(ticket_url, status_code=status.HTTP_302_FOUND)


@router.get("/campaigns/{campaign_id}/claims")
async def list_campaign_claims(
    campaign_id: str,
    caller: Identity = Depends(require_user),
    service: ClaimService = Depends(get_claim_service),
):
    listing = await service.list_campaign_claims(campaign_id, caller)
    return success_response(
        listing.claims,
        count=listing.count,
        campaign_title=listing.campaign_title,
    )


@router.post("/admin/claims/expire")
async def expire_stale_claims(
    _: str = Depends(require_internal_service),
    service: ClaimService = Depends(get_claim_service),
):
    return success_response(await service.expire_stale_claims())


@router.post("/admin/claims/recover-tickets")
async def recover_missing_tickets(
    _: str = Depends(require_internal_service),
    service: ClaimService = Depends(get_claim_service),
):
    return success_response(await service.recover_missing_tickets())
