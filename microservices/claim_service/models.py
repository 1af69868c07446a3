"""
Claim Service Models

Claim records as stored in the document store, and the request and
response shapes of the claim API.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum

from core.document_store import encode_document


class ClaimStatus(str, Enum):
    """Claim lifecycle: pending -> verified -> completed, or pending -> expired"""
    PENDING = "pending"
    VERIFIED = "verified"
    COMPLETED = "completed"
    EXPIRED = "expired"


class Claim(BaseModel):
    """Claim document"""
    id: str
    campaign_id: str
    email: str
    user_id: str = ""
    creator_id: str
    claim_number: int = Field(..., ge=1)
    status: ClaimStatus = ClaimStatus.PENDING
    verification_token: Optional[str] = None
    verified_at: Optional[datetime] = None
    ticket_url: Optional[str] = None
    download_count: int = Field(default=0, ge=0)
    created_at: datetime
    updated_at: datetime

    def to_document(self) -> dict:
        return encode_document(self.model_dump(exclude_none=True))


# Request Models
class ClaimRequest(BaseModel):
    """Submit claim request"""
    campaign_id: str
    email: str


class VerifyClaimRequest(BaseModel):
    """Verify claim request"""
    claim_id: str
    verification_token: str


# Response Models
class ClaimSubmission(BaseModel):
    claim_id: str
    claim_number: int
    campaign_title: str


class ClaimVerification(BaseModel):
    claim_id: str
    claim_number: int
    ticket_url: Optional[str] = None
    status: ClaimStatus


class ClaimStatusResponse(BaseModel):
    """Public claim status; never carries the email or token"""
    claim_id: str
    claim_number: int
    status: ClaimStatus
    created_at: datetime
    verified_at: Optional[datetime] = None
    ticket_url: Optional[str] = None

    @classmethod
    def from_claim(cls, claim: Claim) -> "ClaimStatusResponse":
        return cls(
            claim_id=claim.id,
            claim_number=claim.claim_number,
            status=claim.status,
            created_at=claim.created_at,
            verified_at=claim.verified_at,
            ticket_url=claim.ticket_url,
        )


class ClaimSummary(BaseModel):
    """Claim as listed to the campaign owner"""
    claim_id: str
    claim_number: int
    email: str
    status: ClaimStatus
    created_at: datetime
    verified_at: Optional[datetime] = None
    download_count: int = 0

    @classmethod
    def from_claim(cls, claim: Claim) -> "ClaimSummary":
        return cls(
            claim_id=claim.id,
            claim_number=claim.claim_number,
            email=claim.email,
            status=claim.status,
            created_at=claim.created_at,
            verified_at=claim.verified_at,
            download_count=claim.download_count,
        )


class CampaignClaimList(BaseModel):
    claims: List[ClaimSummary]
    count: int
    campaign_title: str


class ExpirySweepResult(BaseModel):
    expired: int
    claim_ids: List[str] = Field(default_factory=list)


class TicketRecoveryResult(BaseModel):
    attempted: int
    completed: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)
