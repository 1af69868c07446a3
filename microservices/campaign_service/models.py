"""
Campaign Service Models

Campaign records as stored in the document store, and the request and
response shapes of the campaign API.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from core.document_store import encode_document


class CampaignStatus(str, Enum):
    """Campaign lifecycle status"""
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class Campaign(BaseModel):
    """Campaign document"""
    id: str
    creator_id: str
    title: str
    description: str
    max_claims: int = Field(..., ge=1)
    current_claims: int = Field(default=0, ge=0)
    status: CampaignStatus = CampaignStatus.DRAFT
    is_public: bool = False
    logo_url: Optional[str] = None
    ticket_background_url: Optional[str] = None
    qr_code_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @property
    def is_full(self) -> bool:
        return self.current_claims >= self.max_claims

    def to_document(self) -> dict:
        return encode_document(self.model_dump(exclude_none=True))


# Request Models
class CampaignCreateRequest(BaseModel):
    """Create campaign request"""
    title: str
    description: str
    max_claims: int
    is_public: bool = False
    logo_url: Optional[str] = None
    ticket_background_url: Optional[str] = None


class CampaignUpdateRequest(BaseModel):
    """Partial campaign update; unset fields are left unchanged"""
    title: Optional[str] = None
    description: Optional[str] = None
    max_claims: Optional[int] = None
    is_public: Optional[bool] = None
    status: Optional[CampaignStatus] = None
    logo_url: Optional[str] = None
    ticket_background_url: Optional[str] = None


# Response Models
class AssetUploadResponse(BaseModel):
    """Stored campaign asset"""
    campaign_id: str
    url: str
    path: str
