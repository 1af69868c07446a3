"""
User Service Models
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from core.document_store import encode_document


class SubscriptionTier(str, Enum):
    FREE = "free"
    BASIC = "basic"
    PRO = "pro"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"


class User(BaseModel):
    """User document"""
    id: str
    email: str
    display_name: str
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    subscription_status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    stripe_customer_id: Optional[str] = None
    campaign_count: int = Field(default=0, ge=0)
    created_at: datetime
    updated_at: datetime

    def to_document(self) -> dict:
        return encode_document(self.model_dump(exclude_none=True))


class UserProfile(BaseModel):
    """User as returned to clients; billing identifiers are never exposed"""
    id: str
    email: str
    display_name: str
    subscription_tier: SubscriptionTier
    subscription_status: SubscriptionStatus
    campaign_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(**user.model_dump(exclude={"stripe_customer_id"}))


class UserCreateRequest(BaseModel):
    display_name: str
    email: Optional[str] = None


class UserUpdateRequest(BaseModel):
    display_name: Optional[str] = None
    email: Optional[str] = None
