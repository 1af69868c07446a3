"""
Claim Service

Claim admission and verification for LazyMint campaigns: capacity
accounting, per-email uniqueness, one-time verification tokens, expiry,
and ticket issuance.
"""

from .models import Claim, ClaimStatus
from .claim_service import ClaimService

__all__ = ["Claim", "ClaimStatus", "ClaimService"]
