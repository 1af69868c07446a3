"""
User Service

Creator profiles keyed by identity subject id.
"""

from .models import User, SubscriptionTier, SubscriptionStatus
from .user_service import UserService

__all__ = ["User", "SubscriptionTier", "SubscriptionStatus", "UserService"]
