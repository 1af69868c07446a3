"""
Shared test fixtures and factories
"""

from .factories import (
    BASE_TIME,
    FakeClock,
    make_campaign,
    make_claim,
    make_email,
    make_identity,
    make_user,
    make_user_id,
)

__all__ = [
    "BASE_TIME",
    "FakeClock",
    "make_campaign",
    "make_claim",
    "make_email",
    "make_identity",
    "make_user",
    "make_user_id",
]
