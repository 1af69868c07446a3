"""
Request payload validation

Pure functions that check shape and range constraints before any
transaction is opened. Each validator raises ValidationError on the first
failing rule.
"""

import re
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from core.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DOCUMENT_ID_INVALID_CHARS = re.compile(r"[/\x00-\x1f\x7f]")

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
DESCRIPTION_MIN_LENGTH = 10
DESCRIPTION_MAX_LENGTH = 1000
MAX_CLAIMS_MIN = 1
MAX_CLAIMS_MAX = 10000
DISPLAY_NAME_MIN_LENGTH = 2
DISPLAY_NAME_MAX_LENGTH = 50
DOCUMENT_ID_MAX_LENGTH = 1500

SUBSCRIPTION_TIERS = ("free", "basic", "pro")
SUBSCRIPTION_STATUSES = ("active", "canceled", "past_due")


def normalize_email(email: str) -> str:
    """Claim uniqueness is case-insensitive on the trimmed address"""
    return email.strip().lower()


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email.strip()) is not None


def is_valid_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_document_id(doc_id: Optional[str]) -> bool:
    """Non-empty, bounded, and free of path separators and control characters"""
    if not doc_id:
        return False
    return len(doc_id) <= DOCUMENT_ID_MAX_LENGTH and not DOCUMENT_ID_INVALID_CHARS.search(doc_id)


def require_document_id(doc_id: Optional[str], label: str) -> str:
    if not doc_id or not doc_id.strip():
        raise ValidationError(f"{label} is required", field=label)
    if not is_valid_document_id(doc_id):
        raise ValidationError(f"Invalid {label}", field=label)
    return doc_id


def validate_campaign_data(data: Mapping[str, Any]) -> None:
    """
    Validate campaign create/update fields.

    Only keys present in ``data`` are checked, so the same rules serve
    both full creates and partial updates.
    """
    if "title" in data and data["title"] is not None:
        title = data["title"]
        if len(title.strip()) < TITLE_MIN_LENGTH:
            raise ValidationError("Campaign title must be at least 3 characters", field="title")
        if len(title.strip()) > TITLE_MAX_LENGTH:
            raise ValidationError("Campaign title must be at most 100 characters", field="title")

    if "description" in data and data["description"] is not None:
        description = data["description"]
        if len(description.strip()) < DESCRIPTION_MIN_LENGTH:
            raise ValidationError(
                "Campaign description must be at least 10 characters", field="description"
            )
        if len(description.strip()) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                "Campaign description must be at most 1000 characters", field="description"
            )

    if "max_claims" in data and data["max_claims"] is not None:
        max_claims = data["max_claims"]
        if max_claims < MAX_CLAIMS_MIN:
            raise ValidationError("Max claims must be at least 1", field="max_claims")
        if max_claims > MAX_CLAIMS_MAX:
            raise ValidationError("Max claims cannot exceed 10,000", field="max_claims")

    if data.get("logo_url") and not is_valid_url(data["logo_url"]):
        raise ValidationError("Invalid logo URL format", field="logo_url")
    if data.get("ticket_background_url") and not is_valid_url(data["ticket_background_url"]):
        raise ValidationError(
            "Invalid ticket background URL format", field="ticket_background_url"
        )


def validate_claim_request(campaign_id: Optional[str], email: Optional[str]) -> None:
    require_document_id(campaign_id, "campaign_id")
    if not is_valid_email(email):
        raise ValidationError("Invalid email format", field="email")


def validate_verification_request(claim_id: Optional[str], token: Optional[str]) -> None:
    if not claim_id or not token:
        raise ValidationError("Claim ID and verification token are required")
    require_document_id(claim_id, "claim_id")


def validate_user_data(data: Mapping[str, Any]) -> None:
    """Validate user profile fields present in ``data``"""
    if "email" in data and not is_valid_email(data.get("email")):
        raise ValidationError("Invalid email format", field="email")

    if "display_name" in data and data["display_name"] is not None:
        display_name = data["display_name"].strip()
        if len(display_name) < DISPLAY_NAME_MIN_LENGTH:
            raise ValidationError("Display name must be at least 2 characters", field="display_name")
        if len(display_name) > DISPLAY_NAME_MAX_LENGTH:
            raise ValidationError("Display name must be at most 50 characters", field="display_name")

    tier = data.get("subscription_tier")
    if tier is not None and tier not in SUBSCRIPTION_TIERS:
        raise ValidationError("Invalid subscription tier", field="subscription_tier")

    sub_status = data.get("subscription_status")
    if sub_status is not None and sub_status not in SUBSCRIPTION_STATUSES:
        raise ValidationError("Invalid subscription status", field="subscription_status")
