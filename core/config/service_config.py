#!/usr/bin/env python3
"""Service configuration for peer services and public URLs

The notification service delivers verification emails; the public web
front-end hosts the claim and verification pages linked from emails,
QR codes and tickets.
"""
import os
from dataclasses import dataclass, field
from typing import List


def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


def _origins(val: str) -> List[str]:
    origins = [item.strip().rstrip("/") for item in val.split(",") if item.strip()]
    return origins or ["*"]


@dataclass
class ServiceConfig:
    """Peer service endpoints"""

    # ===========================================
    # Peer Services
    # ===========================================
    notification_service_url: str = "http://localhost:8206"
    http_timeout: float = 10.0

    # ===========================================
    # Public web front-end
    # ===========================================
    claim_base_url: str = "https://lazymint.com/claim"
    verify_base_url: str = "https://lazymint.com/verify"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        """Load service configuration from environment variables"""
        return cls(
            notification_service_url=os.getenv("NOTIFICATION_SERVICE_URL", "http://localhost:8206"),
            http_timeout=_float(os.getenv("HTTP_TIMEOUT", "10"), 10.0),
            claim_base_url=os.getenv("CLAIM_BASE_URL", "https://lazymint.com/claim").rstrip("/"),
            verify_base_url=os.getenv("VERIFY_BASE_URL", "https://lazymint.com/verify").rstrip("/"),
            cors_origins=_origins(os.getenv("CORS_ORIGINS", "*")),
        )
