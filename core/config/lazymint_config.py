#!/usr/bin/env python3
"""LazyMint platform main configuration

Combines all sub-configs and includes claim workflow and auth settings.
"""
import os
from dataclasses import dataclass, field

from .infra_config import InfraConfig
from .logging_config import LoggingConfig
from .service_config import ServiceConfig


def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class ClaimConfig:
    """Claim workflow limits"""
    token_ttl_hours: int = 24
    list_claims_limit: int = 100
    list_my_campaigns_limit: int = 50
    list_public_campaigns_limit: int = 20
    transaction_attempts: int = 3
    logo_max_bytes: int = 5 * 1024 * 1024

    @classmethod
    def from_env(cls) -> 'ClaimConfig':
        return cls(
            token_ttl_hours=_int(os.getenv("CLAIM_TOKEN_TTL_HOURS", "24"), 24),
            list_claims_limit=_int(os.getenv("CLAIM_LIST_LIMIT", "100"), 100),
            list_my_campaigns_limit=_int(os.getenv("CAMPAIGN_MY_LIST_LIMIT", "50"), 50),
            list_public_campaigns_limit=_int(os.getenv("CAMPAIGN_PUBLIC_LIST_LIMIT", "20"), 20),
            transaction_attempts=_int(os.getenv("TRANSACTION_ATTEMPTS", "3"), 3),
            logo_max_bytes=_int(os.getenv("LOGO_MAX_BYTES", str(5 * 1024 * 1024)), 5 * 1024 * 1024),
        )


@dataclass
class AuthConfig:
    """Identity token verification and internal service auth"""
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "lazymint"
    internal_service_secret: str = "dev-internal-secret-change-in-production"

    @classmethod
    def from_env(cls) -> 'AuthConfig':
        return cls(
            jwt_secret=os.getenv("JWT_SECRET", ""),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_issuer=os.getenv("JWT_ISSUER", "lazymint"),
            internal_service_secret=os.getenv(
                "INTERNAL_SERVICE_SECRET", "dev-internal-secret-change-in-production"
            ),
        )


@dataclass
class LazyMintConfig:
    """Top-level settings for the LazyMint backend"""
    service_name: str = "lazymint"
    service_host: str = "0.0.0.0"
    service_port: int = 8080
    environment: str = "development"

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    infra: InfraConfig = field(default_factory=InfraConfig)
    services: ServiceConfig = field(default_factory=ServiceConfig)
    claims: ClaimConfig = field(default_factory=ClaimConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)

    @property
    def debug(self) -> bool:
        return self.environment in ("development", "dev")

    @classmethod
    def from_env(cls) -> 'LazyMintConfig':
        """Load full configuration from environment variables"""
        return cls(
            service_name=os.getenv("SERVICE_NAME", "lazymint"),
            service_host=os.getenv("SERVICE_HOST", "0.0.0.0"),
            service_port=_int(os.getenv("SERVICE_PORT") or os.getenv("PORT", "8080"), 8080),
            environment=os.getenv("ENV") or os.getenv("ENVIRONMENT", "development"),
            logging=LoggingConfig.from_env(),
            infra=InfraConfig.from_env(),
            services=ServiceConfig.from_env(),
            claims=ClaimConfig.from_env(),
            auth=AuthConfig.from_env(),
        )
