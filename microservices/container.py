"""
Service container

Holds the collaborators (document store, object store, identity provider)
and the services built over them. main.py builds one at startup; tests
build one over in-memory doubles.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from core.config import LazyMintConfig
from core.document_store import DocumentStoreProtocol, PostgresDocumentStore
from core.jwt_manager import IdentityProviderProtocol, JWTManager
from core.object_store import GCSObjectStore, ObjectStoreProtocol
from microservices.campaign_service.asset_service import AssetService
from microservices.campaign_service.campaign_service import CampaignService
from microservices.campaign_service.factory import create_asset_service, create_campaign_service
from microservices.claim_service.claim_service import ClaimService
from microservices.claim_service.factory import create_claim_service
from microservices.user_service.factory import create_user_service
from microservices.user_service.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: LazyMintConfig
    store: DocumentStoreProtocol
    object_store: ObjectStoreProtocol
    identity_provider: IdentityProviderProtocol
    campaign_service: CampaignService
    asset_service: AssetService
    claim_service: ClaimService
    user_service: UserService

    @classmethod
    def build(
        cls,
        settings: LazyMintConfig,
        store: DocumentStoreProtocol,
        object_store: ObjectStoreProtocol,
        identity_provider: IdentityProviderProtocol,
        **claim_overrides,
    ) -> "ServiceContainer":
        """Wire services over the given collaborators"""
        clock = claim_overrides.pop("clock", None)
        campaign_service = create_campaign_service(store, settings, clock=clock)
        return cls(
            settings=settings,
            store=store,
            object_store=object_store,
            identity_provider=identity_provider,
            campaign_service=campaign_service,
            asset_service=create_asset_service(
                store, campaign_service, object_store, settings, clock=clock
            ),
            claim_service=create_claim_service(
                store, object_store, settings, clock=clock, **claim_overrides
            ),
            user_service=create_user_service(store, clock=clock),
        )

    @classmethod
    def from_settings(cls, settings: LazyMintConfig) -> "ServiceContainer":
        """Production wiring: PostgreSQL documents, GCS objects, JWT identities"""
        infra = settings.infra
        store = PostgresDocumentStore(
            dsn=infra.postgres_dsn,
            min_size=infra.postgres_pool_min,
            max_size=infra.postgres_pool_max,
            transaction_attempts=settings.claims.transaction_attempts,
        )
        object_store = GCSObjectStore(infra.gcs_bucket, project=infra.gcs_project)
        identity_provider = JWTManager(
            secret_key=settings.auth.jwt_secret or None,
            algorithm=settings.auth.jwt_algorithm,
            issuer=settings.auth.jwt_issuer,
        )
        return cls.build(settings, store, object_store, identity_provider)


def get_container(request: Request) -> ServiceContainer:
    container: Optional[ServiceContainer] = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return container


def get_campaign_service(container: ServiceContainer = Depends(get_container)) -> CampaignService:
    return container.campaign_service


def get_asset_service(container: ServiceContainer = Depends(get_container)) -> AssetService:
    return container.asset_service


def get_claim_service(container: ServiceContainer = Depends(get_container)) -> ClaimService:
    return container.claim_service


def get_user_service(container: ServiceContainer = Depends(get_container)) -> UserService:
    return container.user_service
