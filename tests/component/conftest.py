"""
Component Test Fixtures

Services wired over the in-memory document store, a mock object store,
a stub ticket renderer, and a recording notification client.
"""

import pytest

from core.config import LazyMintConfig
from microservices.campaign_service.factory import create_asset_service, create_campaign_service
from microservices.campaign_service.models import Campaign
from microservices.claim_service.factory import create_claim_service
from microservices.claim_service.models import Claim
from microservices.user_service.factory import create_user_service
from microservices.user_service.models import User
from tests.component.mocks import (
    InMemoryDocumentStore,
    MockNotificationClient,
    MockObjectStore,
    StubTicketRenderer,
)


# ====================
# Collaborators
# ====================


@pytest.fixture
def settings():
    return LazyMintConfig()


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def object_store():
    return MockObjectStore()


@pytest.fixture
def renderer():
    return StubTicketRenderer()


@pytest.fixture
def notifier():
    return MockNotificationClient()


# ====================
# Services
# ====================


@pytest.fixture
def campaign_service(store, settings, clock):
    return create_campaign_service(store, settings, clock=clock)


@pytest.fixture
def asset_service(store, campaign_service, object_store, settings, clock):
    return create_asset_service(store, campaign_service, object_store, settings, clock=clock)


@pytest.fixture
def claim_service(store, object_store, settings, renderer, notifier, clock):
    return create_claim_service(
        store,
        object_store,
        settings,
        ticket_renderer=renderer,
        notification_client=notifier,
        clock=clock,
    )


@pytest.fixture
def user_service(store, clock):
    return create_user_service(store, clock=clock)


# ====================
# Seeding helpers
# ====================


@pytest.fixture
def seed_campaign(store):
    def _seed(campaign: Campaign) -> Campaign:
        store.seed("campaigns", campaign.id, campaign.to_document())
        return campaign
    return _seed


@pytest.fixture
def seed_claim(store):
    def _seed(claim: Claim) -> Claim:
        store.seed("claims", claim.id, claim.to_document())
        return claim
    return _seed


@pytest.fixture
def seed_user(store):
    def _seed(user: User) -> User:
        store.seed("users", user.id, user.to_document())
        return user
    return _seed
