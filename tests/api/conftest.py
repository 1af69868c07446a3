"""
API Test Fixtures

Runs the real FastAPI app in-process over httpx.ASGITransport, with the
service container wired to in-memory collaborators.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from core.config import AuthConfig, LazyMintConfig
from core.jwt_manager import JWTManager
from main import create_app
from microservices.container import ServiceContainer
from tests.component.mocks import (
    InMemoryDocumentStore,
    MockNotificationClient,
    MockObjectStore,
    StubTicketRenderer,
)
from tests.fixtures import make_campaign

JWT_SECRET = "api-test-jwt-secret"
INTERNAL_SECRET = "api-test-internal-secret"


@pytest.fixture
def settings():
    return LazyMintConfig(
        environment="testing",
        auth=AuthConfig(jwt_secret=JWT_SECRET, internal_service_secret=INTERNAL_SECRET),
    )


@pytest.fixture
def jwt_manager():
    return JWTManager(secret_key=JWT_SECRET)


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


@pytest.fixture
def container(settings, store, object_store, jwt_manager, renderer, notifier, clock):
    return ServiceContainer.build(
        settings,
        store,
        object_store,
        jwt_manager,
        ticket_renderer=renderer,
        notification_client=notifier,
        clock=clock,
    )


@pytest_asyncio.fixture
async def client(container):
    """Create async HTTP client for testing FastAPI app"""
    app = create_app(container=container)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# ====================
# Auth
# ====================


@pytest.fixture
def auth_headers(jwt_manager):
    def _headers(identity) -> dict:
        token = jwt_manager.create_access_token(
            identity.subject_id, email=identity.email, email_verified=True
        )
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def owner_headers(auth_headers, owner):
    return auth_headers(owner)


@pytest.fixture
def stranger_headers(auth_headers, stranger):
    return auth_headers(stranger)


@pytest.fixture
def internal_headers():
    return {"X-Internal-Service": "true", "X-Internal-Service-Secret": INTERNAL_SECRET}


# ====================
# Data
# ====================


@pytest.fixture
def active_campaign(store, owner):
    campaign = make_campaign(creator_id=owner.subject_id, max_claims=3)
    store.seed("campaigns", campaign.id, campaign.to_document())
    return campaign
