"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - api/       : HTTP contract tests against the app with in-memory collaborators
    - component/ : Service tests with in-memory document store and mocks
    - unit/      : Pure functions, no I/O
"""
import os
import sys

import pytest

# Set testing environment BEFORE any project imports
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("INTERNAL_SERVICE_SECRET", "test-internal-secret")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.fixtures import FakeClock, make_identity  # noqa: E402


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def owner():
    """Authenticated campaign creator"""
    return make_identity(subject_id="usr_owner", email="owner@example.com")


@pytest.fixture
def stranger():
    """Authenticated user who owns nothing"""
    return make_identity(subject_id="usr_stranger", email="stranger@example.com")
