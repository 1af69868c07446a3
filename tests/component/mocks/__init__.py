"""
Mock implementations for component testing
"""

from .document_store import InMemoryDocumentStore, InMemoryTransaction
from .object_store_mock import (
    MockNotificationClient,
    MockObjectStore,
    StubTicketRenderer,
    PNG_SIGNATURE,
)

__all__ = [
    "InMemoryDocumentStore",
    "InMemoryTransaction",
    "MockObjectStore",
    "MockNotificationClient",
    "StubTicketRenderer",
    "PNG_SIGNATURE",
]
