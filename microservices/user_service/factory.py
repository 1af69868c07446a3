"""
User Service Factory
"""

from datetime import datetime
from typing import Callable, Optional

from core.document_store import DocumentStoreProtocol
from .user_repository import UserRepository
from .user_service import UserService


def create_user_service(
    store: DocumentStoreProtocol,
    clock: Optional[Callable[[], datetime]] = None,
) -> UserService:
    """Create UserService over a document store"""
    return UserService(store=store, repository=UserRepository(store), clock=clock)
