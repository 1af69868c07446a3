"""
User Service Protocols (Interfaces)

These interfaces define contracts for dependency injection.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from core.document_store import TransactionProtocol
from .models import User


@runtime_checkable
class UserRepositoryProtocol(Protocol):
    """Interface for User Repository"""

    async def get_user(self, user_id: str, tx: Optional[TransactionProtocol] = None) -> Optional[User]:
        ...

    async def find_by_email(self, tx: TransactionProtocol, email: str) -> Optional[User]:
        ...

    async def create_user(self, tx: TransactionProtocol, user: User) -> User:
        ...

    async def update_user(self, tx: TransactionProtocol, user_id: str, changes: Dict[str, Any]) -> None:
        ...

    async def delete_user(self, tx: TransactionProtocol, user_id: str) -> None:
        ...

    async def adjust_campaign_count(self, tx: TransactionProtocol, user_id: str, delta: int) -> bool:
        """Apply delta to campaign_count (floored at 0); False when the user has no profile"""
        ...
