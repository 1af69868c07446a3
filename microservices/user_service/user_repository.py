"""
User Repository

Data access for the ``users`` collection.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.document_store import DocumentStoreProtocol, TransactionProtocol, encode_changes
from .models import User

logger = logging.getLogger(__name__)


class UserRepository:
    """User data access layer"""

    COLLECTION = "users"

    def __init__(self, store: DocumentStoreProtocol):
        self.store = store

    async def get_user(self, user_id: str, tx: Optional[TransactionProtocol] = None) -> Optional[User]:
        if tx is not None:
            doc = await tx.get(self.COLLECTION, user_id)
        else:
            doc = await self.store.get_document(self.COLLECTION, user_id)
        return User.model_validate(doc) if doc else None

    async def find_by_email(self, tx: TransactionProtocol, email: str) -> Optional[User]:
        docs = await tx.query(self.COLLECTION, [("email", "==", email)], limit=1)
        return User.model_validate(docs[0]) if docs else None

    async def create_user(self, tx: TransactionProtocol, user: User) -> User:
        await tx.create(self.COLLECTION, user.id, user.to_document())
        return user

    async def update_user(self, tx: TransactionProtocol, user_id: str, changes: Dict[str, Any]) -> None:
        await tx.update(self.COLLECTION, user_id, encode_changes(changes))

    async def delete_user(self, tx: TransactionProtocol, user_id: str) -> None:
        await tx.delete(self.COLLECTION, user_id)

    async def adjust_campaign_count(self, tx: TransactionProtocol, user_id: str, delta: int) -> bool:
        user = await self.get_user(user_id, tx)
        if not user:
            logger.debug(f"No profile for {user_id}, campaign_count not tracked")
            return False
        await self.update_user(tx, user_id, {
            "campaign_count": max(0, user.campaign_count + delta),
            "updated_at": datetime.now(timezone.utc),
        })
        return True
