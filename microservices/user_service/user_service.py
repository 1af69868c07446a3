"""
User Service Business Logic

Profiles are created by the authenticated subject for themselves and are
readable and writable only by that subject.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from core.document_store import DocumentStoreProtocol, TransactionProtocol
from core.errors import (
    ConflictError,
    ErrorCode,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.jwt_manager import Identity
from core.validation import normalize_email, validate_user_data
from .models import (
    SubscriptionStatus,
    SubscriptionTier,
    User,
    UserCreateRequest,
    UserProfile,
    UserUpdateRequest,
)
from .protocols import UserRepositoryProtocol

logger = logging.getLogger(__name__)


class UserService:
    """User profile operations"""

    def __init__(
        self,
        store: DocumentStoreProtocol,
        repository: UserRepositoryProtocol,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.repository = repository
        self._now = clock or (lambda: datetime.now(timezone.utc))

    @staticmethod
    def _ensure_self(caller: Identity, user_id: str) -> None:
        if caller.subject_id != user_id:
            raise PermissionDeniedError("Cannot access another user's profile")

    async def create_user(self, caller: Identity, request: UserCreateRequest) -> UserProfile:
        """
        Create the caller's profile

        The email defaults to the one carried by the identity token.

        Raises:
            ValidationError: invalid email or display name
            ConflictError: profile or email already exists (EMAIL_EXISTS)
        """
        email = request.email or caller.email
        if not email:
            raise ValidationError("Email is required", field="email")
        validate_user_data({"email": email, "display_name": request.display_name})
        email = normalize_email(email)
        now = self._now()

        async def body(tx: TransactionProtocol) -> User:
            if await self.repository.get_user(caller.subject_id, tx):
                raise ConflictError("User profile already exists", code=ErrorCode.EMAIL_EXISTS)
            if await self.repository.find_by_email(tx, email):
                raise ConflictError("Email already exists", code=ErrorCode.EMAIL_EXISTS)

            user = User(
                id=caller.subject_id,
                email=email,
                display_name=request.display_name.strip(),
                subscription_tier=SubscriptionTier.FREE,
                subscription_status=SubscriptionStatus.ACTIVE,
                created_at=now,
                updated_at=now,
            )
            return await self.repository.create_user(tx, user)

        user = await self.store.run_transaction(body)
        logger.info(f"User profile created: {user.id}")
        return UserProfile.from_user(user)

    async def get_user(self, caller: Identity, user_id: str) -> UserProfile:
        self._ensure_self(caller, user_id)
        user = await self.repository.get_user(user_id)
        if not user:
            raise NotFoundError("User not found", code=ErrorCode.USER_NOT_FOUND)
        return UserProfile.from_user(user)

    async def update_user(self, caller: Identity, user_id: str, request: UserUpdateRequest) -> UserProfile:
        self._ensure_self(caller, user_id)
        changes = request.model_dump(exclude_none=True)
        if not changes:
            raise ValidationError("No valid fields to update")
        validate_user_data(changes)
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
        if "display_name" in changes:
            changes["display_name"] = changes["display_name"].strip()
        changes["updated_at"] = self._now()

        async def body(tx: TransactionProtocol) -> User:
            user = await self.repository.get_user(user_id, tx)
            if not user:
                raise NotFoundError("User not found", code=ErrorCode.USER_NOT_FOUND)
            if "email" in changes and changes["email"] != user.email:
                if await self.repository.find_by_email(tx, changes["email"]):
                    raise ConflictError("Email already exists", code=ErrorCode.EMAIL_EXISTS)
            await self.repository.update_user(tx, user_id, changes)
            return user.model_copy(update=changes)

        user = await self.store.run_transaction(body)
        logger.info(f"User profile updated: {user_id}")
        return UserProfile.from_user(user)

    async def delete_user(self, caller: Identity, user_id: str) -> None:
        """Remove the profile; campaigns the user created are retained"""
        self._ensure_self(caller, user_id)

        async def body(tx: TransactionProtocol) -> None:
            if not await self.repository.get_user(user_id, tx):
                raise NotFoundError("User not found", code=ErrorCode.USER_NOT_FOUND)
            await self.repository.delete_user(tx, user_id)

        await self.store.run_transaction(body)
        logger.info(f"User profile deleted: {user_id}")
