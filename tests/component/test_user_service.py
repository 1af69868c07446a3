"""
Component Tests for user profiles
"""

import pytest

from core.errors import ConflictError, ErrorCode, NotFoundError, PermissionDeniedError, ValidationError
from microservices.user_service.models import SubscriptionTier, UserCreateRequest, UserUpdateRequest
from tests.fixtures import make_user


class TestCreateUser:

    @pytest.mark.asyncio
    async def test_create_uses_identity_email(self, user_service, store, owner):
        profile = await user_service.create_user(owner, UserCreateRequest(display_name="  Owner  "))

        assert profile.id == owner.subject_id
        assert profile.email == owner.email
        assert profile.display_name == "Owner"
        assert profile.subscription_tier == SubscriptionTier.FREE
        assert profile.campaign_count == 0
        assert store.raw("users", owner.subject_id)["email"] == owner.email

    @pytest.mark.asyncio
    async def test_duplicate_profile(self, user_service, owner):
        await user_service.create_user(owner, UserCreateRequest(display_name="Owner"))

        with pytest.raises(ConflictError) as exc:
            await user_service.create_user(owner, UserCreateRequest(display_name="Owner"))
        assert exc.value.code == ErrorCode.EMAIL_EXISTS

    @pytest.mark.asyncio
    async def test_email_taken_by_another_user(self, user_service, stranger, seed_user):
        seed_user(make_user(email="taken@example.com"))

        with pytest.raises(ConflictError) as exc:
            await user_service.create_user(
                stranger, UserCreateRequest(display_name="Someone", email="Taken@Example.com")
            )
        assert exc.value.code == ErrorCode.EMAIL_EXISTS

    @pytest.mark.asyncio
    async def test_short_display_name(self, user_service, owner):
        with pytest.raises(ValidationError):
            await user_service.create_user(owner, UserCreateRequest(display_name="x"))


class TestProfileAccess:

    @pytest.mark.asyncio
    async def test_profile_omits_billing_id(self, user_service, owner, seed_user):
        seed_user(make_user(user_id=owner.subject_id, stripe_customer_id="cus_secret"))

        profile = await user_service.get_user(owner, owner.subject_id)

        assert "stripe_customer_id" not in profile.model_dump()

    @pytest.mark.asyncio
    async def test_other_users_profile_denied(self, user_service, stranger, owner, seed_user):
        seed_user(make_user(user_id=owner.subject_id))

        with pytest.raises(PermissionDeniedError):
            await user_service.get_user(stranger, owner.subject_id)

    @pytest.mark.asyncio
    async def test_missing_profile(self, user_service, owner):
        with pytest.raises(NotFoundError) as exc:
            await user_service.get_user(owner, owner.subject_id)
        assert exc.value.code == ErrorCode.USER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_update_display_name(self, user_service, store, owner, seed_user):
        seed_user(make_user(user_id=owner.subject_id, display_name="Old"))

        profile = await user_service.update_user(owner, owner.subject_id, UserUpdateRequest(display_name="New Name"))

        assert profile.display_name == "New Name"
        assert store.raw("users", owner.subject_id)["display_name"] == "New Name"

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, user_service, owner, seed_user):
        seed_user(make_user(user_id=owner.subject_id))

        with pytest.raises(ValidationError):
            await user_service.update_user(owner, owner.subject_id, UserUpdateRequest())

    @pytest.mark.asyncio
    async def test_delete_profile(self, user_service, store, owner, seed_user):
        seed_user(make_user(user_id=owner.subject_id))

        await user_service.delete_user(owner, owner.subject_id)

        assert store.raw("users", owner.subject_id) is None
        with pytest.raises(NotFoundError):
            await user_service.delete_user(owner, owner.subject_id)
