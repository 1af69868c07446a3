"""
User API routes
"""

from fastapi import APIRouter, Depends, status

from core.auth_dependencies import require_user
from core.jwt_manager import Identity
from core.responses import success_response
from microservices.container import get_user_service
from .models import UserCreateRequest, UserUpdateRequest
from .user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("")
async def create_user(
    request: UserCreateRequest,
    caller: Identity = Depends(require_user),
    service: UserService = Depends(get_user_service),
):
    profile = await service.create_user(caller, request)
    return success_response(profile, status_code=status.HTTP_201_CREATED)


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    caller: Identity = Depends(require_user),
    service: UserService = Depends(get_user_service),
):
    return success_response(await service.get_user(caller, user_id))


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    request: UserUpdateRequest,
    caller: Identity = Depends(require_user),
    service: UserService = Depends(get_user_service),
):
    return success_response(await service.update_user(caller, user_id, request))


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    caller: Identity = Depends(require_user),
    service: UserService = Depends(get_user_service),
):
    await service.delete_user(caller, user_id)
    return success_response(None, message="User deleted successfully")
