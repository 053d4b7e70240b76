"""
Users API routes
"""

import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, HTTPException, Depends, Query

from config.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from models.user import User, UserResponse
from services.base_service import ServiceResult
from services.users_service import UsersService, get_users_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _raise_for_result(result: ServiceResult):
    """Translate a failed service result into an HTTP error"""
    if result.success:
        return
    if result.error_type == "RESOURCE_NOT_FOUND":
        raise HTTPException(status_code=404, detail="User not found")
    elif result.error_type == "CONFLICT_ERROR":
        raise HTTPException(status_code=409, detail=result.error)
    else:
        raise HTTPException(status_code=500, detail=result.error)


@router.post("", response_model=UserResponse)
async def insert_user(
    user: User,
    users_service: UsersService = Depends(get_users_service)
):
    """Create a new user; an identifier is assigned when none is supplied"""
    result = await users_service.create_user(user.model_dump(by_alias=True))
    _raise_for_result(result)
    return result.data[0]


@router.get("/{userId}", response_model=UserResponse)
async def get_user(
    userId: UUID,
    users_service: UsersService = Depends(get_users_service)
):
    """Get user by ID"""
    result = await users_service.get_user(userId)
    _raise_for_result(result)
    return result.data[0]


@router.get("", response_model=List[UserResponse])
async def get_users(
    page: int = Query(0, ge=0, description="Page of results"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Size of results"),
    users_service: UsersService = Depends(get_users_service)
):
    """List users one page at a time"""
    result = await users_service.list_users(page=page, size=size)
    _raise_for_result(result)
    return result.data


@router.put("/{userId}", response_model=UserResponse)
async def update_user(
    userId: UUID,
    user: User,
    users_service: UsersService = Depends(get_users_service)
):
    """Update user record"""
    if user.user_id is not None and user.user_id != userId:
        logger.info(f"Body userId {user.user_id} ignored in favour of path userId {userId}")

    result = await users_service.update_user(userId, user.model_dump(by_alias=True))
    _raise_for_result(result)
    return result.data[0]


@router.delete("/{userId}", response_model=UserResponse)
async def delete_user(
    userId: UUID,
    users_service: UsersService = Depends(get_users_service)
):
    """Delete user record and return its representation"""
    result = await users_service.delete_user(userId)
    _raise_for_result(result)
    return result.data[0]
