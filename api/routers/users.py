"""
User endpoints.

Handles user CRUD and mutual friendships.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from api.dependencies import get_user_service
from api.schemas.common import ErrorResponse, SuccessResponse
from api.schemas.user import UserCreate, UserResponse, UserUpdate
from filmorate.service import UserService

router = APIRouter()
logger = logging.getLogger("api.users")


@router.get("/users", response_model=List[UserResponse])
async def list_users(service: UserService = Depends(get_user_service)):
    return [UserResponse.from_user(u) for u in service.list_users()]


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return UserResponse.from_user(service.get_user(user_id))


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(request: UserCreate, service: UserService = Depends(get_user_service)):
    """
    Create a user. A blank or missing name is replaced by the login.
    """
    user = service.create_user(request.to_user())
    logger.info(f"User created: user_id={user.id}")
    return UserResponse.from_user(user)


@router.put("/users", response_model=UserResponse)
async def update_user(request: UserUpdate, service: UserService = Depends(get_user_service)):
    """
    Replace a user's profile. Friendships are kept.
    """
    return UserResponse.from_user(service.update_user(request.to_user()))


@router.delete("/users/{user_id}", response_model=SuccessResponse)
async def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    """
    Delete a user together with their likes and friendships.
    """
    service.delete_user(user_id)
    return SuccessResponse(message=f"User {user_id} deleted")


@router.put("/users/{user_id}/friends/{friend_id}", response_model=SuccessResponse)
async def add_friend(
    user_id: int,
    friend_id: int,
    service: UserService = Depends(get_user_service),
):
    """
    Make two users friends with each other.
    """
    service.add_friend(user_id, friend_id)
    return SuccessResponse()


@router.delete("/users/{user_id}/friends/{friend_id}", response_model=SuccessResponse)
async def remove_friend(
    user_id: int,
    friend_id: int,
    service: UserService = Depends(get_user_service),
):
    service.remove_friend(user_id, friend_id)
    return SuccessResponse()


@router.get("/users/{user_id}/friends", response_model=List[UserResponse])
async def list_friends(user_id: int, service: UserService = Depends(get_user_service)):
    return [UserResponse.from_user(u) for u in service.get_friends(user_id)]


@router.get("/users/{user_id}/friends/common/{other_id}", response_model=List[UserResponse])
async def list_common_friends(
    user_id: int,
    other_id: int,
    service: UserService = Depends(get_user_service),
):
    """
    Get users who are friends with both ``user_id`` and ``other_id``.
    """
    friends = service.get_common_friends(user_id, other_id)
    return [UserResponse.from_user(u) for u in friends]
