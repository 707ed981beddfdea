"""User management; admin accounts only."""
from typing import List

from fastapi import APIRouter, Depends, Response

from ..auth import get_current_admin
from ..deps import get_user_service
from ..schemas import UserAccount, UserCreate, UserUpdate
from ..services.user_service import UserService

router = APIRouter(dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[UserAccount])
async def list_users(users: UserService = Depends(get_user_service)):
    return await users.list()


@router.post("", response_model=UserAccount, status_code=201)
async def create_user(request: UserCreate, users: UserService = Depends(get_user_service)):
    return await users.add(request)


@router.get("/{user_id}", response_model=UserAccount)
async def get_user(user_id: str, users: UserService = Depends(get_user_service)):
    return await users.get(user_id)


@router.patch("/{user_id}", response_model=UserAccount)
async def update_user(user_id: str, request: UserUpdate, users: UserService = Depends(get_user_service)):
    return await users.update(user_id, request)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str, users: UserService = Depends(get_user_service)):
    await users.delete(user_id)
    return Response(status_code=204)
