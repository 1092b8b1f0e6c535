from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from blog.api.http.auth import get_current_user
from blog.core.db import get_db
from blog.core.exceptions import EmailTakenError
from blog.core.schemas import DataResponse
from blog.domains.identity.schemas import UserCreate, UserUpdate, UserResponse
from blog.domains.identity.services import IdentityService

# Управление пользователями доступно только после входа
router = APIRouter(tags=["users"], dependencies=[Depends(get_current_user)])


@router.get("/get-all-users", response_model=DataResponse[List[UserResponse]])
async def get_all_users(db: AsyncSession = Depends(get_db)):
    """Получение списка пользователей"""
    identity_service = IdentityService(db)

    users = await identity_service.list_users()

    return DataResponse(data=[UserResponse.from_entity(user) for user in users])


@router.post(
    "/create-user",
    response_model=DataResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Создание пользователя"""
    identity_service = IdentityService(db)

    try:
        user = await identity_service.create_user(user_data)
    except EmailTakenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )

    return DataResponse(data=UserResponse.from_entity(user))


@router.put("/update-user/{user_id}", response_model=DataResponse[UserResponse])
async def update_user(
    user_id: int,
    update_data: UserUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Обновление пользователя"""
    identity_service = IdentityService(db)

    try:
        user = await identity_service.update_user(user_id, update_data)
    except EmailTakenError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return DataResponse(data=UserResponse.from_entity(user))


@router.delete("/delete-user/{user_id}", response_model=DataResponse[UserResponse])
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Удаление пользователя"""
    identity_service = IdentityService(db)

    user = await identity_service.delete_user(user_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return DataResponse(data=UserResponse.from_entity(user))
