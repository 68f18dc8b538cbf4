"""
Admin user management — every route requires the admin role.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cineghar.api.deps import get_db, pagination, require_admin
from cineghar.models.user import User
from cineghar.schemas.common import Envelope, MessageResponse, PaginationParams
from cineghar.schemas.user import (AdminUserCreate, AdminUserUpdate, UserPage,
                                   UserRead)
from cineghar.services import auth as auth_service
from cineghar.services.crud import paginate

router = APIRouter(prefix="/admin/users", tags=["admin: users"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


@router.post("", response_model=Envelope[UserRead], status_code=201)
async def create_user(
    body: AdminUserCreate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[UserRead]:
    user = await auth_service.create_user(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        date_of_birth=body.date_of_birth,
        role=body.role,
    )
    return Envelope(message="User created successfully", data=UserRead.model_validate(user))


@router.get("", response_model=UserPage)
async def list_users(
    params: PaginationParams = Depends(pagination()),
    db: AsyncSession = Depends(get_db),
) -> UserPage:
    users, total, pages = await paginate(db, User, params)
    return UserPage(
        message="Users fetched successfully",
        data=[UserRead.model_validate(u) for u in users],
        page=params.page,
        limit=params.limit,
        total_pages=pages,
        total_users=total,
    )


@router.get("/{user_id}", response_model=Envelope[UserRead])
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
) -> Envelope[UserRead]:
    user = await auth_service.get_user(db, user_id)
    return Envelope(message="User fetched", data=UserRead.model_validate(user))


@router.put("/{user_id}", response_model=Envelope[UserRead])
async def update_user(
    user_id: int,
    body: AdminUserUpdate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[UserRead]:
    user = await auth_service.get_user(db, user_id)
    user = await auth_service.update_user(db, user, body.model_dump(exclude_unset=True))
    return Envelope(message="User data successfully updated", data=UserRead.model_validate(user))


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await auth_service.delete_user(db, user_id)
    return MessageResponse(message="User deleted successfully")
