from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.core.db import get_db
from staffdir.core.security import require_admin
from staffdir.schemas.user import UserBrief, UserCreate, UserRead
from staffdir.services import users as user_service

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(require_admin)],
)


@router.get(
    "",
    response_model=List[UserRead],
)
async def list_users(
    db: AsyncSession = Depends(get_db),
):
    users = await user_service.list_users(db)
    return [
        UserRead(id=u.id, username=u.username, role=u.role, createdAt=u.created_at)
        for u in users
    ]


@router.post(
    "",
    response_model=UserBrief,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.create_user(db, payload.username, payload.password, payload.role)
    return {"id": user.id, "username": user.username, "role": user.role}
