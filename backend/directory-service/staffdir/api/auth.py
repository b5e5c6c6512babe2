from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.core.db import get_db
from staffdir.core.security import CurrentUser, create_access_token, get_current_user
from staffdir.schemas.user import LoginRequest, LoginResponse, ProfileResponse
from staffdir.services import users as user_service

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
)


@router.post(
    "/login",
    response_model=LoginResponse,
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    아이디/비밀번호 확인 후 액세스 토큰 발급.
    - 필드 누락 400, 자격 증명 불일치 401
    """
    user = await user_service.authenticate_user(db, payload.username, payload.password)
    role = user.role or "admin"
    token = create_access_token(user.id, user.username, role)

    return {
        "token": token,
        "user": {"id": user.id, "username": user.username, "role": role},
    }


@router.get(
    "/profile",
    response_model=ProfileResponse,
)
async def profile(user: CurrentUser = Depends(get_current_user)):
    return {"user": user}
