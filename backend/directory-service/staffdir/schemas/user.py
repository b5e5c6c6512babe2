from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from staffdir.core.security import CurrentUser


class LoginRequest(BaseModel):
    # 누락 시 422 가 아니라 400 으로 응답하기 위해 Optional
    username: Optional[str] = None
    password: Optional[str] = None


class UserBrief(BaseModel):
    id: int
    username: str
    role: str


class LoginResponse(BaseModel):
    token: str
    user: UserBrief


class ProfileResponse(BaseModel):
    user: CurrentUser


class UserCreate(BaseModel):
    """POST /api/users 요청 바디"""
    username: Optional[str] = Field(None, max_length=120)
    password: Optional[str] = None
    role: str = Field("admin", max_length=60)


class UserRead(BaseModel):
    id: int
    username: str
    role: str
    createdAt: datetime
