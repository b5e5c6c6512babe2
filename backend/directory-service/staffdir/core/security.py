import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from staffdir.core.config import settings
from staffdir.core.exceptions import AuthenticationFailed, PermissionDenied

logger = logging.getLogger(__name__)

UTC = timezone.utc

# auto_error=False: 헤더가 없을 때도 우리 쪽 401 포맷으로 응답하기 위함
bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    """토큰에서 꺼낸 인증된 호출자 정보 (DB 조회 없이 claim만 신뢰)."""

    userId: int
    username: str
    role: str = "admin"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        # 저장된 해시 형식이 깨진 경우
        return False


def create_access_token(
    user_id: int,
    username: str,
    role: str,
    expires_in: Optional[timedelta] = None,
) -> str:
    expiry = datetime.now(UTC) + (
        expires_in or timedelta(minutes=settings.TOKEN_EXPIRES_MINUTES)
    )
    claims: Dict[str, Any] = {
        "sub": username,
        "uid": user_id,
        "role": role,
        "exp": expiry,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError as exc:
        logger.info("Rejected access token: %s", exc)
        raise AuthenticationFailed("Invalid or expired token") from exc

    username = payload.get("sub")
    user_id = payload.get("uid")
    if username is None or user_id is None:
        raise AuthenticationFailed("Invalid or expired token")

    return CurrentUser(
        userId=user_id,
        username=username,
        role=payload.get("role") or "admin",
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """
    Authorization: Bearer <token> 헤더 검증.
    - 헤더 없음 / 토큰 불량 / 만료 → 401
    """
    if credentials is None:
        raise AuthenticationFailed("Missing Authorization header")
    return decode_access_token(credentials.credentials)


async def require_admin(
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    if user.role != "admin":
        raise PermissionDenied()
    return user
