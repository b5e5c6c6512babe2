import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.core.exceptions import AuthenticationFailed, Conflict, InvalidInput
from staffdir.core.security import hash_password, verify_password
from staffdir.models.user import User

logger = logging.getLogger(__name__)


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username).limit(1))
    return result.scalar_one_or_none()


async def authenticate_user(
    db: AsyncSession,
    username: Optional[str],
    password: Optional[str],
) -> User:
    if not username or not password:
        raise InvalidInput("Username and password are required")

    user = await get_user_by_username(db, username)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login for username %r", username)
        raise AuthenticationFailed("Invalid credentials")
    return user


async def list_users(db: AsyncSession) -> List[User]:
    result = await db.execute(
        select(User).order_by(User.created_at.desc(), User.id.desc())
    )
    return list(result.scalars().all())


async def create_user(
    db: AsyncSession,
    username: Optional[str],
    password: Optional[str],
    role: str = "admin",
) -> User:
    username = (username or "").strip()
    if not username or not password:
        raise InvalidInput("Username and password are required")

    if await get_user_by_username(db, username) is not None:
        raise Conflict("Username already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role or "admin",
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as exc:
        raise Conflict("Username already exists") from exc
    await db.refresh(user)
    logger.info("Created dashboard user %s (%s)", user.username, user.role)
    return user
