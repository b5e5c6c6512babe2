from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from staffdir.core.config import settings

engine_options = {}
if not settings.DATABASE_URL.startswith("sqlite"):
    # 커넥션 풀 대기 시간 초과 → StorageUnavailable (503)
    engine_options["pool_timeout"] = settings.DB_POOL_TIMEOUT

# SQLAlchemy Async Engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,  # 개발용: 실행되는 SQL 로그 찍기
    pool_pre_ping=True,
    future=True,
    **engine_options,
)

# 세션 팩토리
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    autoflush=False,
    class_=AsyncSession,
)

# Base 클래스 (모든 모델의 부모)
Base = declarative_base()


# FastAPI 의존성 주입용 세션
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    요청 하나당 세션 하나.
    commit 하지 않고 끝난 세션은 close 시점에 rollback 되므로,
    중간에 예외가 나거나 클라이언트가 끊겨도 부분 반영이 남지 않는다.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db() -> None:
    """
    애플리케이션 시작 시 한 번 호출해서
    employees / leave_entries / users 테이블을 생성.
    이미 있으면 아무 일도 안 함 (CREATE TABLE IF NOT EXISTS 느낌).
    """
    # 모델 모듈을 import 해야 Base.metadata에 테이블이 등록된다
    from staffdir.models import employee, leave, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
