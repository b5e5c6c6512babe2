import os

# staffdir 모듈을 import 하기 전에 설정 (전역 엔진이 MySQL 드라이버를 찾지 않도록)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import date
from typing import List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from staffdir.core.db import Base, get_db
from staffdir.core.deps import get_today
from staffdir.core.security import create_access_token, hash_password
from staffdir.main import app
from staffdir.models.employee import Employee, EmployeeStatus
from staffdir.models.leave import LeaveEntry
from staffdir.models.user import User

# 기간 [2024-03-11, 2024-04-10] 안의 날짜
TODAY = date(2024, 3, 25)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # aiosqlite 의 자동 BEGIN 을 끄고 아래에서 직접 연다 (SAVEPOINT 가 제대로 동작하도록)
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


class Seeder:
    """테스트 데이터 준비/확인용. 매번 세션을 열고 닫아서 요청과 트랜잭션이 겹치지 않게 한다."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def employee(
        self,
        name: str = "Aung Aung",
        department: str = "Finance",
        status: EmployeeStatus = EmployeeStatus.ACTIVE,
        **fields,
    ) -> int:
        async with self.session_factory() as session:
            employee = Employee(name=name, department=department, status=status.value, **fields)
            session.add(employee)
            await session.commit()
            return employee.id

    async def leave(self, employee_id: int, *dates: date) -> None:
        async with self.session_factory() as session:
            for leave_date in dates:
                session.add(LeaveEntry(employee_id=employee_id, leave_date=leave_date))
            await session.commit()

    async def user(self, username: str, password: str, role: str = "admin") -> int:
        async with self.session_factory() as session:
            user = User(username=username, password_hash=hash_password(password), role=role)
            session.add(user)
            await session.commit()
            return user.id

    async def status_of(self, employee_id: int) -> Optional[str]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Employee.status).where(Employee.id == employee_id)
            )
            return result.scalar_one_or_none()

    async def leave_dates(self, employee_id: int) -> List[date]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(LeaveEntry.leave_date)
                .where(LeaveEntry.employee_id == employee_id)
                .order_by(LeaveEntry.leave_date)
            )
            return list(result.scalars().all())


@pytest.fixture
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token(1, "admin", "admin")
    return {"Authorization": f"Bearer {token}"}
