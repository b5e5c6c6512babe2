"""
휴가 원장(leave_entries) 조회/기록.

- 같은 (employee_id, leave_date) 는 한 행만 존재 (유니크 제약)
- record_leave 는 upsert: 이미 있으면 아무 일도 안 함
"""
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import and_, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.models.leave import LeaveEntry
from staffdir.services.periods import LeavePeriod

logger = logging.getLogger(__name__)


async def count_in_period(
    db: AsyncSession,
    employee_id: int,
    period: LeavePeriod,
) -> int:
    stmt = select(func.count(LeaveEntry.id)).where(
        and_(
            LeaveEntry.employee_id == employee_id,
            LeaveEntry.leave_date >= period.start,
            LeaveEntry.leave_date <= period.end,
        )
    )
    result = await db.execute(stmt)
    return int(result.scalar_one())


async def get_entry(
    db: AsyncSession,
    employee_id: int,
    leave_date: date,
    for_update: bool = False,
) -> Optional[LeaveEntry]:
    stmt = select(LeaveEntry).where(
        and_(
            LeaveEntry.employee_id == employee_id,
            LeaveEntry.leave_date == leave_date,
        )
    )
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def has_entry(db: AsyncSession, employee_id: int, leave_date: date) -> bool:
    return await get_entry(db, employee_id, leave_date) is not None


async def dates_in_period(
    db: AsyncSession,
    employee_id: int,
    period: LeavePeriod,
) -> List[date]:
    """기간 안의 휴가 날짜 목록 (최근 날짜가 먼저)."""
    result = await db.execute(
        select(LeaveEntry.leave_date)
        .where(
            and_(
                LeaveEntry.employee_id == employee_id,
                LeaveEntry.leave_date >= period.start,
                LeaveEntry.leave_date <= period.end,
            )
        )
        .order_by(LeaveEntry.leave_date.desc())
    )
    return list(result.scalars().all())


async def record_leave(
    db: AsyncSession,
    employee_id: int,
    leave_date: date,
) -> LeaveEntry:
    """
    (employee_id, leave_date) 기록. 이미 있으면 기존 행을 그대로 돌려준다.

    동시에 같은 쌍을 넣는 요청이 있어도 유니크 제약에 걸린 쪽은
    SAVEPOINT 만 롤백하고 기존 행을 다시 읽는다 (중복 행도, 에러도 없음).
    스토리지 장애는 그대로 전파.
    """
    existing = await get_entry(db, employee_id, leave_date)
    if existing is not None:
        return existing

    entry = LeaveEntry(employee_id=employee_id, leave_date=leave_date)
    try:
        async with db.begin_nested():
            db.add(entry)
    except IntegrityError:
        # 잠금 읽기는 트랜잭션 스냅샷이 아니라 방금 commit 된 행을 본다
        existing = await get_entry(db, employee_id, leave_date, for_update=True)
        if existing is None:
            # 유니크 제약이 아닌 다른 무결성 오류 (예: 없는 직원)
            raise
        return existing

    logger.info("Recorded leave for employee %s on %s", employee_id, leave_date)
    return entry


async def delete_entries_for_employee(db: AsyncSession, employee_id: int) -> int:
    result = await db.execute(
        delete(LeaveEntry).where(LeaveEntry.employee_id == employee_id)
    )
    return result.rowcount or 0
