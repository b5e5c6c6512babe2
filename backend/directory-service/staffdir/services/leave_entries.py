"""
휴가 관리 패널용 원장 직접 조작 (목록/등록/이동/삭제/일괄 등록).

직원 생성·수정 경로와 달리 여기서는 같은 날짜 재등록을 미리 걸러내지 않으므로
중복 요청은 DuplicateDate 로 거절된다.
"""
import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.core.exceptions import InvalidInput, NotFound
from staffdir.models.employee import Employee, EmployeeStatus
from staffdir.models.leave import LeaveEntry
from staffdir.services import ledger
from staffdir.services.employees import get_employee
from staffdir.services.leave_policy import assert_can_mark_leave, parse_leave_date
from staffdir.services.periods import LeavePolicy
from staffdir.services.reconciler import reconcile_and_commit

logger = logging.getLogger(__name__)


def _entry_row(entry: LeaveEntry, employee: Employee) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "employeeId": employee.id,
        "employeeName": employee.name,
        "department": employee.department,
        "leaveDate": entry.leave_date,
    }


async def _get_entry(
    db: AsyncSession,
    entry_id: int,
    for_update: bool = False,
) -> LeaveEntry:
    stmt = select(LeaveEntry).where(LeaveEntry.id == entry_id)
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    entry = result.scalar_one_or_none()
    if entry is None:
        raise NotFound("Leave entry not found")
    return entry


async def _lock_employees(
    db: AsyncSession,
    employee_ids: Sequence[int],
) -> Dict[int, Employee]:
    # 항상 id 오름차순으로 잠가서 요청끼리 교착되지 않게 한다
    locked = {}
    for employee_id in sorted(set(employee_ids)):
        locked[employee_id] = await get_employee(db, employee_id, for_update=True)
    return locked


async def list_entries(
    db: AsyncSession,
    employee_id: Optional[int] = None,
    leave_date: Optional[date] = None,
) -> List[Dict[str, Any]]:
    stmt = select(LeaveEntry, Employee).join(
        Employee, Employee.id == LeaveEntry.employee_id
    )
    if employee_id is not None:
        stmt = stmt.where(LeaveEntry.employee_id == employee_id)
    if leave_date is not None:
        stmt = stmt.where(LeaveEntry.leave_date == leave_date)

    stmt = stmt.order_by(LeaveEntry.leave_date.desc(), LeaveEntry.id.desc())
    result = await db.execute(stmt)
    return [_entry_row(entry, employee) for entry, employee in result.all()]


async def create_entry(
    db: AsyncSession,
    employee_id: int,
    raw_leave_date: Optional[str],
    today: date,
    policy: LeavePolicy,
) -> Dict[str, Any]:
    leave_date = parse_leave_date(raw_leave_date, today)

    await reconcile_and_commit(db, today)
    employee = await get_employee(db, employee_id, for_update=True)

    await assert_can_mark_leave(db, employee.id, leave_date, policy)
    entry = await ledger.record_leave(db, employee.id, leave_date)
    employee.status = EmployeeStatus.ON_LEAVE.value

    await db.commit()
    return _entry_row(entry, employee)


async def move_entry(
    db: AsyncSession,
    entry_id: int,
    employee_id: int,
    raw_leave_date: str,
    today: date,
    policy: LeavePolicy,
) -> Dict[str, Any]:
    """
    기존 행을 지운 뒤 새 (직원, 날짜)를 정책 검사 후 기록.
    거절되면 commit 하지 않으므로 삭제도 함께 취소된다.
    """
    if raw_leave_date is None or not raw_leave_date.strip():
        raise InvalidInput(
            "leaveDate is required",
            field_errors={"leaveDate": "Leave date is required"},
        )
    leave_date = parse_leave_date(raw_leave_date, today)

    await reconcile_and_commit(db, today)
    # 잠금 읽기부터 시작해야 이후 count 가 잠금 이후의 최신 상태를 본다 (InnoDB 스냅샷)
    entry = await _get_entry(db, entry_id, for_update=True)
    employees = await _lock_employees(db, [entry.employee_id, employee_id])
    target = employees[employee_id]

    if entry.employee_id == employee_id and entry.leave_date == leave_date:
        return _entry_row(entry, target)

    await db.delete(entry)
    await db.flush()

    await assert_can_mark_leave(db, target.id, leave_date, policy)
    moved = await ledger.record_leave(db, target.id, leave_date)
    target.status = EmployeeStatus.ON_LEAVE.value

    await db.commit()
    logger.info(
        "Moved leave entry %s to employee %s on %s", entry_id, target.id, leave_date
    )
    return _entry_row(moved, target)


async def delete_entry(db: AsyncSession, entry_id: int) -> None:
    entry = await _get_entry(db, entry_id)
    await db.delete(entry)
    await db.commit()


def _date_range(start: date, end: date) -> List[date]:
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


async def bulk_create(
    db: AsyncSession,
    employee_ids: Sequence[int],
    raw_start: str,
    raw_end: Optional[str],
    today: date,
    policy: LeavePolicy,
    max_days: int,
) -> Dict[str, int]:
    """
    모든 직원 x 모든 날짜를 등록. 이미 있는 날짜는 건너뛴다.
    중간에 한 건이라도 거절되면 전부 취소 (all-or-nothing).
    """
    start = parse_leave_date(raw_start, today, field="startDate")
    end = start
    if raw_end is not None:
        end = parse_leave_date(raw_end, today, field="endDate")

    if end < start:
        raise InvalidInput(
            "endDate must not be before startDate",
            field_errors={"endDate": "Must be on or after the start date"},
        )
    days = _date_range(start, end)
    if len(days) > max_days:
        raise InvalidInput(
            f"Date range may cover at most {max_days} days",
            field_errors={"endDate": f"At most {max_days} days"},
        )

    await reconcile_and_commit(db, today)
    employees = await _lock_employees(db, employee_ids)

    created = 0
    skipped = 0
    for employee_id, employee in employees.items():
        for leave_date in days:
            if await ledger.has_entry(db, employee_id, leave_date):
                skipped += 1
                continue
            await assert_can_mark_leave(db, employee_id, leave_date, policy)
            await ledger.record_leave(db, employee_id, leave_date)
            created += 1
        employee.status = EmployeeStatus.ON_LEAVE.value

    await db.commit()
    logger.info(
        "Bulk leave for %s employee(s) %s..%s: %s created, %s skipped",
        len(employees),
        start,
        end,
        created,
        skipped,
    )
    return {"created": created, "skipped": skipped}
