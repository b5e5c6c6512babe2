"""
직원 생성/수정/삭제와 휴가 상태 연동.

휴가 표시가 들어간 쓰기 요청은 항상
    reconcile (별도 commit) → 직원 행 잠금 → 정책 검사 → 원장 기록 → employees.status 변경
순서로 처리한다. 잠금 이후는 하나의 트랜잭션이고, 중간에 실패하면 commit 하지 않는다.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.core.exceptions import Conflict, InvalidInput, NotFound
from staffdir.models.employee import Employee, EmployeeStatus
from staffdir.schemas.employee import EmployeeCreate, EmployeeUpdate
from staffdir.services import ledger
from staffdir.services.leave_policy import (
    assert_can_mark_leave,
    parse_leave_date,
    remaining_days,
)
from staffdir.services.periods import LeavePolicy, period_for
from staffdir.services.reconciler import reconcile_and_commit

logger = logging.getLogger(__name__)

# 요청 필드명 → 컬럼명
FIELD_MAP = {
    "name": "name",
    "department": "department",
    "birthday": "birthday",
    "address": "address",
    "age": "age",
    "gender": "gender",
    "phone": "phone",
    "hireDate": "hire_date",
}
REQUIRED_FIELDS = ("name", "department")


def _clean_fields(data: Dict[str, Any], is_create: bool) -> Dict[str, Any]:
    """
    - 문자열은 trim, 빈 문자열은 None
    - null 로 들어온 값은 "변경 없음"으로 취급
    - name / department 는 비어 있으면 안 됨
    """
    columns: Dict[str, Any] = {}
    field_errors: Dict[str, str] = {}

    for field, column in FIELD_MAP.items():
        if field not in data or data[field] is None:
            if is_create and field in REQUIRED_FIELDS:
                field_errors[field] = f"{field} is required"
            continue

        value = data[field]
        if isinstance(value, str):
            value = value.strip() or None

        if value is None and field in REQUIRED_FIELDS:
            field_errors[field] = f"{field} is required"
            continue
        columns[column] = value

    if field_errors:
        first = next(iter(field_errors.values()))
        raise InvalidInput(first, field_errors=field_errors)
    return columns


async def get_employee(
    db: AsyncSession,
    employee_id: int,
    for_update: bool = False,
) -> Employee:
    stmt = select(Employee).where(Employee.id == employee_id)
    if for_update:
        # 같은 직원에 대한 휴가 등록을 직렬화 (MySQL InnoDB 행 잠금)
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    employee = result.scalar_one_or_none()

    if employee is None:
        raise NotFound("Employee not found")
    return employee


async def assert_unique_name(
    db: AsyncSession,
    name: str,
    department: str,
    exclude_id: Optional[int] = None,
) -> None:
    stmt = select(Employee.id).where(
        and_(Employee.name == name, Employee.department == department)
    )
    if exclude_id is not None:
        stmt = stmt.where(Employee.id != exclude_id)
    result = await db.execute(stmt)
    if result.first() is not None:
        raise Conflict(
            "Employee name already exists in this department",
            field_errors={"name": "Name already used in this department"},
        )


async def mark_on_leave(
    db: AsyncSession,
    employee: Employee,
    leave_date: date,
    policy: LeavePolicy,
) -> None:
    """
    생성/수정 경로의 휴가 표시.
    이미 같은 날짜가 기록되어 있으면 정책 검사 없이 변경 없음으로 처리한다.
    """
    if await ledger.has_entry(db, employee.id, leave_date):
        employee.status = EmployeeStatus.ON_LEAVE.value
        return

    await assert_can_mark_leave(db, employee.id, leave_date, policy)
    await ledger.record_leave(db, employee.id, leave_date)
    employee.status = EmployeeStatus.ON_LEAVE.value


async def list_employees(
    db: AsyncSession,
    department: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Employee]:
    stmt = select(Employee)

    if department:
        stmt = stmt.where(Employee.department == department)
    if status:
        stmt = stmt.where(Employee.status == status)

    stmt = stmt.order_by(Employee.name, Employee.id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def employee_detail(
    db: AsyncSession,
    employee_id: int,
    today: date,
    policy: LeavePolicy,
) -> Dict[str, Any]:
    """직원 정보 + 이번 기간 휴가 내역."""
    employee = await get_employee(db, employee_id)
    period = period_for(today, policy.period_start_day)
    dates = await ledger.dates_in_period(db, employee.id, period)

    return {
        "employee": employee,
        "leaveHistory": {
            "periodStart": period.start,
            "periodEnd": period.end,
            "dates": dates,
            "used": len(dates),
            "remaining": remaining_days(len(dates), policy),
        },
    }


async def create_employee(
    db: AsyncSession,
    payload: EmployeeCreate,
    today: date,
    policy: LeavePolicy,
) -> Employee:
    data = payload.model_dump(exclude_unset=True)
    columns = _clean_fields(data, is_create=True)

    wants_leave = data.get("status") == EmployeeStatus.ON_LEAVE.value
    leave_date = parse_leave_date(data.get("leaveDate"), today) if wants_leave else None

    await reconcile_and_commit(db, today)
    await assert_unique_name(db, columns["name"], columns["department"])

    employee = Employee(**columns, status=EmployeeStatus.ACTIVE.value)
    db.add(employee)
    try:
        await db.flush()
    except IntegrityError as exc:
        # 동시에 같은 이름이 들어온 경우 유니크 제약에서 걸림
        raise Conflict("Employee name already exists in this department") from exc

    if leave_date is not None:
        await mark_on_leave(db, employee, leave_date, policy)

    await db.commit()
    await db.refresh(employee)
    logger.info("Created employee %s (%s)", employee.id, employee.status)
    return employee


async def update_employee(
    db: AsyncSession,
    employee_id: int,
    payload: EmployeeUpdate,
    today: date,
    policy: LeavePolicy,
) -> Employee:
    data = payload.model_dump(exclude_unset=True)
    status = data.get("status")
    columns = _clean_fields(data, is_create=False)

    if not columns and status is None:
        raise InvalidInput("No fields provided")

    # leaveDate 는 status="On Leave" 와 함께 올 때만 의미가 있다
    leave_date = None
    if status == EmployeeStatus.ON_LEAVE.value:
        leave_date = parse_leave_date(data.get("leaveDate"), today)

    await reconcile_and_commit(db, today)
    employee = await get_employee(db, employee_id, for_update=True)

    if "name" in columns or "department" in columns:
        await assert_unique_name(
            db,
            columns.get("name", employee.name),
            columns.get("department", employee.department),
            exclude_id=employee.id,
        )

    for column, value in columns.items():
        setattr(employee, column, value)

    if leave_date is not None:
        await mark_on_leave(db, employee, leave_date, policy)
    elif status == EmployeeStatus.ACTIVE.value:
        # 수동으로 Active 로 돌려도 원장 기록은 지우지 않는다
        employee.status = EmployeeStatus.ACTIVE.value

    try:
        await db.commit()
    except IntegrityError as exc:
        raise Conflict("Employee name already exists in this department") from exc
    await db.refresh(employee)
    return employee


async def delete_employee(db: AsyncSession, employee_id: int) -> None:
    employee = await get_employee(db, employee_id, for_update=True)

    # 원장 기록도 함께 삭제 (FK ON DELETE CASCADE 가 없는 DB 대비)
    removed = await ledger.delete_entries_for_employee(db, employee.id)
    await db.delete(employee)
    await db.commit()
    logger.info("Deleted employee %s with %s leave entries", employee_id, removed)
