from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.core.config import settings
from staffdir.core.db import get_db
from staffdir.core.deps import get_leave_policy, get_reconciled_db, get_today
from staffdir.core.security import get_current_user
from staffdir.schemas.employee import (
    Employee as EmployeeSchema,
    EmployeeCreate,
    EmployeeDetail,
    EmployeeOption,
    EmployeeStats,
    EmployeeUpdate,
    StatusValue,
)
from staffdir.services import employees as employee_service
from staffdir.services import stats as stats_service
from staffdir.services.periods import LeavePolicy

router = APIRouter(
    prefix="/api/employees",
    tags=["employees"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "",
    response_model=List[EmployeeSchema],
)
async def list_employees(
    department: Optional[str] = None,
    status: Optional[StatusValue] = None,
    db: AsyncSession = Depends(get_reconciled_db),
):
    return await employee_service.list_employees(db, department=department, status=status)


@router.get(
    "/options",
    response_model=List[EmployeeOption],
)
async def list_employee_options(
    db: AsyncSession = Depends(get_db),
):
    """휴가 관리 화면의 직원 선택 목록"""
    return await stats_service.employee_options(db)


@router.get(
    "/departments",
    response_model=List[str],
)
async def list_departments(
    db: AsyncSession = Depends(get_db),
):
    return await stats_service.list_departments(db, excluded=settings.EXCLUDED_DEPARTMENTS)


@router.get(
    "/stats",
    response_model=EmployeeStats,
)
async def get_stats(
    db: AsyncSession = Depends(get_reconciled_db),
    today: date = Depends(get_today),
):
    return await stats_service.employee_stats(
        db,
        today,
        excluded_departments=settings.EXCLUDED_DEPARTMENTS,
        birthday_window_days=settings.UPCOMING_BIRTHDAY_WINDOW_DAYS,
    )


@router.post(
    "",
    response_model=EmployeeSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_employee(
    payload: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
    policy: LeavePolicy = Depends(get_leave_policy),
):
    return await employee_service.create_employee(db, payload, today, policy)


@router.get(
    "/{employee_id}",
    response_model=EmployeeDetail,
)
async def get_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_reconciled_db),
    today: date = Depends(get_today),
    policy: LeavePolicy = Depends(get_leave_policy),
):
    detail = await employee_service.employee_detail(db, employee_id, today, policy)
    employee = EmployeeSchema.model_validate(detail["employee"])
    return EmployeeDetail(
        **employee.model_dump(),
        leaveHistory=detail["leaveHistory"],
    )


@router.put(
    "/{employee_id}",
    response_model=EmployeeSchema,
)
async def update_employee(
    employee_id: int,
    payload: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
    policy: LeavePolicy = Depends(get_leave_policy),
):
    return await employee_service.update_employee(db, employee_id, payload, today, policy)


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
):
    await employee_service.delete_employee(db, employee_id)
    # 204 No Content → 바디 없음
