from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.core.config import settings
from staffdir.core.db import get_db
from staffdir.core.deps import get_leave_policy, get_today
from staffdir.core.security import get_current_user
from staffdir.schemas.leave import (
    LeaveBulkCreate,
    LeaveBulkResult,
    LeaveEntryCreate,
    LeaveEntryRead,
    LeaveEntryUpdate,
)
from staffdir.services import leave_entries
from staffdir.services.periods import LeavePolicy

# /api/employees/{employee_id} 보다 먼저 include 해야 "leave" 가 id 로 해석되지 않는다
router = APIRouter(
    prefix="/api/employees/leave",
    tags=["leave"],
    dependencies=[Depends(get_current_user)],
)


@router.get(
    "",
    response_model=List[LeaveEntryRead],
)
async def list_leave_entries(
    employee_id: Optional[int] = Query(None, alias="employeeId"),
    leave_date: Optional[date] = Query(None, alias="leaveDate"),
    db: AsyncSession = Depends(get_db),
):
    """
    휴가 기록 목록 (최근 날짜 먼저).

    예:
    GET /api/employees/leave?employeeId=1
    GET /api/employees/leave?leaveDate=2024-03-20
    """
    return await leave_entries.list_entries(db, employee_id=employee_id, leave_date=leave_date)


@router.post(
    "",
    response_model=LeaveEntryRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_leave_entry(
    payload: LeaveEntryCreate,
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
    policy: LeavePolicy = Depends(get_leave_policy),
):
    return await leave_entries.create_entry(
        db, payload.employeeId, payload.leaveDate, today, policy
    )


@router.post(
    "/bulk",
    response_model=LeaveBulkResult,
    status_code=status.HTTP_201_CREATED,
)
async def bulk_create_leave_entries(
    payload: LeaveBulkCreate,
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
    policy: LeavePolicy = Depends(get_leave_policy),
):
    return await leave_entries.bulk_create(
        db,
        payload.employeeIds,
        payload.startDate,
        payload.endDate,
        today,
        policy,
        max_days=settings.LEAVE_BULK_MAX_DAYS,
    )


@router.put(
    "/{entry_id}",
    response_model=LeaveEntryRead,
)
async def update_leave_entry(
    entry_id: int,
    payload: LeaveEntryUpdate,
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
    policy: LeavePolicy = Depends(get_leave_policy),
):
    return await leave_entries.move_entry(
        db, entry_id, payload.employeeId, payload.leaveDate, today, policy
    )


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_leave_entry(
    entry_id: int,
    db: AsyncSession = Depends(get_db),
):
    await leave_entries.delete_entry(db, entry_id)
