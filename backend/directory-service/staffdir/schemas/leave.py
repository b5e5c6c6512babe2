from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class LeaveEntryCreate(BaseModel):
    """POST /api/employees/leave 요청 바디 (leaveDate 없으면 오늘)"""
    employeeId: int = Field(..., ge=1)
    leaveDate: Optional[str] = None


class LeaveEntryUpdate(BaseModel):
    """PUT /api/employees/leave/{entryId} 요청 바디"""
    employeeId: int = Field(..., ge=1)
    leaveDate: str


class LeaveBulkCreate(BaseModel):
    """
    여러 직원 x 날짜 범위를 한 번에 등록.
    하나라도 거절되면 전체가 반영되지 않는다.
    """
    employeeIds: List[int] = Field(..., min_length=1)
    startDate: str
    endDate: Optional[str] = None


class LeaveEntryRead(BaseModel):
    id: int
    employeeId: int
    employeeName: str
    department: str
    leaveDate: date


class LeaveBulkResult(BaseModel):
    created: int
    skipped: int
