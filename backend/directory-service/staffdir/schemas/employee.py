from datetime import date
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

StatusValue = Literal["Active", "On Leave"]


class EmployeeBase(BaseModel):
    birthday: Optional[date] = None
    address: Optional[str] = Field(None, max_length=255)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=30)
    hireDate: Optional[date] = None


class EmployeeCreate(EmployeeBase):
    """POST /api/employees 요청 바디

    status 가 "On Leave" 이면 leaveDate(YYYY-MM-DD, 없으면 오늘)로 휴가 등록까지 한다.
    name / department 누락은 422 가 아니라 서비스에서 400 (fieldErrors) 으로 응답한다.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, max_length=120)
    department: Optional[str] = Field(None, max_length=100)
    status: Optional[StatusValue] = None
    leaveDate: Optional[str] = None


class EmployeeUpdate(EmployeeBase):
    """PUT /api/employees/{id} 요청 바디 (부분 수정)"""
    model_config = ConfigDict(extra="forbid")  # 정의되지 않은 필드가 들어오면 422 에러

    name: Optional[str] = Field(None, max_length=120)
    department: Optional[str] = Field(None, max_length=100)
    status: Optional[StatusValue] = None
    leaveDate: Optional[str] = None


class Employee(BaseModel):
    """응답용 스키마"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    department: str
    status: StatusValue
    birthday: Optional[date] = None
    address: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    hireDate: Optional[date] = Field(
        None,
        validation_alias=AliasChoices("hire_date", "hireDate"),
    )


class LeaveHistory(BaseModel):
    periodStart: date
    periodEnd: date
    dates: List[date]  # 최근 날짜가 먼저
    used: int
    remaining: int


class EmployeeDetail(Employee):
    leaveHistory: LeaveHistory


class EmployeeOption(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    department: str


class DepartmentCount(BaseModel):
    department: str
    count: int


class UpcomingBirthday(BaseModel):
    id: int
    name: str
    department: str
    birthday: date
    daysUntil: int


class EmployeeStats(BaseModel):
    totalEmployees: int
    avgAge: Optional[float] = None
    totalOnLeave: int
    departmentDistribution: List[DepartmentCount]
    upcomingBirthdays: List[UpcomingBirthday]
    onLeaveToday: List[EmployeeOption]
