from datetime import date
from typing import Any, Dict, Iterable, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.models.employee import Employee, EmployeeStatus
from staffdir.models.leave import LeaveEntry

UPCOMING_BIRTHDAY_LIMIT = 5


def _birthday_in(birthday: date, year: int) -> date:
    try:
        return birthday.replace(year=year)
    except ValueError:
        # 2월 29일생은 평년에 3월 1일
        return date(year, 3, 1)


def next_birthday(birthday: date, today: date) -> date:
    """오늘 이후(오늘 포함) 가장 가까운 생일."""
    candidate = _birthday_in(birthday, today.year)
    if candidate < today:
        candidate = _birthday_in(birthday, today.year + 1)
    return candidate


async def list_departments(
    db: AsyncSession,
    excluded: Iterable[str] = (),
) -> List[str]:
    hidden = set(excluded)
    result = await db.execute(
        select(Employee.department).distinct().order_by(Employee.department)
    )
    return [dept for dept in result.scalars().all() if dept and dept not in hidden]


async def employee_options(db: AsyncSession) -> List[Employee]:
    result = await db.execute(select(Employee).order_by(Employee.name, Employee.id))
    return list(result.scalars().all())


async def on_leave_today(db: AsyncSession, today: date) -> List[Employee]:
    """원장 기준 오늘 휴가인 직원."""
    result = await db.execute(
        select(Employee)
        .join(LeaveEntry, LeaveEntry.employee_id == Employee.id)
        .where(LeaveEntry.leave_date == today)
        .order_by(Employee.name)
    )
    return list(result.scalars().all())


async def employee_stats(
    db: AsyncSession,
    today: date,
    excluded_departments: Iterable[str] = (),
    birthday_window_days: int = 30,
) -> Dict[str, Any]:
    hidden = set(excluded_departments)

    total = (await db.execute(select(func.count(Employee.id)))).scalar_one()
    avg_age = (await db.execute(select(func.avg(Employee.age)))).scalar_one()
    total_on_leave = (
        await db.execute(
            select(func.count(Employee.id)).where(
                Employee.status == EmployeeStatus.ON_LEAVE.value
            )
        )
    ).scalar_one()

    count_col = func.count(Employee.id).label("count")
    dist_rows = await db.execute(
        select(Employee.department, count_col)
        .group_by(Employee.department)
        .order_by(count_col.desc(), Employee.department)
    )
    distribution = [
        {"department": row.department, "count": row.count}
        for row in dist_rows
        if row.department and row.department not in hidden
    ]

    birthday_rows = await db.execute(
        select(Employee.id, Employee.name, Employee.department, Employee.birthday)
        .where(Employee.birthday.is_not(None))
    )
    upcoming = []
    for row in birthday_rows:
        days_until = (next_birthday(row.birthday, today) - today).days
        if days_until <= birthday_window_days:
            upcoming.append(
                {
                    "id": row.id,
                    "name": row.name,
                    "department": row.department,
                    "birthday": row.birthday,
                    "daysUntil": days_until,
                }
            )
    upcoming.sort(key=lambda item: (item["daysUntil"], item["name"]))

    return {
        "totalEmployees": int(total or 0),
        "avgAge": round(float(avg_age), 1) if avg_age is not None else None,
        "totalOnLeave": int(total_on_leave or 0),
        "departmentDistribution": distribution,
        "upcomingBirthdays": upcoming[:UPCOMING_BIRTHDAY_LIMIT],
        "onLeaveToday": [
            {"id": emp.id, "name": emp.name, "department": emp.department}
            for emp in await on_leave_today(db, today)
        ],
    }
