"""
휴가 등록 가능 여부 판단.

순서가 중요하다:
1) 기간 한도(quota) 먼저 → QuotaExceeded
2) 그 다음 같은 날짜 중복 → DuplicateDate
한도가 찬 상태에서 이미 기록된 날짜를 다시 요청하면 QuotaExceeded 가 나가야 한다.
"""
import logging
import re
from datetime import date
from typing import Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.core.exceptions import DuplicateDate, InvalidInput, QuotaExceeded
from staffdir.services import ledger
from staffdir.services.periods import LeavePeriod, LeavePolicy, period_for

logger = logging.getLogger(__name__)

_ISO_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_leave_date(
    value: Union[str, date, None],
    today: date,
    field: str = "leaveDate",
) -> date:
    """
    요청의 leaveDate 정규화.
    - 필드가 없을 때(None)만 오늘
    - 값이 있으면 엄격하게 YYYY-MM-DD 만 허용. 빈 문자열, 앞뒤 공백도 InvalidInput
    """
    if value is None:
        return today
    if isinstance(value, date):
        return value

    if not _ISO_DATE_RE.fullmatch(value):
        raise InvalidInput(
            f"{field} must be in YYYY-MM-DD format",
            field_errors={field: "Use the YYYY-MM-DD format"},
        )
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidInput(
            f"{field} is not a valid calendar date",
            field_errors={field: "Not a valid calendar date"},
        ) from exc


async def assert_can_mark_leave(
    db: AsyncSession,
    employee_id: int,
    leave_date: date,
    policy: LeavePolicy,
) -> LeavePeriod:
    """
    등록 가능하면 해당 기간을 돌려주고, 아니면 QuotaExceeded / DuplicateDate.
    아무 것도 쓰지 않는다.
    """
    period = period_for(leave_date, policy.period_start_day)

    used = await ledger.count_in_period(db, employee_id, period)
    if used >= policy.max_days_per_period:
        logger.info(
            "Leave quota reached for employee %s in period %s..%s (%s/%s)",
            employee_id,
            period.start,
            period.end,
            used,
            policy.max_days_per_period,
        )
        raise QuotaExceeded(
            f"Employee already has {used} leave days between "
            f"{period.start.isoformat()} and {period.end.isoformat()} "
            f"(limit {policy.max_days_per_period})",
            field_errors={"leaveDate": "Leave limit reached for this period"},
        )

    if await ledger.has_entry(db, employee_id, leave_date):
        logger.info(
            "Duplicate leave date %s for employee %s", leave_date, employee_id
        )
        raise DuplicateDate(
            f"Leave is already recorded on {leave_date.isoformat()}",
            field_errors={"leaveDate": "Already on leave for this date"},
        )

    return period


def remaining_days(used: int, policy: Optional[LeavePolicy] = None) -> int:
    policy = policy or LeavePolicy()
    return max(policy.max_days_per_period - used, 0)
