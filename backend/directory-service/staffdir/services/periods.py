"""
회사 기준 "한 달" 휴가 기간 계산.

기간은 매달 period_start_day(기본 11일)에 시작해서 다음 달 (시작일 - 1)일에 끝난다.
예) 시작일 11 → 2024-03-05 는 [2024-02-11, 2024-03-10], 2024-03-15 는 [2024-03-11, 2024-04-10]
모든 날짜는 정확히 하나의 기간에 속하고, 기간끼리 겹치거나 비는 구간이 없다.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Union

DEFAULT_PERIOD_START_DAY = 11
DEFAULT_MAX_DAYS_PER_PERIOD = 4


@dataclass(frozen=True)
class LeavePeriod:
    start: date
    end: date

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def length(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class LeavePolicy:
    """기간 시작일과 기간당 최대 휴가 일수. settings에서 만들어 주입한다."""

    period_start_day: int = DEFAULT_PERIOD_START_DAY
    max_days_per_period: int = DEFAULT_MAX_DAYS_PER_PERIOD

    def __post_init__(self) -> None:
        if not 1 <= self.period_start_day <= 28:
            raise ValueError("period_start_day must be between 1 and 28")
        if self.max_days_per_period < 1:
            raise ValueError("max_days_per_period must be at least 1")


def _shift_month(year: int, month: int, delta: int) -> tuple:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def period_for(
    day: Union[date, datetime],
    period_start_day: int = DEFAULT_PERIOD_START_DAY,
) -> LeavePeriod:
    """
    day 가 속한 기간. period_start_day 는 모든 달에 있는 날짜(1~28)여야 한다.
    """
    if not 1 <= period_start_day <= 28:
        raise ValueError("period_start_day must be between 1 and 28")

    # datetime 이 들어오면 시각은 버리고 날짜만 사용
    if isinstance(day, datetime):
        day = day.date()

    if day.day >= period_start_day:
        start_year, start_month = day.year, day.month
    else:
        start_year, start_month = _shift_month(day.year, day.month, -1)

    end_year, end_month = _shift_month(start_year, start_month, 1)
    start = date(start_year, start_month, period_start_day)
    end = date(end_year, end_month, period_start_day) - timedelta(days=1)
    return LeavePeriod(start=start, end=end)
