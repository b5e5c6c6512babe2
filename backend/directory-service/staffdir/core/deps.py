from datetime import date

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.core.config import settings
from staffdir.core.db import get_db
from staffdir.services.periods import LeavePolicy
from staffdir.services.reconciler import reconcile_and_commit


def get_today() -> date:
    """
    "오늘" 기준 날짜. 테스트에서는 dependency_overrides 로 고정한다.
    """
    return date.today()


def get_leave_policy() -> LeavePolicy:
    return LeavePolicy(
        period_start_day=settings.LEAVE_PERIOD_START_DAY,
        max_days_per_period=settings.LEAVE_MAX_DAYS_PER_PERIOD,
    )


async def get_reconciled_db(
    db: AsyncSession = Depends(get_db),
    today: date = Depends(get_today),
) -> AsyncSession:
    """
    조회 API 용 세션: status 를 노출하기 전에 먼저 보정하고 commit 한다.
    """
    await reconcile_and_commit(db, today)
    return db
