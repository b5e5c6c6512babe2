"""
employees.status 보정.

cron/스케줄러 대신 읽기/쓰기 요청마다 먼저 호출한다.
"On Leave" 인데 오늘 날짜의 원장 기록이 없으면 "Active" 로 되돌린다.
같은 상태에서 두 번 돌려도 두 번째는 바뀌는 행이 없다.
"""
import logging
from datetime import date

from sqlalchemy import and_, exists, update
from sqlalchemy.ext.asyncio import AsyncSession

from staffdir.models.employee import Employee, EmployeeStatus
from staffdir.models.leave import LeaveEntry

logger = logging.getLogger(__name__)


async def reconcile_leave_statuses(db: AsyncSession, today: date) -> int:
    """변경된 직원 수를 돌려준다. commit 은 호출한 쪽 책임."""
    on_leave_today = exists().where(
        and_(
            LeaveEntry.employee_id == Employee.id,
            LeaveEntry.leave_date == today,
        )
    )
    # 조회와 변경 사이에 오늘 휴가가 새로 기록될 수 있으므로 조건을 UPDATE 안에 둔다
    result = await db.execute(
        update(Employee)
        .where(
            and_(
                Employee.status == EmployeeStatus.ON_LEAVE.value,
                ~on_leave_today,
            )
        )
        .values(status=EmployeeStatus.ACTIVE.value)
        .execution_options(synchronize_session=False)
    )
    changed = result.rowcount or 0
    if changed:
        logger.info(
            "Reverted %s employee(s) from On Leave to Active for %s",
            changed,
            today,
        )
    return changed


async def reconcile_and_commit(db: AsyncSession, today: date) -> int:
    """
    보정만 짧은 트랜잭션으로 먼저 commit.
    이후 휴가 등록 트랜잭션에는 보정 UPDATE 의 행 잠금이 남지 않는다.
    """
    changed = await reconcile_leave_statuses(db, today)
    await db.commit()
    return changed
