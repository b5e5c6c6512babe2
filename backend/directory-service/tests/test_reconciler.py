from datetime import date

from staffdir.models.employee import EmployeeStatus
from staffdir.services.reconciler import reconcile_and_commit, reconcile_leave_statuses


async def test_expired_leave_reverts_to_active(seed, db):
    employee_id = await seed.employee(status=EmployeeStatus.ON_LEAVE)
    await seed.leave(employee_id, date(2024, 3, 20))

    changed = await reconcile_leave_statuses(db, date(2024, 3, 21))
    await db.commit()

    assert changed == 1
    assert await seed.status_of(employee_id) == "Active"


async def test_leave_recorded_for_today_stays_on_leave(seed, db):
    employee_id = await seed.employee(status=EmployeeStatus.ON_LEAVE)
    await seed.leave(employee_id, date(2024, 3, 20), date(2024, 3, 21))

    changed = await reconcile_leave_statuses(db, date(2024, 3, 21))
    await db.commit()

    assert changed == 0
    assert await seed.status_of(employee_id) == "On Leave"


async def test_second_run_changes_nothing(seed, db):
    stale = await seed.employee(name="Stale", status=EmployeeStatus.ON_LEAVE)
    current = await seed.employee(name="Current", status=EmployeeStatus.ON_LEAVE)
    await seed.leave(stale, date(2024, 3, 20))
    await seed.leave(current, date(2024, 3, 21))

    assert await reconcile_leave_statuses(db, date(2024, 3, 21)) == 1
    await db.commit()
    assert await reconcile_leave_statuses(db, date(2024, 3, 21)) == 0
    await db.commit()

    assert await seed.status_of(stale) == "Active"
    assert await seed.status_of(current) == "On Leave"


async def test_active_employees_are_left_alone(seed, db):
    employee_id = await seed.employee()
    await seed.leave(employee_id, date(2024, 3, 21))

    assert await reconcile_leave_statuses(db, date(2024, 3, 21)) == 0
    await db.commit()
    assert await seed.status_of(employee_id) == "Active"


async def test_reconcile_and_commit_is_visible_to_other_sessions(seed, db):
    employee_id = await seed.employee(status=EmployeeStatus.ON_LEAVE)
    await seed.leave(employee_id, date(2024, 3, 20))

    assert await reconcile_and_commit(db, date(2024, 3, 21)) == 1
    assert await seed.status_of(employee_id) == "Active"
