from datetime import date

import pytest

from staffdir.core.exceptions import DuplicateDate, InvalidInput, QuotaExceeded
from staffdir.services.leave_policy import assert_can_mark_leave, parse_leave_date
from staffdir.services.periods import LeavePeriod, LeavePolicy

POLICY = LeavePolicy()

# 기준일 2024-03-25 → 기간 [2024-03-11, 2024-04-10] 에 이미 4일
FULL_PERIOD = (date(2024, 3, 12), date(2024, 3, 15), date(2024, 3, 20), date(2024, 4, 1))


class TestParseLeaveDate:
    def test_missing_date_defaults_to_today(self, today):
        assert parse_leave_date(None, today) == today

    @pytest.mark.parametrize("raw", ["", "  ", " 2024-03-26 ", "2024-03-26\n"])
    def test_present_but_blank_or_padded_is_rejected(self, today, raw):
        with pytest.raises(InvalidInput) as exc_info:
            parse_leave_date(raw, today)
        assert "leaveDate" in exc_info.value.field_errors

    def test_accepts_strict_iso_date(self, today):
        assert parse_leave_date("2024-04-05", today) == date(2024, 4, 5)

    def test_passes_date_objects_through(self, today):
        assert parse_leave_date(date(2024, 1, 2), today) == date(2024, 1, 2)

    @pytest.mark.parametrize(
        "raw",
        ["2024-4-5", "05/04/2024", "2024-04-05T00:00:00", "20240405", "yesterday"],
    )
    def test_rejects_other_shapes(self, today, raw):
        with pytest.raises(InvalidInput) as exc_info:
            parse_leave_date(raw, today)
        assert "leaveDate" in exc_info.value.field_errors

    def test_rejects_impossible_calendar_date(self, today):
        with pytest.raises(InvalidInput):
            parse_leave_date("2023-02-29", today)

    def test_reports_the_given_field_name(self, today):
        with pytest.raises(InvalidInput) as exc_info:
            parse_leave_date("bad", today, field="startDate")
        assert "startDate" in exc_info.value.field_errors


async def test_fifth_day_in_period_is_rejected(seed, db):
    employee_id = await seed.employee()
    await seed.leave(employee_id, *FULL_PERIOD)

    with pytest.raises(QuotaExceeded):
        await assert_can_mark_leave(db, employee_id, date(2024, 4, 5), POLICY)


async def test_quota_is_checked_before_duplicate(seed, db):
    employee_id = await seed.employee()
    await seed.leave(employee_id, *FULL_PERIOD)

    # 이미 기록된 날짜지만 한도가 찼으므로 QuotaExceeded 가 우선
    with pytest.raises(QuotaExceeded):
        await assert_can_mark_leave(db, employee_id, date(2024, 3, 15), POLICY)


async def test_same_date_is_rejected_as_duplicate(seed, db):
    employee_id = await seed.employee()
    await seed.leave(employee_id, date(2024, 3, 12))

    with pytest.raises(DuplicateDate):
        await assert_can_mark_leave(db, employee_id, date(2024, 3, 12), POLICY)


async def test_admissible_date_returns_its_period(seed, db):
    employee_id = await seed.employee()
    await seed.leave(employee_id, date(2024, 3, 12), date(2024, 3, 15), date(2024, 3, 20))

    period = await assert_can_mark_leave(db, employee_id, date(2024, 4, 10), POLICY)
    assert period == LeavePeriod(date(2024, 3, 11), date(2024, 4, 10))


async def test_full_period_does_not_block_the_next_one(seed, db):
    employee_id = await seed.employee()
    await seed.leave(employee_id, *FULL_PERIOD)

    period = await assert_can_mark_leave(db, employee_id, date(2024, 4, 11), POLICY)
    assert period.start == date(2024, 4, 11)


async def test_other_employees_do_not_count(seed, db):
    busy = await seed.employee(name="Busy")
    idle = await seed.employee(name="Idle")
    await seed.leave(busy, *FULL_PERIOD)

    await assert_can_mark_leave(db, idle, date(2024, 4, 5), POLICY)


async def test_quota_and_start_day_follow_the_policy(seed, db):
    employee_id = await seed.employee()
    await seed.leave(employee_id, date(2024, 3, 2), date(2024, 3, 3))
    policy = LeavePolicy(period_start_day=1, max_days_per_period=2)

    with pytest.raises(QuotaExceeded):
        await assert_can_mark_leave(db, employee_id, date(2024, 3, 31), policy)
    # 4월은 새 기간
    await assert_can_mark_leave(db, employee_id, date(2024, 4, 1), policy)
