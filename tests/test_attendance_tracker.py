"""Engine-level tests for the Attendance Tracker."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from workday.core.exceptions import (AlreadyCheckedIn, AlreadyCheckedOut,
                                     EmployeeNotFound, NoCheckInFound)
from workday.db.store import SqlRecordStore
from workday.services.attendance import AttendanceTracker
from workday.services.store import AttendanceFilter

UTC = timezone.utc
MORNING = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)


@pytest.fixture
def tracker(store) -> AttendanceTracker:
    return AttendanceTracker(store, tz=UTC)


async def test_check_in_creates_open_record(tracker, make_employee):
    emp = await make_employee()
    att = await tracker.check_in(emp.id, MORNING)
    assert att.id is not None
    assert att.employee_id == emp.id
    assert att.date == date(2025, 3, 10)
    assert att.check_out is None
    assert att.total_hours is None


async def test_second_check_in_same_day_rejected(tracker, make_employee):
    emp = await make_employee()
    await tracker.check_in(emp.id, MORNING)
    with pytest.raises(AlreadyCheckedIn):
        await tracker.check_in(emp.id, MORNING + timedelta(minutes=5))


async def test_check_in_rejected_even_after_check_out(tracker, make_employee):
    emp = await make_employee()
    await tracker.check_in(emp.id, MORNING)
    await tracker.check_out(emp.id, MORNING + timedelta(hours=8))
    with pytest.raises(AlreadyCheckedIn):
        await tracker.check_in(emp.id, MORNING + timedelta(hours=9))


async def test_check_in_next_day_allowed(tracker, make_employee):
    emp = await make_employee()
    await tracker.check_in(emp.id, MORNING)
    att = await tracker.check_in(emp.id, MORNING + timedelta(days=1))
    assert att.date == date(2025, 3, 11)


async def test_check_in_unknown_employee(tracker, session_factory):
    with pytest.raises(EmployeeNotFound):
        await tracker.check_in(999, MORNING)


async def test_check_out_computes_total_hours(tracker, make_employee):
    emp = await make_employee()
    await tracker.check_in(emp.id, MORNING)
    att = await tracker.check_out(emp.id, MORNING + timedelta(hours=8, minutes=30))
    assert att.total_hours == 8.5
    assert att.check_out is not None


async def test_check_out_rounds_to_two_decimals(tracker, make_employee):
    emp = await make_employee()
    await tracker.check_in(emp.id, MORNING)
    att = await tracker.check_out(emp.id, MORNING + timedelta(hours=7, minutes=40))
    assert att.total_hours == 7.67


async def test_check_out_rounds_half_hundredths_up(tracker, make_employee):
    emp = await make_employee()
    await tracker.check_in(emp.id, MORNING)
    att = await tracker.check_out(emp.id, MORNING + timedelta(minutes=7, seconds=30))
    assert att.total_hours == 0.13


async def test_check_out_without_check_in(tracker, make_employee):
    emp = await make_employee()
    with pytest.raises(NoCheckInFound):
        await tracker.check_out(emp.id, MORNING)


async def test_check_out_uses_todays_record_only(tracker, make_employee):
    emp = await make_employee()
    await tracker.check_in(emp.id, MORNING)
    with pytest.raises(NoCheckInFound):
        await tracker.check_out(emp.id, MORNING + timedelta(days=1))


async def test_double_check_out_rejected(tracker, make_employee):
    emp = await make_employee()
    await tracker.check_in(emp.id, MORNING)
    await tracker.check_out(emp.id, MORNING + timedelta(hours=8))
    with pytest.raises(AlreadyCheckedOut):
        await tracker.check_out(emp.id, MORNING + timedelta(hours=9))


async def test_check_out_before_check_in_gives_negative_hours(tracker, make_employee):
    """A skewed clock is not guarded against; the duration goes negative."""
    emp = await make_employee()
    await tracker.check_in(emp.id, MORNING)
    att = await tracker.check_out(emp.id, MORNING - timedelta(hours=1))
    assert att.total_hours == -1.0


async def test_calendar_day_follows_reference_zone(store, make_employee):
    emp = await make_employee()
    tracker = AttendanceTracker(store, tz=ZoneInfo("Asia/Kolkata"))
    # 20:00 UTC is 01:30 the next morning in Kolkata
    att = await tracker.check_in(emp.id, datetime(2025, 3, 10, 20, 0, tzinfo=UTC))
    assert att.date == date(2025, 3, 11)
    with pytest.raises(AlreadyCheckedIn):
        await tracker.check_in(emp.id, datetime(2025, 3, 11, 4, 0, tzinfo=UTC))


class _BlindStore(SqlRecordStore):
    """Never sees an existing record, like a check-in racing another one."""

    async def find_attendance(self, *, employee_id, day):
        return None


async def test_unique_constraint_catches_racing_check_in(db_session, make_employee):
    emp = await make_employee()
    tracker = AttendanceTracker(_BlindStore(db_session), tz=UTC)
    await tracker.check_in(emp.id, MORNING)
    with pytest.raises(AlreadyCheckedIn):
        await tracker.check_in(emp.id, MORNING + timedelta(minutes=1))

    rows = await tracker.query(AttendanceFilter(employee_id=emp.id))
    assert len(rows) == 1


async def test_query_filters_and_orders(tracker, make_employee):
    alice = await make_employee("Alice")
    bob = await make_employee("Bob")
    for offset in range(3):
        await tracker.check_in(alice.id, MORNING + timedelta(days=offset))
    await tracker.check_in(bob.id, MORNING)

    rows = await tracker.query(AttendanceFilter(employee_id=alice.id))
    assert [r.attendance.date for r in rows] == [
        date(2025, 3, 12),
        date(2025, 3, 11),
        date(2025, 3, 10),
    ]
    assert all(r.employee.name == "Alice" for r in rows)

    rows = await tracker.query(AttendanceFilter(date=date(2025, 3, 10)))
    assert {r.employee.name for r in rows} == {"Alice", "Bob"}

    rows = await tracker.query(AttendanceFilter(employee_id=bob.id, date=date(2025, 3, 11)))
    assert rows == []


async def test_query_has_no_side_effects(tracker, make_employee):
    emp = await make_employee()
    await tracker.check_in(emp.id, MORNING)
    first = await tracker.query(AttendanceFilter())
    second = await tracker.query(AttendanceFilter())
    assert [r.attendance.id for r in first] == [r.attendance.id for r in second]
