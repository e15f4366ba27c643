"""Engine-level tests for the Permission Allowance Calculator."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from workday.core.exceptions import EmployeeNotFound, InvalidTimeRange
from workday.services.permission import PermissionAllowanceCalculator
from workday.services.store import PermissionFilter

UTC = timezone.utc
NOW = datetime(2025, 3, 10, 8, 0, tzinfo=UTC)


def at(hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2025, 3, 10, hour, minute, second, tzinfo=UTC)


@pytest.fixture
def permissions(store) -> PermissionAllowanceCalculator:
    return PermissionAllowanceCalculator(store, max_minutes_per_day=120, tz=UTC)


async def test_submit_within_allowance(permissions, make_employee):
    emp = await make_employee()
    result = await permissions.submit(emp.id, at(10), at(10, 45), "Bank", now=NOW)
    assert result.permission.duration_minutes == 45
    assert result.permission.extra_minutes == 0
    assert result.permission.date == date(2025, 3, 10)
    assert result.total_used_minutes == 45
    assert result.remaining_minutes == 75
    assert result.exceeded_limit is False


async def test_overage_is_recorded_not_refused(permissions, make_employee):
    emp = await make_employee()
    await permissions.submit(emp.id, at(10), at(10, 40), "Errand", now=NOW)
    result = await permissions.submit(emp.id, at(14), at(15, 30), "Clinic", now=NOW)
    assert result.permission.duration_minutes == 90
    assert result.total_used_minutes == 130
    assert result.permission.extra_minutes == 10
    assert result.remaining_minutes == 0
    assert result.exceeded_limit is True


async def test_extra_minutes_only_counts_this_requests_overflow(permissions, make_employee):
    emp = await make_employee()
    await permissions.submit(emp.id, at(9), at(11, 30), "Long", now=NOW)  # 150
    result = await permissions.submit(emp.id, at(15), at(15, 20), "Short", now=NOW)
    # extra = max(0, used_before + this - cap) = 150 + 20 - 120
    assert result.permission.extra_minutes == 50
    assert result.total_used_minutes == 170


async def test_reaching_cap_exactly_is_not_exceeding(permissions, make_employee):
    emp = await make_employee()
    result = await permissions.submit(emp.id, at(9), at(11), "Two hours", now=NOW)
    assert result.permission.extra_minutes == 0
    assert result.remaining_minutes == 0
    assert result.exceeded_limit is False


async def test_duration_is_floored_to_whole_minutes(permissions, make_employee):
    emp = await make_employee()
    result = await permissions.submit(emp.id, at(14), at(15, 30, 45), "Floor", now=NOW)
    assert result.permission.duration_minutes == 90


@pytest.mark.parametrize(
    "start,end",
    [
        (at(14), at(14)),
        (at(15), at(14)),
        (at(14), at(14, 0, 59)),
    ],
)
async def test_invalid_time_range(permissions, make_employee, start, end):
    emp = await make_employee()
    with pytest.raises(InvalidTimeRange):
        await permissions.submit(emp.id, start, end, "Bad", now=NOW)


async def test_unknown_employee(permissions, session_factory):
    with pytest.raises(EmployeeNotFound):
        await permissions.submit(999, at(10), at(11), "Ghost", now=NOW)


async def test_previous_days_do_not_count(permissions, make_employee):
    emp = await make_employee()
    yesterday = NOW - timedelta(days=1)
    await permissions.submit(emp.id, at(9) - timedelta(days=1), at(11) - timedelta(days=1), "Y", now=yesterday)
    result = await permissions.submit(emp.id, at(9), at(10), "T", now=NOW)
    assert result.total_used_minutes == 60
    assert result.exceeded_limit is False


async def test_naive_times_use_reference_zone(store, make_employee):
    emp = await make_employee()
    kolkata = PermissionAllowanceCalculator(store, max_minutes_per_day=120, tz=ZoneInfo("Asia/Kolkata"))
    result = await kolkata.submit(
        emp.id, datetime(2025, 3, 10, 14, 30), datetime(2025, 3, 10, 15, 0), "Local", now=NOW
    )
    assert result.permission.duration_minutes == 30
    start = result.permission.start_time.replace(tzinfo=None)
    assert start == datetime(2025, 3, 10, 9, 0)


async def test_usage(permissions, make_employee):
    emp = await make_employee()
    await permissions.submit(emp.id, at(10), at(10, 30), "x", now=NOW)
    usage = await permissions.usage(emp.id, NOW)
    assert usage.date == date(2025, 3, 10)
    assert usage.used_minutes == 30
    assert usage.remaining_minutes == 90
    assert usage.limit == 120

    other_day = await permissions.usage(emp.id, NOW, day=date(2025, 3, 9))
    assert other_day.used_minutes == 0


async def test_query_joins_employee_and_filters_by_date(permissions, make_employee):
    alice = await make_employee("Alice")
    bob = await make_employee("Bob")
    await permissions.submit(alice.id, at(10), at(10, 30), "a1", now=NOW)
    await permissions.submit(alice.id, at(12), at(12, 30), "a2", now=NOW)
    await permissions.submit(bob.id, at(10), at(10, 30), "b1", now=NOW + timedelta(days=1))

    rows = await permissions.query(PermissionFilter(date=date(2025, 3, 10)))
    assert [r.permission.reason for r in rows] == ["a2", "a1"]
    assert rows[0].employee.name == "Alice"

    rows = await permissions.query(PermissionFilter(employee_id=bob.id))
    assert [r.permission.reason for r in rows] == ["b1"]


async def test_query_has_no_side_effects(permissions, make_employee):
    emp = await make_employee()
    await permissions.submit(emp.id, at(10), at(12, 30), "Long errand", now=NOW)

    first = await permissions.query(PermissionFilter(employee_id=emp.id))
    second = await permissions.query(PermissionFilter(employee_id=emp.id))
    assert [(r.permission.id, r.permission.extra_minutes) for r in first] == [
        (r.permission.id, r.permission.extra_minutes) for r in second
    ]
    usage = await permissions.usage(emp.id, NOW)
    assert usage.used_minutes == 150
