"""
Leave Allowance Calculator.

An employee may hold at most ``max_per_month`` days of PENDING or
APPROVED leave whose start falls in a given calendar month.  The month
is the one containing the request's ``from_date``, not the submission
date.  Pending requests reserve allowance until they are decided;
rejected ones never count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from workday.core.exceptions import (AlreadyDecided, EmployeeNotFound,
                                     InvalidDateRange, LeaveRequestNotFound,
                                     MonthlyLimitExceeded)
from workday.models.leave import LeaveRequest, LeaveStatus
from workday.services.dates import inclusive_days, month_bounds
from workday.services.store import LeaveFilter, LeaveRow, RecordStore

logger = logging.getLogger(__name__)

COUNTED_STATUSES = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


@dataclass(frozen=True)
class LeaveSubmission:
    leave: LeaveRequest
    remaining_days: int


@dataclass(frozen=True)
class LeaveUsage:
    month_start: date
    month_end: date
    used_days: int
    remaining_days: int
    limit: int


class LeaveAllowanceCalculator:
    def __init__(
        self,
        store: RecordStore,
        *,
        max_per_month: int,
        allow_redecision: bool = True,
    ):
        self._store = store
        self._max = max_per_month
        self._allow_redecision = allow_redecision

    async def _used_days(self, employee_id: int, day: date) -> int:
        first_day, last_day = month_bounds(day)
        return await self._store.sum_leave_days(
            employee_id=employee_id,
            first_day=first_day,
            last_day=last_day,
            statuses=COUNTED_STATUSES,
        )

    async def submit(
        self,
        employee_id: int,
        from_date: date,
        to_date: date,
        reason: str,
    ) -> LeaveSubmission:
        total_days = inclusive_days(from_date, to_date)
        if total_days <= 0:
            raise InvalidDateRange()

        if await self._store.lock_employee(employee_id) is None:
            await self._store.rollback()
            raise EmployeeNotFound()

        used_days = await self._used_days(employee_id, from_date)
        if used_days + total_days > self._max:
            await self._store.rollback()
            logger.warning(
                "Leave refused for employee %d: %d used + %d requested > %d",
                employee_id, used_days, total_days, self._max,
            )
            raise MonthlyLimitExceeded(remaining=self._max - used_days, limit=self._max)

        leave = await self._store.create_leave(
            employee_id=employee_id,
            from_date=from_date,
            to_date=to_date,
            reason=reason,
            total_days=total_days,
        )
        await self._store.commit()

        logger.info(
            "Leave %d submitted: employee %d, %s..%s (%d days)",
            leave.id, employee_id, from_date, to_date, total_days,
        )
        return LeaveSubmission(leave=leave, remaining_days=self._max - used_days - total_days)

    async def decide(self, leave_id: int, status: LeaveStatus) -> LeaveRequest:
        """Move a request to APPROVED or REJECTED.

        Other pending requests are not re-evaluated.  Whether an already
        decided request may be overwritten depends on ``allow_redecision``.
        """
        if status == LeaveStatus.PENDING:
            raise ValueError("A leave request can only be decided as APPROVED or REJECTED")

        leave = await self._store.get_leave(leave_id, for_update=True)
        if leave is None:
            await self._store.rollback()
            raise LeaveRequestNotFound()

        previous = leave.status
        if previous != LeaveStatus.PENDING.value and not self._allow_redecision:
            # rollback expires the instance; only the captured status is safe to read
            await self._store.rollback()
            raise AlreadyDecided(f"Leave request already {previous}")

        leave = await self._store.set_leave_status(leave, status)
        await self._store.commit()

        logger.info("Leave %d: %s -> %s", leave_id, previous, status.value)
        return leave

    async def usage(self, employee_id: int, day: date) -> LeaveUsage:
        month_start, month_end = month_bounds(day)
        used_days = await self._used_days(employee_id, day)
        return LeaveUsage(
            month_start=month_start,
            month_end=month_end,
            used_days=used_days,
            remaining_days=max(0, self._max - used_days),
            limit=self._max,
        )

    async def query(self, filters: LeaveFilter) -> Sequence[LeaveRow]:
        return await self._store.list_leaves(filters)
