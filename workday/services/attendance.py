"""
Attendance Tracker: one check-in and one check-out per employee per
calendar day.
"""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Sequence

from sqlalchemy.exc import IntegrityError

from workday.core.exceptions import (AlreadyCheckedIn, AlreadyCheckedOut,
                                     EmployeeNotFound, NoCheckInFound)
from workday.models.attendance import Attendance
from workday.services.dates import elapsed_hours, ensure_utc, local_day
from workday.services.store import AttendanceFilter, AttendanceRow, RecordStore

logger = logging.getLogger(__name__)


class AttendanceTracker:
    def __init__(self, store: RecordStore, *, tz: tzinfo):
        self._store = store
        self._tz = tz

    async def check_in(self, employee_id: int, now: datetime) -> Attendance:
        """Open today's attendance record; at most one per calendar day."""
        now = ensure_utc(now)
        day = local_day(now, self._tz)

        if await self._store.lock_employee(employee_id) is None:
            await self._store.rollback()
            raise EmployeeNotFound()

        if await self._store.find_attendance(employee_id=employee_id, day=day) is not None:
            await self._store.rollback()
            raise AlreadyCheckedIn()

        try:
            attendance = await self._store.create_attendance(
                employee_id=employee_id, day=day, check_in=now
            )
            await self._store.commit()
        except IntegrityError:
            # A concurrent check-in won the (employee_id, date) constraint
            await self._store.rollback()
            raise AlreadyCheckedIn()

        logger.info("Check-in: employee %d on %s", employee_id, day)
        return attendance

    async def check_out(self, employee_id: int, now: datetime) -> Attendance:
        """Close today's record and stamp the elapsed hours."""
        now = ensure_utc(now)
        day = local_day(now, self._tz)

        attendance = await self._store.find_attendance(employee_id=employee_id, day=day)
        if attendance is None:
            await self._store.rollback()
            raise NoCheckInFound()
        if attendance.check_out is not None:
            await self._store.rollback()
            raise AlreadyCheckedOut()

        # No guard against a skewed clock: a check-out before check-in yields negative hours
        total_hours = elapsed_hours(attendance.check_in, now)
        attendance = await self._store.record_check_out(
            attendance, check_out=now, total_hours=total_hours
        )
        await self._store.commit()

        logger.info("Check-out: employee %d on %s (%.2f h)", employee_id, day, total_hours)
        return attendance

    async def query(self, filters: AttendanceFilter) -> Sequence[AttendanceRow]:
        return await self._store.list_attendance(filters)
