"""
Permission Allowance Calculator.

The daily minute cap is tracked, not enforced: a request that pushes the
employee over the cap is still recorded, with the overage stored in
``extra_minutes`` so admins can see who exceeded the limit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Optional, Sequence

from workday.core.exceptions import EmployeeNotFound, InvalidTimeRange
from workday.models.permission import Permission
from workday.services.dates import local_day, localize, whole_minutes
from workday.services.store import (PermissionFilter, PermissionRow,
                                    RecordStore)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PermissionSubmission:
    permission: Permission
    total_used_minutes: int
    remaining_minutes: int
    exceeded_limit: bool


@dataclass(frozen=True)
class PermissionUsage:
    date: date
    used_minutes: int
    remaining_minutes: int
    limit: int


class PermissionAllowanceCalculator:
    def __init__(self, store: RecordStore, *, max_minutes_per_day: int, tz: tzinfo):
        self._store = store
        self._max = max_minutes_per_day
        self._tz = tz

    async def submit(
        self,
        employee_id: int,
        start_time: datetime,
        end_time: datetime,
        reason: str,
        *,
        now: datetime,
    ) -> PermissionSubmission:
        start = localize(start_time, self._tz)
        end = localize(end_time, self._tz)
        duration = whole_minutes(start, end)
        if duration <= 0:
            raise InvalidTimeRange()

        if await self._store.lock_employee(employee_id) is None:
            await self._store.rollback()
            raise EmployeeNotFound()

        day = local_day(now, self._tz)
        used = await self._store.sum_permission_minutes(employee_id=employee_id, day=day)
        total_used = used + duration
        extra = max(0, total_used - self._max)

        permission = await self._store.create_permission(
            employee_id=employee_id,
            day=day,
            start_time=start,
            end_time=end,
            reason=reason,
            duration_minutes=duration,
            extra_minutes=extra,
        )
        await self._store.commit()

        if extra > 0:
            logger.warning(
                "Permission %d: employee %d exceeded daily limit by %d min",
                permission.id, employee_id, extra,
            )
        else:
            logger.info(
                "Permission %d: employee %d, %d min (%d used today)",
                permission.id, employee_id, duration, total_used,
            )

        return PermissionSubmission(
            permission=permission,
            total_used_minutes=total_used,
            remaining_minutes=max(0, self._max - total_used),
            exceeded_limit=extra > 0,
        )

    async def usage(self, employee_id: int, now: datetime, day: Optional[date] = None) -> PermissionUsage:
        day = day or local_day(now, self._tz)
        used = await self._store.sum_permission_minutes(employee_id=employee_id, day=day)
        return PermissionUsage(
            date=day,
            used_minutes=used,
            remaining_minutes=max(0, self._max - used),
            limit=self._max,
        )

    async def query(self, filters: PermissionFilter) -> Sequence[PermissionRow]:
        return await self._store.list_permissions(filters)
