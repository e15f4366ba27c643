"""
Record Store contract consumed by the rule-sets.

The rule-sets only talk to this protocol; ``workday.db.store`` provides
the SQLAlchemy implementation.  Query methods return composite rows
(record + owning employee) so joins stay out of the business rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from workday.models.attendance import Attendance
from workday.models.employee import Employee
from workday.models.leave import LeaveRequest, LeaveStatus
from workday.models.permission import Permission


# ── Composite rows ──────────────────────────────────────────────────
@dataclass(frozen=True)
class AttendanceRow:
    attendance: Attendance
    employee: Employee


@dataclass(frozen=True)
class LeaveRow:
    leave: LeaveRequest
    employee: Employee


@dataclass(frozen=True)
class PermissionRow:
    permission: Permission
    employee: Employee


# ── Optional filters (each field independently nullable) ───────────
@dataclass(frozen=True)
class AttendanceFilter:
    employee_id: Optional[int] = None
    date: Optional[date] = None


@dataclass(frozen=True)
class LeaveFilter:
    employee_id: Optional[int] = None
    status: Optional[LeaveStatus] = None


@dataclass(frozen=True)
class PermissionFilter:
    employee_id: Optional[int] = None
    date: Optional[date] = None


class RecordStore(Protocol):
    # Unit of work
    async def commit(self) -> None:
        raise NotImplementedError

    async def rollback(self) -> None:
        raise NotImplementedError

    # Employees
    async def lock_employee(self, employee_id: int) -> Optional[Employee]:
        """Fetch the employee row, holding a write lock until commit/rollback."""

        raise NotImplementedError

    # Attendance
    async def find_attendance(self, *, employee_id: int, day: date) -> Optional[Attendance]:
        raise NotImplementedError

    async def create_attendance(self, *, employee_id: int, day: date, check_in: datetime) -> Attendance:
        raise NotImplementedError

    async def record_check_out(
        self, attendance: Attendance, *, check_out: datetime, total_hours: float
    ) -> Attendance:
        raise NotImplementedError

    async def list_attendance(self, filters: AttendanceFilter) -> Sequence[AttendanceRow]:
        """Most recent day first."""

        raise NotImplementedError

    # Leave requests
    async def sum_leave_days(
        self,
        *,
        employee_id: int,
        first_day: date,
        last_day: date,
        statuses: Sequence[LeaveStatus],
    ) -> int:
        """Total days of requests whose from_date lies in [first_day, last_day]."""

        raise NotImplementedError

    async def create_leave(
        self,
        *,
        employee_id: int,
        from_date: date,
        to_date: date,
        reason: str,
        total_days: int,
    ) -> LeaveRequest:
        raise NotImplementedError

    async def get_leave(self, leave_id: int, *, for_update: bool = False) -> Optional[LeaveRequest]:
        raise NotImplementedError

    async def set_leave_status(self, leave: LeaveRequest, status: LeaveStatus) -> LeaveRequest:
        raise NotImplementedError

    async def list_leaves(self, filters: LeaveFilter) -> Sequence[LeaveRow]:
        """Newest first by creation time."""

        raise NotImplementedError

    # Permissions
    async def sum_permission_minutes(self, *, employee_id: int, day: date) -> int:
        raise NotImplementedError

    async def create_permission(
        self,
        *,
        employee_id: int,
        day: date,
        start_time: datetime,
        end_time: datetime,
        reason: str,
        duration_minutes: int,
        extra_minutes: int,
    ) -> Permission:
        raise NotImplementedError

    async def list_permissions(self, filters: PermissionFilter) -> Sequence[PermissionRow]:
        """Newest first by creation time."""

        raise NotImplementedError
