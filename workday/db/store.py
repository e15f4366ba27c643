"""
SQLAlchemy implementation of the Record Store.

Writes are flushed, not committed: the calling rule-set decides when its
read-check-write sequence is complete and commits it as one unit.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from workday.models.attendance import Attendance
from workday.models.employee import Employee
from workday.models.leave import LeaveRequest, LeaveStatus
from workday.models.permission import Permission
from workday.services.store import (AttendanceFilter, AttendanceRow,
                                    LeaveFilter, LeaveRow, PermissionFilter,
                                    PermissionRow)


class SqlRecordStore:
    def __init__(self, session: AsyncSession):
        self._db = session

    async def commit(self) -> None:
        await self._db.commit()

    async def rollback(self) -> None:
        await self._db.rollback()

    async def _persist(self, obj):
        self._db.add(obj)
        await self._db.flush()
        await self._db.refresh(obj)
        return obj

    # ── Employees ───────────────────────────────────────────────────
    async def lock_employee(self, employee_id: int) -> Optional[Employee]:
        result = await self._db.execute(
            select(Employee).where(Employee.id == employee_id).with_for_update()
        )
        return result.scalar_one_or_none()

    # ── Attendance ──────────────────────────────────────────────────
    async def find_attendance(self, *, employee_id: int, day: date) -> Optional[Attendance]:
        result = await self._db.execute(
            select(Attendance)
            .where(Attendance.employee_id == employee_id, Attendance.date == day)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def create_attendance(self, *, employee_id: int, day: date, check_in: datetime) -> Attendance:
        return await self._persist(
            Attendance(employee_id=employee_id, date=day, check_in=check_in)
        )

    async def record_check_out(
        self, attendance: Attendance, *, check_out: datetime, total_hours: float
    ) -> Attendance:
        attendance.check_out = check_out
        attendance.total_hours = total_hours
        return await self._persist(attendance)

    async def list_attendance(self, filters: AttendanceFilter) -> Sequence[AttendanceRow]:
        query = (
            select(Attendance, Employee)
            .join(Employee, Attendance.employee_id == Employee.id)
            .order_by(Attendance.date.desc(), Attendance.id.desc())
        )
        if filters.employee_id is not None:
            query = query.where(Attendance.employee_id == filters.employee_id)
        if filters.date is not None:
            query = query.where(Attendance.date == filters.date)
        result = await self._db.execute(query)
        return [AttendanceRow(attendance=att, employee=emp) for att, emp in result.all()]

    # ── Leave requests ──────────────────────────────────────────────
    async def sum_leave_days(
        self,
        *,
        employee_id: int,
        first_day: date,
        last_day: date,
        statuses: Sequence[LeaveStatus],
    ) -> int:
        result = await self._db.execute(
            select(func.coalesce(func.sum(LeaveRequest.total_days), 0)).where(
                LeaveRequest.employee_id == employee_id,
                LeaveRequest.status.in_([s.value for s in statuses]),
                LeaveRequest.from_date >= first_day,
                LeaveRequest.from_date <= last_day,
            )
        )
        return int(result.scalar() or 0)

    async def create_leave(
        self,
        *,
        employee_id: int,
        from_date: date,
        to_date: date,
        reason: str,
        total_days: int,
    ) -> LeaveRequest:
        return await self._persist(
            LeaveRequest(
                employee_id=employee_id,
                from_date=from_date,
                to_date=to_date,
                reason=reason,
                total_days=total_days,
                status=LeaveStatus.PENDING.value,
            )
        )

    async def get_leave(self, leave_id: int, *, for_update: bool = False) -> Optional[LeaveRequest]:
        query = select(LeaveRequest).where(LeaveRequest.id == leave_id)
        if for_update:
            query = query.with_for_update()
        result = await self._db.execute(query)
        return result.scalar_one_or_none()

    async def set_leave_status(self, leave: LeaveRequest, status: LeaveStatus) -> LeaveRequest:
        leave.status = status.value
        return await self._persist(leave)

    async def list_leaves(self, filters: LeaveFilter) -> Sequence[LeaveRow]:
        query = (
            select(LeaveRequest, Employee)
            .join(Employee, LeaveRequest.employee_id == Employee.id)
            .order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
        )
        if filters.employee_id is not None:
            query = query.where(LeaveRequest.employee_id == filters.employee_id)
        if filters.status is not None:
            query = query.where(LeaveRequest.status == filters.status.value)
        result = await self._db.execute(query)
        return [LeaveRow(leave=leave, employee=emp) for leave, emp in result.all()]

    # ── Permissions ─────────────────────────────────────────────────
    async def sum_permission_minutes(self, *, employee_id: int, day: date) -> int:
        result = await self._db.execute(
            select(func.coalesce(func.sum(Permission.duration_minutes), 0)).where(
                Permission.employee_id == employee_id,
                Permission.date == day,
            )
        )
        return int(result.scalar() or 0)

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
        return await self._persist(
            Permission(
                employee_id=employee_id,
                date=day,
                start_time=start_time,
                end_time=end_time,
                reason=reason,
                duration_minutes=duration_minutes,
                extra_minutes=extra_minutes,
            )
        )

    async def list_permissions(self, filters: PermissionFilter) -> Sequence[PermissionRow]:
        query = (
            select(Permission, Employee)
            .join(Employee, Permission.employee_id == Employee.id)
            .order_by(Permission.created_at.desc(), Permission.id.desc())
        )
        if filters.employee_id is not None:
            query = query.where(Permission.employee_id == filters.employee_id)
        if filters.date is not None:
            query = query.where(Permission.date == filters.date)
        result = await self._db.execute(query)
        return [PermissionRow(permission=p, employee=emp) for p, emp in result.all()]
