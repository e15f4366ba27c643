"""
Attendance endpoints: daily check-in / check-out and history.

The server clock supplies ``now``; calendar days are taken in the
configured reference time zone.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends

from workday.api.v1.deps import get_attendance_tracker, get_current_active_user
from workday.models.attendance import Attendance
from workday.models.user import User
from workday.schemas.attendance import (AttendanceAction, AttendanceRead,
                                        AttendanceWithEmployee)
from workday.services.attendance import AttendanceTracker
from workday.services.store import AttendanceFilter

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("/check-in", response_model=AttendanceRead, status_code=201)
async def check_in(
    body: AttendanceAction,
    tracker: AttendanceTracker = Depends(get_attendance_tracker),
    _user: User = Depends(get_current_active_user),
) -> Attendance:
    return await tracker.check_in(body.employee_id, datetime.now(timezone.utc))


@router.post("/check-out", response_model=AttendanceRead)
async def check_out(
    body: AttendanceAction,
    tracker: AttendanceTracker = Depends(get_attendance_tracker),
    _user: User = Depends(get_current_active_user),
) -> Attendance:
    return await tracker.check_out(body.employee_id, datetime.now(timezone.utc))


@router.get("", response_model=list[AttendanceWithEmployee])
async def list_attendance(
    employee_id: int | None = None,
    date: date | None = None,
    tracker: AttendanceTracker = Depends(get_attendance_tracker),
    _user: User = Depends(get_current_active_user),
) -> list[AttendanceWithEmployee]:
    """Attendance records joined with their employee, most recent day first."""
    rows = await tracker.query(AttendanceFilter(employee_id=employee_id, date=date))
    return [AttendanceWithEmployee.from_row(row) for row in rows]
