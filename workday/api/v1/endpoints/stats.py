"""
Admin dashboard aggregates and the public health check.

Each figure is a single COUNT query; nothing is cached.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone, tzinfo

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from workday.api.v1.deps import get_db, get_tz, require_admin
from workday.models.attendance import Attendance
from workday.models.employee import Employee
from workday.models.leave import LeaveRequest, LeaveStatus
from workday.models.permission import Permission
from workday.models.user import User
from workday.schemas.stats import HealthResponse, OverviewResponse
from workday.services.dates import local_day

router = APIRouter(tags=["stats"])
logger = logging.getLogger(__name__)


async def _count(db: AsyncSession, query) -> int:
    result = await db.execute(query)
    return result.scalar() or 0


@router.get("/stats/overview", response_model=OverviewResponse)
async def overview(
    date: date | None = None,
    db: AsyncSession = Depends(get_db),
    tz: tzinfo = Depends(get_tz),
    _admin: User = Depends(require_admin),
) -> OverviewResponse:
    """Headline numbers for the admin dashboard for *date* (default today)."""
    day = date or local_day(datetime.now(timezone.utc), tz)

    total_employees = await _count(db, select(func.count(Employee.id)))
    attendance_today = await _count(
        db, select(func.count(Attendance.id)).where(Attendance.date == day)
    )
    pending_leaves = await _count(
        db,
        select(func.count(LeaveRequest.id)).where(
            LeaveRequest.status == LeaveStatus.PENDING.value
        ),
    )
    permissions_today = await _count(
        db, select(func.count(Permission.id)).where(Permission.date == day)
    )
    exceeded_today = await _count(
        db,
        select(func.count(func.distinct(Permission.employee_id))).where(
            Permission.date == day, Permission.extra_minutes > 0
        ),
    )

    rate = round(attendance_today / total_employees * 100) if total_employees else 0

    return OverviewResponse(
        date=day,
        total_employees=total_employees,
        attendance_today=attendance_today,
        pending_leaves=pending_leaves,
        permissions_today=permissions_today,
        exceeded_permissions_today=exceeded_today,
        attendance_rate=rate,
    )


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Public health check: DB connectivity."""
    result = HealthResponse(db=False)
    try:
        await db.execute(select(1))
        result.db = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)
    return result
