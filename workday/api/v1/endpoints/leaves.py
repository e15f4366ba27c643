"""
Leave request endpoints: submission, admin decision, history and the
monthly allowance still available to an employee.
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo

from fastapi import APIRouter, Depends

from workday.api.v1.deps import (get_current_active_user, get_leave_calculator,
                                 get_tz, require_admin)
from workday.models.leave import LeaveRequest, LeaveStatus
from workday.models.user import User
from workday.schemas.leave import (LeaveCreate, LeaveDecision, LeaveRead,
                                   LeaveSubmitResponse, LeaveUsageResponse,
                                   LeaveWithEmployee)
from workday.services.dates import local_day
from workday.services.leave import LeaveAllowanceCalculator
from workday.services.store import LeaveFilter

router = APIRouter(prefix="/leaves", tags=["leaves"])


@router.post("", response_model=LeaveSubmitResponse, status_code=201)
async def submit_leave(
    body: LeaveCreate,
    leaves: LeaveAllowanceCalculator = Depends(get_leave_calculator),
    _user: User = Depends(get_current_active_user),
) -> LeaveSubmitResponse:
    result = await leaves.submit(body.employee_id, body.from_date, body.to_date, body.reason)
    return LeaveSubmitResponse(
        leave_request=LeaveRead.model_validate(result.leave),
        remaining_days=result.remaining_days,
    )


@router.get("", response_model=list[LeaveWithEmployee])
async def list_leaves(
    employee_id: int | None = None,
    status: LeaveStatus | None = None,
    leaves: LeaveAllowanceCalculator = Depends(get_leave_calculator),
    _user: User = Depends(get_current_active_user),
) -> list[LeaveWithEmployee]:
    """Leave requests joined with their employee, newest first."""
    rows = await leaves.query(LeaveFilter(employee_id=employee_id, status=status))
    return [LeaveWithEmployee.from_row(row) for row in rows]


@router.get("/usage", response_model=LeaveUsageResponse)
async def leave_usage(
    employee_id: int,
    day: date | None = None,
    leaves: LeaveAllowanceCalculator = Depends(get_leave_calculator),
    tz: tzinfo = Depends(get_tz),
    _user: User = Depends(get_current_active_user),
) -> LeaveUsageResponse:
    """Days used and remaining in the month containing *day* (default today)."""
    day = day or local_day(datetime.now(timezone.utc), tz)
    usage = await leaves.usage(employee_id, day)
    return LeaveUsageResponse(
        employee_id=employee_id,
        month_start=usage.month_start,
        month_end=usage.month_end,
        used_days=usage.used_days,
        remaining_days=usage.remaining_days,
        limit=usage.limit,
    )


@router.put("/{leave_id}", response_model=LeaveRead)
async def decide_leave(
    leave_id: int,
    body: LeaveDecision,
    leaves: LeaveAllowanceCalculator = Depends(get_leave_calculator),
    _admin: User = Depends(require_admin),
) -> LeaveRequest:
    return await leaves.decide(leave_id, LeaveStatus(body.status))
