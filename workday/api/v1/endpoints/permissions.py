"""
Permission endpoints: short absences tracked against a daily minute
allowance.  Exceeding the allowance is reported, never refused.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends

from workday.api.v1.deps import (get_current_active_user,
                                 get_permission_calculator)
from workday.models.user import User
from workday.schemas.permission import (PermissionCreate, PermissionRead,
                                        PermissionSubmitResponse,
                                        PermissionUsageResponse,
                                        PermissionWithEmployee)
from workday.services.permission import PermissionAllowanceCalculator
from workday.services.store import PermissionFilter

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.post("", response_model=PermissionSubmitResponse, status_code=201)
async def submit_permission(
    body: PermissionCreate,
    permissions: PermissionAllowanceCalculator = Depends(get_permission_calculator),
    _user: User = Depends(get_current_active_user),
) -> PermissionSubmitResponse:
    result = await permissions.submit(
        body.employee_id,
        body.start_time,
        body.end_time,
        body.reason,
        now=datetime.now(timezone.utc),
    )
    return PermissionSubmitResponse(
        permission=PermissionRead.model_validate(result.permission),
        total_used_minutes=result.total_used_minutes,
        remaining_minutes=result.remaining_minutes,
        exceeded_limit=result.exceeded_limit,
    )


@router.get("", response_model=list[PermissionWithEmployee])
async def list_permissions(
    employee_id: int | None = None,
    date: date | None = None,
    permissions: PermissionAllowanceCalculator = Depends(get_permission_calculator),
    _user: User = Depends(get_current_active_user),
) -> list[PermissionWithEmployee]:
    """Permissions joined with their employee, newest first."""
    rows = await permissions.query(PermissionFilter(employee_id=employee_id, date=date))
    return [PermissionWithEmployee.from_row(row) for row in rows]


@router.get("/usage", response_model=PermissionUsageResponse)
async def permission_usage(
    employee_id: int,
    date: date | None = None,
    permissions: PermissionAllowanceCalculator = Depends(get_permission_calculator),
    _user: User = Depends(get_current_active_user),
) -> PermissionUsageResponse:
    """Minutes used and remaining on *date* (default today)."""
    usage = await permissions.usage(employee_id, datetime.now(timezone.utc), day=date)
    return PermissionUsageResponse(
        employee_id=employee_id,
        date=usage.date,
        used_minutes=usage.used_minutes,
        remaining_minutes=usage.remaining_minutes,
        limit=usage.limit,
    )
