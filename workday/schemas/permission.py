"""Pydantic schemas for short-absence permissions."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, field_validator

from workday.schemas.employee import EmployeeRead
from workday.services.dates import ensure_utc
from workday.services.store import PermissionRow


class PermissionCreate(BaseModel):
    employee_id: int
    start_time: datetime
    end_time: datetime
    reason: str

    @field_validator("reason")
    @classmethod
    def _reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Reason must not be empty")
        return v


class PermissionRead(BaseModel):
    id: int
    employee_id: int
    date: date
    start_time: datetime
    end_time: datetime
    reason: str
    duration_minutes: int
    extra_minutes: int
    created_at: datetime | None

    model_config = {"from_attributes": True}

    @field_validator("start_time", "end_time", "created_at")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else v


class PermissionWithEmployee(PermissionRead):
    employee: EmployeeRead

    @classmethod
    def from_row(cls, row: PermissionRow) -> "PermissionWithEmployee":
        return cls(
            **PermissionRead.model_validate(row.permission).model_dump(),
            employee=EmployeeRead.model_validate(row.employee),
        )


class PermissionSubmitResponse(BaseModel):
    permission: PermissionRead
    total_used_minutes: int
    remaining_minutes: int
    exceeded_limit: bool


class PermissionUsageResponse(BaseModel):
    employee_id: int
    date: date
    used_minutes: int
    remaining_minutes: int
    limit: int
