"""Pydantic schemas for leave requests."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, field_validator

from workday.models.leave import LeaveStatus
from workday.schemas.employee import EmployeeRead
from workday.services.dates import ensure_utc
from workday.services.store import LeaveRow


class LeaveCreate(BaseModel):
    employee_id: int
    from_date: date
    to_date: date
    reason: str

    @field_validator("reason")
    @classmethod
    def _reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Reason must not be empty")
        return v


class LeaveDecision(BaseModel):
    status: Literal["APPROVED", "REJECTED"]


class LeaveRead(BaseModel):
    id: int
    employee_id: int
    from_date: date
    to_date: date
    reason: str
    total_days: int
    status: LeaveStatus
    created_at: datetime | None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else v


class LeaveWithEmployee(LeaveRead):
    employee: EmployeeRead

    @classmethod
    def from_row(cls, row: LeaveRow) -> "LeaveWithEmployee":
        return cls(
            **LeaveRead.model_validate(row.leave).model_dump(),
            employee=EmployeeRead.model_validate(row.employee),
        )


class LeaveSubmitResponse(BaseModel):
    leave_request: LeaveRead
    remaining_days: int


class LeaveUsageResponse(BaseModel):
    employee_id: int
    month_start: date
    month_end: date
    used_days: int
    remaining_days: int
    limit: int
