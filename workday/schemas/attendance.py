"""Pydantic schemas for check-in / check-out and attendance queries."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, field_validator

from workday.schemas.employee import EmployeeRead
from workday.services.dates import ensure_utc
from workday.services.store import AttendanceRow


class AttendanceAction(BaseModel):
    employee_id: int


class AttendanceRead(BaseModel):
    id: int
    employee_id: int
    date: date
    check_in: datetime
    check_out: datetime | None = None
    total_hours: float | None = None

    model_config = {"from_attributes": True}

    @field_validator("check_in", "check_out")
    @classmethod
    def _utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else v


class AttendanceWithEmployee(AttendanceRead):
    employee: EmployeeRead

    @classmethod
    def from_row(cls, row: AttendanceRow) -> "AttendanceWithEmployee":
        return cls(
            **AttendanceRead.model_validate(row.attendance).model_dump(),
            employee=EmployeeRead.model_validate(row.employee),
        )
