"""
Attendance model: one row per employee per calendar day.

``date`` is the calendar day in the configured reference time zone; the
unique constraint on (employee_id, date) is what keeps two concurrent
check-ins from both landing.
"""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime

from sqlalchemy import (Column, Date, DateTime, Float, ForeignKey, Integer,
                        UniqueConstraint)

from workday.db.base import Base


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("employee_id", "date", name="uq_attendance_emp_date"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)  # type: ignore[assignment]
    date: date_type = Column(Date, nullable=False, index=True)  # type: ignore[assignment]
    check_in: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    check_out: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    total_hours: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
