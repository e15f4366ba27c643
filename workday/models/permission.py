"""
Permission model: a short, time-boxed absence within a working day.

Rows are written once and never updated.  ``extra_minutes`` is the part
of this request that pushed the employee past the daily allowance.
"""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime, timezone

from sqlalchemy import (Column, Date, DateTime, ForeignKey, Index, Integer,
                        String)

from workday.db.base import Base


class Permission(Base):
    __tablename__ = "permissions"
    __table_args__ = (Index("ix_permission_employee_date", "employee_id", "date"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    date: date_type = Column(Date, nullable=False, index=True)  # type: ignore[assignment]
    start_time: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    end_time: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    reason: str = Column(String(1000), nullable=False)  # type: ignore[assignment]
    duration_minutes: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    extra_minutes: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
