"""
LeaveRequest model: an inclusive calendar range of days off.

PENDING is the only non-terminal status; an admin moves a request to
APPROVED or REJECTED.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum

from sqlalchemy import (Column, Date, DateTime, ForeignKey, Index, Integer,
                        String)

from workday.db.base import Base


class LeaveStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class LeaveRequest(Base):
    __tablename__ = "leave_requests"
    __table_args__ = (Index("ix_leave_employee_from", "employee_id", "from_date"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_id: int = Column(Integer, ForeignKey("employees.id"), nullable=False)  # type: ignore[assignment]
    from_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    to_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    reason: str = Column(String(1000), nullable=False)  # type: ignore[assignment]
    total_days: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default=LeaveStatus.PENDING.value,
        index=True,
    )
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
