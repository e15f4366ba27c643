"""
Employee model: identity record every attendance, leave and permission
row belongs to.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from workday.db.base import Base


class Employee(Base):
    __tablename__ = "employees"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    employee_code: str = Column(String(64), unique=True, nullable=False, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    department: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    state: str | None = Column(String(100), nullable=True)  # type: ignore[assignment]
    mobile_number: str | None = Column(String(30), nullable=True)  # type: ignore[assignment]
    user_id: int = Column(  # type: ignore[assignment]
        Integer, ForeignKey("users.id"), unique=True, nullable=False
    )
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
