"""Pydantic schemas for the admin dashboard and health check."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class OverviewResponse(BaseModel):
    date: date
    total_employees: int
    attendance_today: int
    pending_leaves: int
    permissions_today: int
    exceeded_permissions_today: int
    attendance_rate: int


class HealthResponse(BaseModel):
    db: bool


class LogoutResponse(BaseModel):
    message: str


class DeleteResponse(BaseModel):
    success: bool
    message: str
