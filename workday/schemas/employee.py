"""Pydantic schemas for Employee registration and CRUD."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, field_validator

_CODE_RE = re.compile(r"^[A-Za-z0-9_-]{2,64}$")
_MOBILE_RE = re.compile(r"^\+?[0-9 -]{6,30}$")


class EmployeeCreate(BaseModel):
    employee_code: str
    name: str
    department: str | None = None
    state: str | None = None
    mobile_number: str | None = None
    email: str
    password: str

    @field_validator("employee_code")
    @classmethod
    def _code(cls, v: str) -> str:
        v = v.strip()
        if not _CODE_RE.match(v):
            raise ValueError("Employee code must be 2-64 alphanumeric chars (hyphens allowed)")
        return v

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        if len(v) > 200:
            raise ValueError("Name must not exceed 200 characters")
        return v

    @field_validator("mobile_number")
    @classmethod
    def _mobile(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not _MOBILE_RE.match(v):
            raise ValueError("Invalid mobile number")
        return v

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v


class EmployeeUpdate(BaseModel):
    name: str | None = None
    department: str | None = None
    state: str | None = None
    mobile_number: str | None = None


class EmployeeRead(BaseModel):
    id: int
    employee_code: str
    name: str
    department: str | None
    state: str | None
    mobile_number: str | None
    user_id: int
    created_at: datetime | None

    model_config = {"from_attributes": True}
