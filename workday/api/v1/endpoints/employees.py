"""
Employee registration and CRUD.

- GET operations require any authenticated user.
- POST / PUT / DELETE operations require admin role, except the public
  self-registration route (switched by ALLOW_SELF_REGISTRATION).
- Registration creates the employee's account identity alongside it.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete as sa_delete
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from workday.api.v1.deps import get_current_active_user, get_db, require_admin
from workday.core.config import settings
from workday.core.exceptions import (DuplicateEmployee, EmployeeHasRecords,
                                     EmployeeNotFound)
from workday.core.security import get_password_hash
from workday.models.attendance import Attendance
from workday.models.employee import Employee
from workday.models.leave import LeaveRequest
from workday.models.permission import Permission
from workday.models.user import ROLE_EMPLOYEE, User
from workday.schemas.employee import EmployeeCreate, EmployeeRead, EmployeeUpdate
from workday.schemas.stats import DeleteResponse

router = APIRouter(prefix="/employees", tags=["employees"])
logger = logging.getLogger(__name__)


async def _get_or_404(db: AsyncSession, employee_id: int) -> Employee:
    result = await db.execute(select(Employee).where(Employee.id == employee_id))
    emp = result.scalar_one_or_none()
    if emp is None:
        raise EmployeeNotFound()
    return emp


@router.get("", response_model=list[EmployeeRead])
async def list_employees(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, le=500),
    search: str | None = None,
    department: str | None = None,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> list[Employee]:
    query = select(Employee).order_by(Employee.created_at.desc(), Employee.id.desc())
    if search:
        # Escape SQL LIKE metacharacters to prevent wildcard injection
        safe_search = search.replace("%", r"\%").replace("_", r"\_")
        pattern = f"%{safe_search}%"
        query = query.where(
            or_(
                Employee.name.ilike(pattern, escape="\\"),
                Employee.employee_code.ilike(pattern, escape="\\"),
            )
        )
    if department:
        query = query.where(Employee.department == department)
    result = await db.execute(query.offset(skip).limit(limit))
    return list(result.scalars().all())


async def _register(db: AsyncSession, body: EmployeeCreate) -> Employee:
    existing = await db.execute(
        select(Employee.id).where(Employee.employee_code == body.employee_code)
    )
    if existing.scalar_one_or_none() is not None:
        raise DuplicateEmployee(f"Employee code '{body.employee_code}' already registered")

    taken = await db.execute(select(User.id).where(User.email == body.email))
    if taken.scalar_one_or_none() is not None:
        raise DuplicateEmployee(f"Email '{body.email}' already registered")

    user = User(
        email=body.email,
        hashed_password=get_password_hash(body.password),
        full_name=body.name,
        role=ROLE_EMPLOYEE,
    )
    db.add(user)
    await db.flush()

    employee = Employee(
        **body.model_dump(exclude={"email", "password"}),
        user_id=user.id,
    )
    db.add(employee)
    await db.commit()
    await db.refresh(employee)
    logger.info("Registered employee %s (%s)", employee.name, employee.employee_code)
    return employee


@router.post("", response_model=EmployeeRead, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> Employee:
    return await _register(db, body)


@router.post("/register", response_model=EmployeeRead, status_code=201)
async def self_register(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
) -> Employee:
    """Public sign-up: the new account always gets the employee role."""
    if not settings.ALLOW_SELF_REGISTRATION:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Self-registration is disabled",
        )
    return await _register(db, body)


@router.get("/me", response_model=EmployeeRead)
async def get_my_employee(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_active_user),
) -> Employee:
    """Employee record linked to the signed-in account."""
    result = await db.execute(select(Employee).where(Employee.user_id == user.id))
    emp = result.scalar_one_or_none()
    if emp is None:
        raise EmployeeNotFound()
    return emp


@router.get("/code/{employee_code}", response_model=EmployeeRead)
async def get_employee_by_code(
    employee_code: str,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> Employee:
    result = await db.execute(select(Employee).where(Employee.employee_code == employee_code))
    emp = result.scalar_one_or_none()
    if emp is None:
        raise EmployeeNotFound()
    return emp


@router.get("/{employee_id}", response_model=EmployeeRead)
async def get_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> Employee:
    return await _get_or_404(db, employee_id)


@router.put("/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: int,
    body: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> Employee:
    emp = await _get_or_404(db, employee_id)

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(emp, field, value)

    await db.commit()
    await db.refresh(emp)
    logger.info("Updated employee %d", employee_id)
    return emp


@router.delete("/{employee_id}", response_model=DeleteResponse)
async def delete_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> DeleteResponse:
    """Delete an employee and its account; refused while any records reference it."""
    emp = await _get_or_404(db, employee_id)

    for model in (Attendance, LeaveRequest, Permission):
        count = await db.execute(
            select(func.count(model.id)).where(model.employee_id == employee_id)
        )
        if count.scalar():
            raise EmployeeHasRecords()

    name, user_id = emp.name, emp.user_id
    await db.execute(sa_delete(Employee).where(Employee.id == employee_id))
    await db.execute(sa_delete(User).where(User.id == user_id))
    await db.commit()
    logger.info("Deleted employee %d (%s)", employee_id, name)
    return DeleteResponse(success=True, message=f"Employee '{name}' deleted")
