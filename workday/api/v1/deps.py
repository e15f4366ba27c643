"""
FastAPI dependencies: database session, auth guards and the rule-sets
wired to the configured policy values.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import tzinfo
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workday.core.config import settings
from workday.core.security import decode_access_token
from workday.db.session import async_session_factory
from workday.db.store import SqlRecordStore
from workday.models.user import ROLE_ADMIN, User
from workday.services.attendance import AttendanceTracker
from workday.services.leave import LeaveAllowanceCalculator
from workday.services.permission import PermissionAllowanceCalculator

# auto_error=False so we can fall back to the HttpOnly cookie
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Rule-sets ───────────────────────────────────────────────────────
def get_store(db: AsyncSession = Depends(get_db)) -> SqlRecordStore:
    return SqlRecordStore(db)


def get_tz() -> tzinfo:
    """Reference zone that decides which calendar day an instant belongs to."""
    return settings.tz


def get_attendance_tracker(
    store: SqlRecordStore = Depends(get_store),
    tz: tzinfo = Depends(get_tz),
) -> AttendanceTracker:
    return AttendanceTracker(store, tz=tz)


def get_leave_calculator(store: SqlRecordStore = Depends(get_store)) -> LeaveAllowanceCalculator:
    return LeaveAllowanceCalculator(
        store,
        max_per_month=settings.MAX_LEAVES_PER_MONTH,
        allow_redecision=settings.ALLOW_LEAVE_REDECISION,
    )


def get_permission_calculator(
    store: SqlRecordStore = Depends(get_store),
    tz: tzinfo = Depends(get_tz),
) -> PermissionAllowanceCalculator:
    return PermissionAllowanceCalculator(
        store,
        max_minutes_per_day=settings.MAX_PERMISSION_MINUTES_PER_DAY,
        tz=tz,
    )


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode JWT from Header OR Cookie, look up user."""
    # Priority: Header > Cookie ("Bearer <token>" or bare token)
    final_token = token
    if not final_token and access_token:
        final_token = access_token.removeprefix("Bearer ").strip()

    credentials_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not final_token:
        raise credentials_exc

    payload = decode_access_token(final_token)
    if payload is None:
        raise credentials_exc

    user_id: str | None = payload.get("sub")
    if user_id is None or not user_id.isdigit():
        raise credentials_exc

    result = await db.execute(select(User).where(User.id == int(user_id)))
    user = result.scalar_one_or_none()
    if user is None:
        raise credentials_exc
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Reject inactive accounts."""
    if not current_user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user account")
    return current_user


async def require_admin(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """Only allow admin role to proceed."""
    if current_user.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user
