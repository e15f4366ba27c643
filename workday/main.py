"""
Workday application entry point.

This is the **only** file that assembles the app.  Business rules live
in `services/`; HTTP wiring in `api/`; persistence in `models/` and `db/`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from workday.api.v1.api import api_router
from workday.api.v1.endpoints.auth import limiter
from workday.core.config import settings
from workday.core.exceptions import register_exception_handlers
from workday.core.security import get_password_hash
from workday.db.base import Base
from workday.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from workday.models.attendance import Attendance  # noqa: F401
from workday.models.employee import Employee  # noqa: F401
from workday.models.leave import LeaveRequest  # noqa: F401
from workday.models.permission import Permission  # noqa: F401
from workday.models.user import ROLE_ADMIN, User

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    # Seed default admin user on first run
    async with async_session_factory() as session:
        result = await session.execute(
            select(User).where(User.email == settings.FIRST_ADMIN_EMAIL)
        )
        if result.scalar_one_or_none() is None:
            session.add(
                User(
                    email=settings.FIRST_ADMIN_EMAIL,
                    hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                    full_name="System Administrator",
                    role=ROLE_ADMIN,
                )
            )
            await session.commit()
            logger.info("Default admin created: %s", settings.FIRST_ADMIN_EMAIL)

    logger.info(
        "Workday v%s started (tz=%s, leave cap=%d days/month, permission cap=%d min/day)",
        settings.VERSION,
        settings.TIMEZONE,
        settings.MAX_LEAVES_PER_MONTH,
        settings.MAX_PERMISSION_MINUTES_PER_DAY,
    )
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Employee attendance, leave and permission tracking",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.state.limiter = limiter

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_V1_PREFIX)
    return application


app = create_app()
