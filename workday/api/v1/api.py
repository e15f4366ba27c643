"""
V1 API router aggregator: wires all endpoint modules together.
"""

from fastapi import APIRouter

from workday.api.v1.endpoints import (attendance, auth, employees, leaves,
                                      permissions, stats)

api_router = APIRouter()

# Auth (login, refresh, logout, me)
api_router.include_router(auth.router)

# Employee registration & CRUD
api_router.include_router(employees.router)

# Accounting engine: attendance, leave, permissions
api_router.include_router(attendance.router)
api_router.include_router(leaves.router)
api_router.include_router(permissions.router)

# Dashboard aggregates, health
api_router.include_router(stats.router)
