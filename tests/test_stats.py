"""Tests for the admin overview and health endpoints."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_overview_empty(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/stats/overview")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_employees"] == 0
    assert data["attendance_rate"] == 0


@pytest.mark.asyncio
async def test_overview_counts(async_client: AsyncClient, make_employee):
    alice = await make_employee("Alice")
    bob = await make_employee("Bob")
    await make_employee("Carol")

    await async_client.post("/api/v1/attendance/check-in", json={"employee_id": alice.id})
    await async_client.post("/api/v1/attendance/check-in", json={"employee_id": bob.id})
    await async_client.post(
        "/api/v1/leaves",
        json={"employee_id": bob.id, "from_date": "2025-03-03", "to_date": "2025-03-03", "reason": "x"},
    )

    start = datetime.now(timezone.utc).replace(hour=9, minute=0, second=0, microsecond=0)
    for minutes in (100, 50):  # second request overflows the 120 minute allowance
        await async_client.post(
            "/api/v1/permissions",
            json={
                "employee_id": alice.id,
                "start_time": start.isoformat(),
                "end_time": (start + timedelta(minutes=minutes)).isoformat(),
                "reason": "Errand",
            },
        )

    resp = await async_client.get("/api/v1/stats/overview")
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_employees"] == 3
    assert data["attendance_today"] == 2
    assert data["pending_leaves"] == 1
    assert data["permissions_today"] == 2
    assert data["exceeded_permissions_today"] == 1
    assert data["attendance_rate"] == 67


@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json()["db"] is True
