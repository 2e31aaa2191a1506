"""Tests for admin analytics."""

from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_metrics(
    client: AsyncClient,
    admin: dict,
    patient: dict,
    doctor: dict,
    pending_doctor: dict,
    headers_for: Callable,
) -> None:
    response = await client.get("/api/v1/admin/analytics/metrics", headers=headers_for(admin))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_users"] == 4
    assert data["total_doctors"] == 2
    assert data["total_patients"] == 1
    assert data["verified_doctors"] == 1
    assert data["pending_verifications"] == 1
    assert data["total_appointments"] == 0
    assert data["total_revenue"] == 0.0


@pytest.mark.asyncio
async def test_analytics_requires_admin(
    client: AsyncClient, patient: dict, doctor: dict, headers_for: Callable
) -> None:
    for user in (patient, doctor):
        response = await client.get(
            "/api/v1/admin/analytics/metrics", headers=headers_for(user)
        )
        assert response.status_code == 403

    response = await client.get("/api/v1/admin/analytics/metrics")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_growth(client: AsyncClient, admin: dict, headers_for: Callable) -> None:
    response = await client.get(
        "/api/v1/admin/analytics/growth?period=week", headers=headers_for(admin)
    )
    data = response.json()["data"]
    assert data["period"] == "week"
    # The admin registered inside the current window
    assert data["users"] == {"current": 1.0, "previous": 0.0, "growth": 100.0}
    assert data["revenue"]["growth"] == 0.0


@pytest.mark.asyncio
async def test_timeseries(
    client: AsyncClient, admin: dict, patient: dict, headers_for: Callable
) -> None:
    response = await client.get(
        "/api/v1/admin/analytics/timeseries?metric=users&days=7", headers=headers_for(admin)
    )
    points = response.json()["data"]
    assert len(points) == 7
    assert points[-1]["day"] == datetime.now(UTC).date().isoformat()
    assert points[-1]["value"] == 2.0
    assert sum(p["value"] for p in points[:-1]) == 0


@pytest.mark.asyncio
async def test_timeseries_requires_metric(
    client: AsyncClient, admin: dict, headers_for: Callable
) -> None:
    response = await client.get(
        "/api/v1/admin/analytics/timeseries", headers=headers_for(admin)
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_activity_and_top_doctors(
    client: AsyncClient,
    admin: dict,
    patient: dict,
    doctor: dict,
    headers_for: Callable,
    future_start: datetime,
) -> None:
    await client.post(
        "/api/v1/appointments/",
        json={
            "doctor_id": doctor["id"],
            "scheduled_at": future_start.isoformat(),
            "consultation_type": "in_person",
        },
        headers=headers_for(patient),
    )

    response = await client.get(
        "/api/v1/admin/analytics/activity?limit=10", headers=headers_for(admin)
    )
    types = {item["type"] for item in response.json()["data"]}
    assert {"registration", "appointment"} <= types

    response = await client.get(
        "/api/v1/admin/analytics/doctors/top", headers=headers_for(admin)
    )
    top = response.json()["data"]
    assert top[0]["doctor_id"] == doctor["id"]
    assert top[0]["appointments"] == 1
    assert top[0]["name"] == "Dr. Grace Kamau"
