"""Tests for in-app notifications."""

from collections.abc import Callable
from datetime import datetime

import pytest
from httpx import AsyncClient


async def book(client: AsyncClient, patient: dict, doctor: dict, start: datetime, headers_for) -> None:
    response = await client.post(
        "/api/v1/appointments/",
        json={
            "doctor_id": doctor["id"],
            "scheduled_at": start.isoformat(),
            "consultation_type": "in_person",
        },
        headers=headers_for(patient),
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_booking_notifies_patient(
    client: AsyncClient,
    patient: dict,
    doctor: dict,
    headers_for: Callable,
    future_start: datetime,
) -> None:
    await book(client, patient, doctor, future_start, headers_for)

    response = await client.get("/api/v1/notifications/my", headers=headers_for(patient))
    assert response.status_code == 200
    items = response.json()["data"]
    assert [n["type"] for n in items] == ["appointment_booked"]
    assert items[0]["status"] == "pending"
    assert items[0]["read_at"] is None
    assert "Dr. Kamau" in items[0]["body"]


@pytest.mark.asyncio
async def test_mark_read(
    client: AsyncClient,
    make_patient: Callable,
    patient: dict,
    doctor: dict,
    headers_for: Callable,
    future_start: datetime,
) -> None:
    await book(client, patient, doctor, future_start, headers_for)
    items = (await client.get("/api/v1/notifications/my", headers=headers_for(patient))).json()["data"]

    other = await make_patient("Chebet")
    response = await client.post(
        f"/api/v1/notifications/{items[0]['id']}/read", headers=headers_for(other)
    )
    assert response.status_code == 404

    response = await client.post(
        f"/api/v1/notifications/{items[0]['id']}/read", headers=headers_for(patient)
    )
    assert response.status_code == 200
    assert response.json()["data"]["read_at"] is not None

    unread = await client.get(
        "/api/v1/notifications/my?unread_only=true", headers=headers_for(patient)
    )
    assert unread.json()["pagination"]["total"] == 0


@pytest.mark.asyncio
async def test_mark_all_read(
    client: AsyncClient,
    patient: dict,
    doctor: dict,
    headers_for: Callable,
    future_start: datetime,
) -> None:
    await book(client, patient, doctor, future_start, headers_for)
    await book(client, patient, doctor, future_start.replace(hour=8), headers_for)

    response = await client.post("/api/v1/notifications/read-all", headers=headers_for(patient))
    assert response.status_code == 200
    assert response.json()["data"] == {"updated": 2}

    response = await client.post("/api/v1/notifications/read-all", headers=headers_for(patient))
    assert response.json()["data"] == {"updated": 0}
