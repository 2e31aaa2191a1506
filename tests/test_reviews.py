"""Tests for doctor reviews and ratings."""

from collections.abc import Callable
from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.utils import new_id
from app.models.appointments import appointments
from app.models.notifications import notifications


@pytest.fixture
def make_appointment(db_session: AsyncSession, future_start: datetime) -> Callable:
    """Factory inserting an appointment in a given status."""
    counter = {"n": 0}

    async def _make(patient: dict, doctor: dict, status: str = "completed") -> str:
        counter["n"] += 1
        appointment_id = new_id()
        await db_session.execute(
            insert(appointments).values(
                id=appointment_id,
                patient_id=patient["id"],
                doctor_id=doctor["id"],
                scheduled_at=future_start - timedelta(days=10, hours=counter["n"]),
                duration_minutes=30,
                consultation_type="video",
                status=status,
            )
        )
        await db_session.commit()
        return appointment_id

    return _make


async def submit(client: AsyncClient, user: dict, headers_for: Callable, **payload):
    return await client.post("/api/v1/reviews/", json=payload, headers=headers_for(user))


@pytest.mark.asyncio
async def test_review_updates_doctor_rating(
    client: AsyncClient,
    db_session: AsyncSession,
    patient: dict,
    doctor: dict,
    make_appointment: Callable,
    headers_for: Callable,
) -> None:
    first = await make_appointment(patient, doctor)
    response = await submit(
        client, patient, headers_for, appointment_id=first, rating=4, comment="Very thorough"
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["moderation_status"] == "approved"
    assert data["doctor_id"] == doctor["id"]
    assert data["patient_name"] == "Amina O."

    second = await make_appointment(patient, doctor)
    await submit(client, patient, headers_for, appointment_id=second, rating=5)

    profile = (await client.get(f"/api/v1/doctors/{doctor['id']}")).json()["data"]
    assert profile["average_rating"] == 4.5
    assert profile["total_reviews"] == 2

    received = (
        await db_session.execute(
            select(func.count())
            .select_from(notifications)
            .where(
                notifications.c.user_id == doctor["id"],
                notifications.c.type == "review_received",
            )
        )
    ).scalar()
    assert received == 2


@pytest.mark.asyncio
async def test_one_review_per_appointment(
    client: AsyncClient,
    patient: dict,
    doctor: dict,
    make_appointment: Callable,
    headers_for: Callable,
) -> None:
    appointment_id = await make_appointment(patient, doctor)
    await submit(client, patient, headers_for, appointment_id=appointment_id, rating=3)

    response = await submit(client, patient, headers_for, appointment_id=appointment_id, rating=5)
    assert response.status_code == 409
    assert response.json()["error"] == "You have already reviewed this appointment"


@pytest.mark.asyncio
async def test_review_requires_completed_own_appointment(
    client: AsyncClient,
    make_patient: Callable,
    patient: dict,
    doctor: dict,
    make_appointment: Callable,
    headers_for: Callable,
) -> None:
    confirmed = await make_appointment(patient, doctor, status="confirmed")
    response = await submit(client, patient, headers_for, appointment_id=confirmed, rating=5)
    assert response.status_code == 400
    assert response.json()["error"] == "Only completed appointments can be reviewed"

    completed = await make_appointment(patient, doctor)
    other = await make_patient("Wambui")
    response = await submit(client, other, headers_for, appointment_id=completed, rating=1)
    assert response.status_code == 403

    response = await submit(client, doctor, headers_for, appointment_id=completed, rating=5)
    assert response.status_code == 403

    response = await submit(client, patient, headers_for, appointment_id=new_id(), rating=5)
    assert response.status_code == 404

    response = await submit(client, patient, headers_for, appointment_id=completed, rating=6)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_and_summary(
    client: AsyncClient,
    make_patient: Callable,
    patient: dict,
    doctor: dict,
    make_appointment: Callable,
    headers_for: Callable,
) -> None:
    other = await make_patient("Wambui")
    await submit(
        client,
        patient,
        headers_for,
        appointment_id=await make_appointment(patient, doctor),
        rating=5,
    )
    await submit(
        client,
        other,
        headers_for,
        appointment_id=await make_appointment(other, doctor),
        rating=2,
        is_anonymous=True,
    )

    response = await client.get(f"/api/v1/reviews/doctor/{doctor['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total"] == 2
    names = sorted(r["patient_name"] or "" for r in body["data"])
    assert names == ["", "Amina O."]

    summary = (await client.get(f"/api/v1/reviews/doctor/{doctor['id']}/summary")).json()["data"]
    assert summary["average_rating"] == 3.5
    assert summary["total_reviews"] == 2
    assert summary["distribution"] == {"5": 1, "4": 0, "3": 0, "2": 1, "1": 0}


@pytest.mark.asyncio
async def test_reviews_for_unverified_doctor_return_404(
    client: AsyncClient, pending_doctor: dict
) -> None:
    response = await client.get(f"/api/v1/reviews/doctor/{pending_doctor['id']}")
    assert response.status_code == 404
    response = await client.get(f"/api/v1/reviews/doctor/{pending_doctor['id']}/summary")
    assert response.status_code == 404
