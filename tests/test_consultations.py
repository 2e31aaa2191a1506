"""Tests for consultations and prescriptions."""

from collections.abc import Callable
from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient
from jose import jwt
from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.utils import new_id
from app.models.appointments import appointments
from app.models.consultations import consultations
from app.models.doctors import doctors


@pytest_asyncio.fixture
async def confirmed_appointment(
    db_session: AsyncSession, patient: dict, doctor: dict, future_start: datetime
) -> str:
    """A paid video appointment."""
    appointment_id = new_id()
    await db_session.execute(
        insert(appointments).values(
            id=appointment_id,
            patient_id=patient["id"],
            doctor_id=doctor["id"],
            scheduled_at=future_start,
            duration_minutes=30,
            consultation_type="video",
            status="confirmed",
        )
    )
    await db_session.commit()
    return appointment_id


@pytest.mark.asyncio
async def test_start_consultation(
    client: AsyncClient,
    doctor: dict,
    confirmed_appointment: str,
    headers_for: Callable,
) -> None:
    response = await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/start", headers=headers_for(doctor)
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Consultation started"
    assert body["data"]["room_id"] == f"{settings.video_room_prefix}-{confirmed_appointment}"
    assert body["data"]["started_at"] is not None

    # Cannot start twice
    response = await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/start", headers=headers_for(doctor)
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_only_the_doctor_starts(
    client: AsyncClient,
    make_doctor: Callable,
    confirmed_appointment: str,
    headers_for: Callable,
) -> None:
    other = await make_doctor(last_name="Ochieng")
    response = await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/start", headers=headers_for(other)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_session_includes_join_token_while_in_progress(
    client: AsyncClient,
    patient: dict,
    doctor: dict,
    confirmed_appointment: str,
    headers_for: Callable,
) -> None:
    url = f"/api/v1/consultations/{confirmed_appointment}/session"

    before = (await client.get(url, headers=headers_for(patient))).json()["data"]
    assert before["appointment_status"] == "confirmed"
    assert before["join_token"] is None

    await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/start", headers=headers_for(doctor)
    )

    session = (await client.get(url, headers=headers_for(patient))).json()["data"]
    assert session["role"] == "patient"
    claims = jwt.decode(
        session["join_token"], settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
    )
    assert claims["sub"] == patient["id"]
    assert claims["room_id"] == session["room_id"]
    assert claims["type"] == "video"


@pytest.mark.asyncio
async def test_session_forbidden_for_strangers(
    client: AsyncClient,
    make_patient: Callable,
    confirmed_appointment: str,
    headers_for: Callable,
) -> None:
    stranger = await make_patient("Chebet")
    response = await client.get(
        f"/api/v1/consultations/{confirmed_appointment}/session", headers=headers_for(stranger)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_end_consultation_completes_appointment(
    client: AsyncClient,
    db_session: AsyncSession,
    patient: dict,
    doctor: dict,
    confirmed_appointment: str,
    headers_for: Callable,
) -> None:
    await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/start", headers=headers_for(doctor)
    )

    response = await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/end", headers=headers_for(doctor)
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["ended_at"] is not None
    assert data["duration_seconds"] >= 0

    appointment = await client.get(
        f"/api/v1/appointments/{confirmed_appointment}", headers=headers_for(patient)
    )
    assert appointment.json()["data"]["status"] == "completed"

    total = (
        await db_session.execute(
            select(doctors.c.total_consultations).where(doctors.c.id == doctor["id"])
        )
    ).scalar()
    assert total == 1


@pytest.mark.asyncio
async def test_appointment_start_opens_the_video_room(
    client: AsyncClient,
    patient: dict,
    doctor: dict,
    confirmed_appointment: str,
    headers_for: Callable,
) -> None:
    response = await client.post(
        f"/api/v1/appointments/{confirmed_appointment}/start", headers=headers_for(doctor)
    )
    assert response.json()["data"]["status"] == "in_progress"

    session = (
        await client.get(
            f"/api/v1/consultations/{confirmed_appointment}/session",
            headers=headers_for(patient),
        )
    ).json()["data"]
    assert session["room_id"] == f"{settings.video_room_prefix}-{confirmed_appointment}"
    assert session["join_token"] is not None
    assert session["consultation"]["started_at"] is not None

    response = await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/start", headers=headers_for(doctor)
    )
    assert response.status_code == 409

    response = await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/end", headers=headers_for(doctor)
    )
    assert response.status_code == 200
    assert response.json()["data"]["ended_at"] is not None


@pytest.mark.asyncio
async def test_appointment_complete_closes_the_consultation(
    client: AsyncClient,
    db_session: AsyncSession,
    doctor: dict,
    confirmed_appointment: str,
    headers_for: Callable,
) -> None:
    await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/start", headers=headers_for(doctor)
    )
    response = await client.post(
        f"/api/v1/appointments/{confirmed_appointment}/complete", headers=headers_for(doctor)
    )
    assert response.json()["data"]["status"] == "completed"

    row = (
        await db_session.execute(
            select(consultations).where(consultations.c.appointment_id == confirmed_appointment)
        )
    ).fetchone()
    assert row.ended_at is not None
    assert row.duration_seconds >= 0


@pytest.mark.asyncio
async def test_end_before_start_returns_404(
    client: AsyncClient, doctor: dict, confirmed_appointment: str, headers_for: Callable
) -> None:
    response = await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/end", headers=headers_for(doctor)
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_save_notes(
    client: AsyncClient, doctor: dict, confirmed_appointment: str, headers_for: Callable
) -> None:
    url = f"/api/v1/consultations/{confirmed_appointment}/notes"

    # No consultation row yet and the appointment has not started
    response = await client.put(url, json={"diagnosis": "URTI"}, headers=headers_for(doctor))
    assert response.status_code == 400

    await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/start", headers=headers_for(doctor)
    )
    response = await client.put(
        url,
        json={"diagnosis": "URTI", "follow_up_recommended": True},
        headers=headers_for(doctor),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["diagnosis"] == "URTI"
    assert data["follow_up_recommended"] is True

    response = await client.put(
        url, json={"doctor_notes": "Rest and fluids"}, headers=headers_for(doctor)
    )
    data = response.json()["data"]
    assert data["doctor_notes"] == "Rest and fluids"
    assert data["diagnosis"] == "URTI"


# ============================================================================
# Prescriptions
# ============================================================================


PRESCRIPTION = {
    "medications": [
        {"name": "Amoxicillin", "dosage": "500mg", "frequency": "3x daily", "duration": "7 days"}
    ],
    "instructions": "Take after meals",
}


@pytest.mark.asyncio
async def test_issue_and_read_prescription(
    client: AsyncClient,
    make_patient: Callable,
    patient: dict,
    doctor: dict,
    confirmed_appointment: str,
    headers_for: Callable,
) -> None:
    await client.post(
        f"/api/v1/consultations/{confirmed_appointment}/start", headers=headers_for(doctor)
    )

    response = await client.post(
        "/api/v1/prescriptions/",
        json={"appointment_id": confirmed_appointment, **PRESCRIPTION},
        headers=headers_for(doctor),
    )
    assert response.status_code == 201
    prescription = response.json()["data"]
    assert prescription["patient_id"] == patient["id"]
    assert prescription["medications"][0]["name"] == "Amoxicillin"

    mine = await client.get("/api/v1/prescriptions/my", headers=headers_for(patient))
    assert [p["id"] for p in mine.json()["data"]] == [prescription["id"]]

    response = await client.get(
        f"/api/v1/prescriptions/{prescription['id']}", headers=headers_for(doctor)
    )
    assert response.status_code == 200

    stranger = await make_patient("Chebet")
    response = await client.get(
        f"/api/v1/prescriptions/{prescription['id']}", headers=headers_for(stranger)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_prescription_requires_consultation(
    client: AsyncClient, doctor: dict, confirmed_appointment: str, headers_for: Callable
) -> None:
    response = await client.post(
        "/api/v1/prescriptions/",
        json={"appointment_id": confirmed_appointment, **PRESCRIPTION},
        headers=headers_for(doctor),
    )
    assert response.status_code == 404
    assert response.json()["error"] == "Consultation not found"


@pytest.mark.asyncio
async def test_patient_cannot_prescribe(
    client: AsyncClient, patient: dict, confirmed_appointment: str, headers_for: Callable
) -> None:
    response = await client.post(
        "/api/v1/prescriptions/",
        json={"appointment_id": confirmed_appointment, **PRESCRIPTION},
        headers=headers_for(patient),
    )
    assert response.status_code == 403
