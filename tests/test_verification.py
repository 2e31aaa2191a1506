"""Tests for the moderator verification workflow."""

from collections.abc import Callable

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit_logs import audit_logs
from app.models.notifications import notifications


@pytest.mark.asyncio
async def test_list_pending_verifications(
    client: AsyncClient,
    admin: dict,
    doctor: dict,
    pending_doctor: dict,
    headers_for: Callable,
) -> None:
    response = await client.get("/api/v1/admin/verifications/", headers=headers_for(admin))
    assert response.status_code == 200
    data = response.json()["data"]
    assert [d["id"] for d in data] == [pending_doctor["id"]]
    assert data[0]["email"] == pending_doctor["email"]

    response = await client.get(
        "/api/v1/admin/verifications/?status=verified", headers=headers_for(admin)
    )
    assert [d["id"] for d in response.json()["data"]] == [doctor["id"]]


@pytest.mark.asyncio
async def test_approve_doctor(
    client: AsyncClient,
    db_session: AsyncSession,
    admin: dict,
    pending_doctor: dict,
    headers_for: Callable,
) -> None:
    response = await client.post(
        f"/api/v1/admin/verifications/{pending_doctor['id']}/approve",
        json={"notes": "License checked"},
        headers=headers_for(admin),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Doctor verified"
    assert body["data"]["verification_status"] == "verified"
    assert body["data"]["verified_by"] == admin["id"]
    assert body["data"]["verified_at"] is not None

    # Now listed publicly
    listing = await client.get("/api/v1/doctors/")
    assert [d["id"] for d in listing.json()["data"]] == [pending_doctor["id"]]

    notes = (
        await db_session.execute(
            select(notifications.c.type).where(notifications.c.user_id == pending_doctor["id"])
        )
    ).scalars().all()
    assert notes == ["doctor_verified"]

    actions = (await db_session.execute(select(audit_logs.c.action))).scalars().all()
    assert actions == ["doctor.approve"]


@pytest.mark.asyncio
async def test_approve_is_one_way(
    client: AsyncClient, admin: dict, pending_doctor: dict, headers_for: Callable
) -> None:
    url = f"/api/v1/admin/verifications/{pending_doctor['id']}/approve"
    first = await client.post(url, headers=headers_for(admin))
    assert first.status_code == 200

    second = await client.post(url, headers=headers_for(admin))
    assert second.status_code == 409

    reject = await client.post(
        f"/api/v1/admin/verifications/{pending_doctor['id']}/reject",
        json={"reason": "Changed my mind"},
        headers=headers_for(admin),
    )
    assert reject.status_code == 409


@pytest.mark.asyncio
async def test_reject_doctor_keeps_reason(
    client: AsyncClient, admin: dict, pending_doctor: dict, headers_for: Callable
) -> None:
    response = await client.post(
        f"/api/v1/admin/verifications/{pending_doctor['id']}/reject",
        json={"reason": "License number not found in registry"},
        headers=headers_for(admin),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["verification_status"] == "rejected"
    assert data["verification_notes"] == "License number not found in registry"
    assert data["verified_at"] is None


@pytest.mark.asyncio
async def test_unknown_doctor_returns_404(
    client: AsyncClient, admin: dict, headers_for: Callable
) -> None:
    response = await client.post(
        "/api/v1/admin/verifications/missing/approve", headers=headers_for(admin)
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_verification_requires_admin(
    client: AsyncClient, doctor: dict, pending_doctor: dict, headers_for: Callable
) -> None:
    response = await client.get("/api/v1/admin/verifications/", headers=headers_for(doctor))
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Requires role: admin"}

    response = await client.post(
        f"/api/v1/admin/verifications/{pending_doctor['id']}/approve",
        headers=headers_for(doctor),
    )
    assert response.status_code == 403
