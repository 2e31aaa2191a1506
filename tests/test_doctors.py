"""Tests for the doctor directory and profile endpoints."""

from collections.abc import Callable

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_search_lists_only_verified_doctors(
    client: AsyncClient, doctor: dict, pending_doctor: dict
) -> None:
    response = await client.get("/api/v1/doctors/")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [d["id"] for d in body["data"]] == [doctor["id"]]
    assert body["pagination"]["total"] == 1
    assert body["data"][0]["consultation_fee"] == 1500.0


@pytest.mark.asyncio
async def test_search_filters(client: AsyncClient, make_doctor: Callable) -> None:
    cardiologist = await make_doctor(specialties=["cardiology"], fee="3000.00", last_name="Mwangi")
    await make_doctor(specialties=["dermatology"], fee="1000.00", modes=["in_person"])

    response = await client.get("/api/v1/doctors/?specialty=cardiology")
    assert [d["id"] for d in response.json()["data"]] == [cardiologist["id"]]

    response = await client.get("/api/v1/doctors/?max_fee=2000")
    assert all(d["consultation_fee"] <= 2000 for d in response.json()["data"])
    assert response.json()["pagination"]["total"] == 1

    response = await client.get("/api/v1/doctors/?mode=video")
    assert [d["id"] for d in response.json()["data"]] == [cardiologist["id"]]

    response = await client.get("/api/v1/doctors/?q=mwangi")
    assert [d["id"] for d in response.json()["data"]] == [cardiologist["id"]]


@pytest.mark.asyncio
async def test_search_pagination(client: AsyncClient, make_doctor: Callable) -> None:
    for _ in range(3):
        await make_doctor()

    response = await client.get("/api/v1/doctors/?page=1&limit=2")
    body = response.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "has_more": True}


@pytest.mark.asyncio
async def test_get_public_profile(
    client: AsyncClient, doctor: dict, pending_doctor: dict
) -> None:
    response = await client.get(f"/api/v1/doctors/{doctor['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["verification_status"] == "verified"

    response = await client.get(f"/api/v1/doctors/{pending_doctor['id']}")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Doctor not found"}


@pytest.mark.asyncio
async def test_get_public_availability(client: AsyncClient, doctor: dict) -> None:
    response = await client.get(f"/api/v1/doctors/{doctor['id']}/availability")
    assert response.status_code == 200
    windows = response.json()["data"]
    assert len(windows) == 7
    assert windows[0]["day_of_week"] == 0
    assert windows[0]["start_time"] == "09:00:00"


@pytest.mark.asyncio
async def test_register_profile_starts_pending(
    client: AsyncClient, make_user: Callable, headers_for: Callable
) -> None:
    user = await make_user("doctor")
    payload = {
        "first_name": "Faith",
        "last_name": "Njeri",
        "license_number": "KMPDC-0042",
        "specialties": ["paediatrics"],
        "consultation_fee": "2000.00",
        "consultation_modes": ["in_person", "video"],
    }

    response = await client.post("/api/v1/doctors/me", json=payload, headers=headers_for(user))
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Profile submitted for verification"
    assert body["data"]["verification_status"] == "pending"

    # Pending profiles stay out of the directory
    listing = await client.get("/api/v1/doctors/")
    assert listing.json()["pagination"]["total"] == 0

    # The owner still sees it
    response = await client.get("/api/v1/doctors/me", headers=headers_for(user))
    assert response.json()["data"]["id"] == user["id"]

    response = await client.post("/api/v1/doctors/me", json=payload, headers=headers_for(user))
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_register_profile_requires_doctor_role(
    client: AsyncClient, patient: dict, headers_for: Callable
) -> None:
    response = await client.post(
        "/api/v1/doctors/me",
        json={
            "first_name": "A",
            "last_name": "B",
            "license_number": "X",
            "specialties": ["x"],
            "consultation_fee": "10.00",
        },
        headers=headers_for(patient),
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_replace_availability(
    client: AsyncClient, doctor: dict, headers_for: Callable
) -> None:
    payload = {
        "windows": [
            {"day_of_week": 1, "start_time": "14:00", "end_time": "17:00", "consultation_mode": "video"},
            {"day_of_week": 3, "start_time": "08:00", "end_time": "10:00"},
        ]
    }
    response = await client.put(
        "/api/v1/doctors/me/availability", json=payload, headers=headers_for(doctor)
    )
    assert response.status_code == 200
    windows = response.json()["data"]
    assert [(w["day_of_week"], w["consultation_mode"]) for w in windows] == [
        (1, "video"),
        (3, "in_person"),
    ]


@pytest.mark.asyncio
async def test_availability_window_must_be_ordered(
    client: AsyncClient, doctor: dict, headers_for: Callable
) -> None:
    payload = {"windows": [{"day_of_week": 1, "start_time": "17:00", "end_time": "09:00"}]}
    response = await client.put(
        "/api/v1/doctors/me/availability", json=payload, headers=headers_for(doctor)
    )
    assert response.status_code == 422
