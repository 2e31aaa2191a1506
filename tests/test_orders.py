"""Tests for pharmacy orders."""

from collections.abc import Callable

import pytest
from httpx import AsyncClient

ORDER = {
    "items": [
        {"name": "Paracetamol 500mg", "quantity": 2, "unit_price": "250.00"},
    ],
    "delivery_address": "Kilimani, Nairobi",
    "delivery_notes": "Call on arrival",
}


async def place(client: AsyncClient, patient: dict, headers_for: Callable) -> dict:
    response = await client.post("/api/v1/orders/", json=ORDER, headers=headers_for(patient))
    assert response.status_code == 201
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_order_computes_totals(
    client: AsyncClient, patient: dict, headers_for: Callable
) -> None:
    order = await place(client, patient, headers_for)
    assert order["status"] == "pending_payment"
    assert order["subtotal"] == 500.0
    assert order["delivery_fee"] == 200.0
    assert order["total_amount"] == 700.0
    assert order["items"][0]["total_price"] == 500.0

    response = await client.get("/api/v1/orders/my", headers=headers_for(patient))
    assert [o["id"] for o in response.json()["data"]] == [order["id"]]


@pytest.mark.asyncio
async def test_order_requires_items(
    client: AsyncClient, patient: dict, headers_for: Callable
) -> None:
    response = await client.post(
        "/api/v1/orders/",
        json={"items": [], "delivery_address": "Kilimani"},
        headers=headers_for(patient),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_order_with_foreign_prescription(
    client: AsyncClient, patient: dict, headers_for: Callable
) -> None:
    response = await client.post(
        "/api/v1/orders/",
        json={**ORDER, "prescription_id": "missing"},
        headers=headers_for(patient),
    )
    assert response.status_code == 404
    assert response.json()["error"] == "Prescription not found"


@pytest.mark.asyncio
async def test_cancel_order(
    client: AsyncClient, make_patient: Callable, patient: dict, headers_for: Callable
) -> None:
    order = await place(client, patient, headers_for)
    other = await make_patient("Chebet")

    response = await client.post(
        f"/api/v1/orders/{order['id']}/cancel", headers=headers_for(other)
    )
    assert response.status_code == 403

    response = await client.post(
        f"/api/v1/orders/{order['id']}/cancel", headers=headers_for(patient)
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "cancelled"

    response = await client.post(
        f"/api/v1/orders/{order['id']}/cancel", headers=headers_for(patient)
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_admin_status_updates_follow_lifecycle(
    client: AsyncClient, patient: dict, admin: dict, headers_for: Callable
) -> None:
    order = await place(client, patient, headers_for)
    url = f"/api/v1/orders/{order['id']}/status"

    # Unpaid orders cannot be dispatched
    response = await client.patch(url, json={"status": "dispatched"}, headers=headers_for(admin))
    assert response.status_code == 409

    response = await client.patch(url, json={"status": "placed"}, headers=headers_for(patient))
    assert response.status_code == 403

    for status in ("placed", "processing", "dispatched", "delivered"):
        response = await client.patch(url, json={"status": status}, headers=headers_for(admin))
        assert response.status_code == 200
        assert response.json()["data"]["status"] == status

    # Delivered orders are final
    response = await client.post(
        f"/api/v1/orders/{order['id']}/cancel", headers=headers_for(patient)
    )
    assert response.status_code == 400
