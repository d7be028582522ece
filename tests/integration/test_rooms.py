"""Integration tests: Room catalogue and tenant assignment."""

import pytest
from httpx import AsyncClient

ROOM_PAYLOAD = {
    "room_number": "B201",
    "floor": 2,
    "rent_price": "4500.00",
    "water_price": "150.00",
    "electricity_price": "7.50",
}


def _assign_payload(tenant_id) -> dict:
    return {
        "tenant_id": str(tenant_id),
        "move_in_date": "2026-03-01T00:00:00+07:00",
        "rent_due_day": 5,
        "deposit_amount": "9000.00",
        "notes": "สัญญา 1 ปี",
    }


@pytest.mark.asyncio
async def test_create_and_list_rooms(async_client: AsyncClient, api_base: str, admin_headers):
    resp = await async_client.post(f"{api_base}/rooms", headers=admin_headers, json=ROOM_PAYLOAD)
    assert resp.status_code == 201
    room = resp.json()["data"]
    assert room["is_occupied"] is False
    assert float(room["rent_price"]) == 4500.0

    listing = await async_client.get(f"{api_base}/rooms", headers=admin_headers)
    assert [r["room_number"] for r in listing.json()["data"]] == ["B201"]


@pytest.mark.asyncio
async def test_duplicate_room_number_rejected(async_client: AsyncClient, api_base: str, admin_headers):
    await async_client.post(f"{api_base}/rooms", headers=admin_headers, json=ROOM_PAYLOAD)
    resp = await async_client.post(f"{api_base}/rooms", headers=admin_headers, json=ROOM_PAYLOAD)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_invalid_room_number_rejected(async_client: AsyncClient, api_base: str, admin_headers):
    resp = await async_client.post(
        f"{api_base}/rooms", headers=admin_headers, json={**ROOM_PAYLOAD, "room_number": "B 201"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["details"]


@pytest.mark.asyncio
async def test_assign_and_unassign_tenant(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room, db_session
):
    room = await make_room()

    resp = await async_client.post(
        f"{api_base}/rooms/{room.id}/assign", headers=admin_headers, json=_assign_payload(tenant_user.id)
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["is_occupied"] is True
    assert data["tenant_id"] == str(tenant_user.id)
    assert data["tenant"]["email"] == tenant_user.email
    assert data["rent_due_day"] == 5

    await db_session.refresh(tenant_user)
    assert tenant_user.room_id == room.id
    assert tenant_user.rent_due_day == 5

    resp = await async_client.delete(f"{api_base}/rooms/{room.id}/assign", headers=admin_headers)
    assert resp.status_code == 200

    await db_session.refresh(room)
    await db_session.refresh(tenant_user)
    assert room.is_occupied is False
    assert room.tenant_id is None
    assert room.move_out_date is not None
    assert tenant_user.room_id is None
    assert tenant_user.move_out_date is not None


@pytest.mark.asyncio
async def test_assign_to_occupied_room_rejected(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_user, make_room, db_session
):
    room = await make_room(tenant_user)
    newcomer = await make_user()

    resp = await async_client.post(
        f"{api_base}/rooms/{room.id}/assign", headers=admin_headers, json=_assign_payload(newcomer.id)
    )
    assert resp.status_code == 400

    await db_session.refresh(room)
    await db_session.refresh(newcomer)
    assert room.tenant_id == tenant_user.id
    assert newcomer.room_id is None


@pytest.mark.asyncio
async def test_assign_tenant_already_housed_rejected(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room
):
    await make_room(tenant_user)
    empty_room = await make_room()

    resp = await async_client.post(
        f"{api_base}/rooms/{empty_room.id}/assign", headers=admin_headers, json=_assign_payload(tenant_user.id)
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_unassign_empty_room_rejected(async_client: AsyncClient, api_base: str, admin_headers, make_room):
    room = await make_room()
    resp = await async_client.delete(f"{api_base}/rooms/{room.id}/assign", headers=admin_headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_delete_occupied_room_rejected(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room
):
    room = await make_room(tenant_user)
    resp = await async_client.delete(f"{api_base}/rooms/{room.id}", headers=admin_headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_room_stats(async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room):
    await make_room(tenant_user, floor=1)
    await make_room(floor=2)

    resp = await async_client.get(f"{api_base}/rooms/stats", headers=admin_headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total_rooms"] == 2
    assert data["occupied_rooms"] == 1
    assert data["available_rooms"] == 1


@pytest.mark.asyncio
async def test_tenant_cannot_manage_rooms(async_client: AsyncClient, api_base: str, tenant_headers):
    resp = await async_client.get(f"{api_base}/rooms", headers=tenant_headers)
    assert resp.status_code == 403
