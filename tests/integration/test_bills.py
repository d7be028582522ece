"""Integration tests: Bills and monthly generation."""

from datetime import datetime
from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from billmate.models import Bill, Notification, NotificationType
from billmate.services.bill_service import BillService
from tests.conftest import auth_headers


@pytest.mark.asyncio
async def test_create_bill_prices_from_room(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room, db_session
):
    room = await make_room(
        tenant_user,
        rent_price=Decimal("3500.00"),
        water_price=Decimal("100.00"),
        electricity_price=Decimal("8.00"),
    )

    resp = await async_client.post(
        f"{api_base}/bills",
        headers=admin_headers,
        json={
            "room_id": str(room.id),
            "tenant_id": str(tenant_user.id),
            "month": 4,
            "year": 2026,
            "electricity_units": "120",
            "due_day": 31,
        },
    )

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert Decimal(data["electricity_amount"]) == Decimal("960.00")
    assert Decimal(data["water_amount"]) == Decimal("100.00")
    assert Decimal(data["total_amount"]) == Decimal("4560.00")
    assert data["status"] == "pending"
    # April has 30 days; local midnight in Bangkok is 17:00 UTC the day before
    assert data["due_date"].startswith("2026-04-29T17:00")

    notifications = await db_session.scalar(
        select(func.count(Notification.id)).where(
            Notification.user_id == tenant_user.id, Notification.type == NotificationType.BILL_GENERATED
        )
    )
    assert notifications == 1


@pytest.mark.asyncio
async def test_duplicate_bill_for_month_rejected(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room
):
    room = await make_room(tenant_user)
    payload = {"room_id": str(room.id), "tenant_id": str(tenant_user.id), "month": 4, "year": 2026}

    first = await async_client.post(f"{api_base}/bills", headers=admin_headers, json=payload)
    second = await async_client.post(f"{api_base}/bills", headers=admin_headers, json=payload)

    assert first.status_code == 201
    assert second.status_code == 400


@pytest.mark.asyncio
async def test_tenant_sees_only_own_bills(
    async_client: AsyncClient, api_base: str, tenant_user, tenant_headers, make_user, make_room, make_bill
):
    own = await make_bill(await make_room(tenant_user), tenant_user)
    other = await make_user()
    other_bill = await make_bill(await make_room(other), other)

    listing = await async_client.get(f"{api_base}/bills", headers=tenant_headers)
    assert listing.status_code == 200
    assert [b["id"] for b in listing.json()["data"]] == [str(own.id)]

    forbidden = await async_client.get(f"{api_base}/bills/{other_bill.id}", headers=tenant_headers)
    assert forbidden.status_code == 403

    allowed = await async_client.get(f"{api_base}/bills/{other_bill.id}", headers=auth_headers(other))
    assert allowed.status_code == 200


@pytest.mark.asyncio
async def test_update_bill_recomputes_total(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room, make_bill
):
    bill = await make_bill(await make_room(tenant_user), tenant_user, total=Decimal("1000.00"))

    resp = await async_client.put(
        f"{api_base}/bills/{bill.id}", headers=admin_headers, json={"water_amount": "250.00"}
    )

    assert resp.status_code == 200
    assert Decimal(resp.json()["data"]["total_amount"]) == Decimal("1250.00")


@pytest.mark.asyncio
async def test_update_bill_cannot_mark_verified(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room, make_bill
):
    bill = await make_bill(await make_room(tenant_user), tenant_user)
    resp = await async_client.put(f"{api_base}/bills/{bill.id}", headers=admin_headers, json={"status": "verified"})
    assert resp.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["rent_amount", "water_amount", "due_date", "status"])
async def test_update_bill_rejects_null_fields(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room, make_bill, db_session, field
):
    bill = await make_bill(await make_room(tenant_user), tenant_user, total=Decimal("1000.00"))

    resp = await async_client.put(f"{api_base}/bills/{bill.id}", headers=admin_headers, json={field: None})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
    await db_session.refresh(bill)
    assert bill.total_amount == Decimal("1000.00")


@pytest.mark.asyncio
async def test_delete_bill_removes_payments(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room, make_bill, make_payment
):
    bill = await make_bill(await make_room(tenant_user), tenant_user)
    payment = await make_payment(bill)

    resp = await async_client.delete(f"{api_base}/bills/{bill.id}", headers=admin_headers)
    assert resp.status_code == 200

    gone = await async_client.get(f"{api_base}/payments/{payment.id}", headers=admin_headers)
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_generate_monthly_bills_skips_existing(
    db_session, tenant_user, make_user, make_room, make_bill
):
    housed = await make_room(tenant_user, rent_due_day=10)
    second_tenant = await make_user()
    await make_room(second_tenant)
    await make_room()  # vacant
    await make_bill(housed, tenant_user, month=4, year=2026)

    created = await BillService.generate_monthly_bills(db_session, now=datetime(2026, 4, 1, 1, 0))

    assert created == 1
    total = await db_session.scalar(
        select(func.count(Bill.id)).where(Bill.month == 4, Bill.year == 2026)
    )
    assert total == 2

    again = await BillService.generate_monthly_bills(db_session, now=datetime(2026, 4, 1, 1, 0))
    assert again == 0


@pytest.mark.asyncio
async def test_generate_uses_room_due_day(db_session, tenant_user, make_room):
    room = await make_room(tenant_user, rent_due_day=10)

    await BillService.generate_monthly_bills(db_session, month=5, year=2026)

    bill = await db_session.scalar(select(Bill).where(Bill.room_id == room.id))
    assert bill.due_date == datetime(2026, 5, 9, 17, 0)
    assert bill.total_amount == Decimal("3600.00")


@pytest.mark.asyncio
async def test_generate_endpoint_admin_only(async_client: AsyncClient, api_base: str, tenant_headers):
    resp = await async_client.post(f"{api_base}/bills/generate", headers=tenant_headers, json={})
    assert resp.status_code == 403
