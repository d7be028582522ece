"""Integration tests: Notification inbox, stats, manual sends and templates."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from billmate.models import Notification, NotificationType
from billmate.utils.time import get_utc_now, local_day_bounds, local_today
from tests.conftest import auth_headers


@pytest.fixture
def make_notification(db_session):
    async def _make(user, notification_type=NotificationType.PAYMENT_REMINDER, read=False) -> Notification:
        notification = Notification(
            user_id=user.id,
            type=notification_type,
            title="แจ้งเตือน",
            message="ข้อความ",
            read=read,
            read_at=get_utc_now() if read else None,
            sent_at=get_utc_now(),
        )
        db_session.add(notification)
        await db_session.commit()
        await db_session.refresh(notification)
        return notification

    return _make


@pytest.mark.asyncio
async def test_inbox_lists_own_notifications_with_unread_count(
    async_client: AsyncClient, api_base: str, tenant_user, tenant_headers, make_user, make_notification
):
    await make_notification(tenant_user)
    await make_notification(tenant_user, read=True)
    await make_notification(await make_user())

    resp = await async_client.get(f"{api_base}/notifications", headers=tenant_headers)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert len(data["notifications"]) == 2
    assert data["unread_count"] == 1


@pytest.mark.asyncio
async def test_mark_read_and_mark_all(
    async_client: AsyncClient, api_base: str, tenant_user, tenant_headers, make_notification
):
    first = await make_notification(tenant_user)
    await make_notification(tenant_user)
    await make_notification(tenant_user)

    resp = await async_client.put(f"{api_base}/notifications/{first.id}/read", headers=tenant_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["read"] is True
    assert resp.json()["data"]["read_at"] is not None

    resp = await async_client.put(f"{api_base}/notifications/mark-all-read", headers=tenant_headers)
    assert resp.json()["data"]["updated"] == 2

    inbox = await async_client.get(f"{api_base}/notifications", headers=tenant_headers)
    assert inbox.json()["data"]["unread_count"] == 0


@pytest.mark.asyncio
async def test_cannot_touch_someone_elses_notification(
    async_client: AsyncClient, api_base: str, tenant_headers, make_user, make_notification
):
    other = await make_notification(await make_user())

    read = await async_client.put(f"{api_base}/notifications/{other.id}/read", headers=tenant_headers)
    delete = await async_client.delete(f"{api_base}/notifications/{other.id}", headers=tenant_headers)

    assert read.status_code == 403
    assert delete.status_code == 403


@pytest.mark.asyncio
async def test_delete_own_notification(
    async_client: AsyncClient, api_base: str, tenant_user, tenant_headers, make_notification
):
    notification = await make_notification(tenant_user)

    resp = await async_client.delete(f"{api_base}/notifications/{notification.id}", headers=tenant_headers)
    assert resp.status_code == 200

    resp = await async_client.get(f"{api_base}/notifications/{notification.id}", headers=tenant_headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_stats(async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_notification):
    await make_notification(tenant_user, NotificationType.OVERDUE)
    await make_notification(tenant_user, NotificationType.OVERDUE, read=True)
    await make_notification(tenant_user, NotificationType.PAYMENT_VERIFIED, read=True)

    resp = await async_client.get(f"{api_base}/notifications/stats", headers=admin_headers)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total"] == 3
    assert data["unread"] == 1
    assert data["total_read"] == 2
    assert data["read_rate"] == 67
    assert data["by_type"]["overdue"] == 2
    assert data["by_type"]["bill_generated"] == 0


@pytest.mark.asyncio
async def test_manual_send_runs_reminder_job(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room, make_bill
):
    room = await make_room(tenant_user)
    _, tomorrow_end = local_day_bounds(local_today() + timedelta(days=1))
    await make_bill(room, tenant_user, due_date=tomorrow_end - timedelta(hours=1))

    resp = await async_client.post(
        f"{api_base}/notifications/send", headers=admin_headers, json={"type": "reminder_1day"}
    )

    assert resp.status_code == 200
    assert resp.json()["data"]["sent"] == 1

    inbox = await async_client.get(f"{api_base}/notifications", headers=auth_headers(tenant_user))
    assert inbox.json()["data"]["notifications"][0]["title"] == "แจ้งเตือนการชำระเงิน 1 วัน"


@pytest.mark.asyncio
async def test_manual_send_rejects_unknown_type(async_client: AsyncClient, api_base: str, admin_headers):
    resp = await async_client.post(f"{api_base}/notifications/send", headers=admin_headers, json={"type": "spam"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_template_upsert_bumps_version_and_is_used(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room, make_bill
):
    payload = {
        "type": "overdue",
        "name": "Overdue",
        "subject": "ค้างชำระ {{room_number}}",
        "email_body": "เรียน {{user_name}}",
        "in_app_title": "ค้างชำระ {{days_overdue}} วัน",
        "in_app_message": "ห้อง {{room_number}}",
        "variables": ["room_number", "user_name", "days_overdue"],
        "is_active": True,
    }
    first = await async_client.post(f"{api_base}/notifications/templates", headers=admin_headers, json=payload)
    assert first.status_code == 200
    assert first.json()["data"]["version"] == 1

    second = await async_client.post(f"{api_base}/notifications/templates", headers=admin_headers, json=payload)
    assert second.json()["data"]["version"] == 2

    room = await make_room(tenant_user, room_number="C301")
    await make_bill(room, tenant_user, due_date=get_utc_now() - timedelta(days=3, hours=1))
    run = await async_client.post(f"{api_base}/cron/run", headers=admin_headers, json={"job": "overdue-notifications"})
    assert run.json()["data"]["processed"] == 1

    inbox = await async_client.get(f"{api_base}/notifications", headers=auth_headers(tenant_user))
    notification = inbox.json()["data"]["notifications"][0]
    assert notification["title"] == "ค้างชำระ 3 วัน"
    assert notification["message"] == "ห้อง C301"


@pytest.mark.asyncio
async def test_init_default_templates_is_idempotent(async_client: AsyncClient, api_base: str, admin_headers):
    first = await async_client.post(f"{api_base}/notifications/templates/init", headers=admin_headers)
    second = await async_client.post(f"{api_base}/notifications/templates/init", headers=admin_headers)

    assert first.json()["data"]["created"] == len(NotificationType)
    assert second.json()["data"]["created"] == 0

    listing = await async_client.get(f"{api_base}/notifications/templates", headers=admin_headers)
    assert len(listing.json()["data"]) == len(NotificationType)


@pytest.mark.asyncio
async def test_tenant_cannot_see_stats(async_client: AsyncClient, api_base: str, tenant_headers):
    resp = await async_client.get(f"{api_base}/notifications/stats", headers=tenant_headers)
    assert resp.status_code == 403
