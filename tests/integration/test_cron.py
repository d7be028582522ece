"""Integration tests: Scheduled job endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_jobs(async_client: AsyncClient, api_base: str, admin_headers):
    resp = await async_client.get(f"{api_base}/cron/jobs", headers=admin_headers)

    assert resp.status_code == 200
    jobs = {job["name"]: job for job in resp.json()["data"]}
    assert jobs["payment-reminder-5-days"]["schedule"] == "0 9 * * *"
    assert jobs["notification-cleanup"]["schedule"] == "0 1 * * 0"
    assert all(job["next_run"] for job in jobs.values())


@pytest.mark.asyncio
async def test_run_cleanup_job(async_client: AsyncClient, api_base: str, admin_headers):
    resp = await async_client.post(
        f"{api_base}/cron/run", headers=admin_headers, json={"job": "notification-cleanup"}
    )

    assert resp.status_code == 200
    assert resp.json()["data"] == {"job": "notification-cleanup", "processed": 0}


@pytest.mark.asyncio
async def test_run_monthly_generation_job(
    async_client: AsyncClient, api_base: str, admin_headers, tenant_user, make_room
):
    await make_room(tenant_user)

    resp = await async_client.post(
        f"{api_base}/cron/run", headers=admin_headers, json={"job": "monthly-bill-generation"}
    )
    assert resp.json()["data"]["processed"] == 1

    bills = await async_client.get(f"{api_base}/bills", headers=admin_headers)
    assert bills.json()["meta"]["total"] == 1


@pytest.mark.asyncio
async def test_run_unknown_job(async_client: AsyncClient, api_base: str, admin_headers):
    resp = await async_client.post(f"{api_base}/cron/run", headers=admin_headers, json={"job": "nope"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_tenant_cannot_run_jobs(async_client: AsyncClient, api_base: str, tenant_headers):
    resp = await async_client.post(
        f"{api_base}/cron/run", headers=tenant_headers, json={"job": "notification-cleanup"}
    )
    assert resp.status_code == 403
