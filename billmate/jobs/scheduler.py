"""Job registry.

Jobs are triggered from outside the process (a cron entry running
``scripts/run_job.py <name>``, or an admin calling ``POST /cron/run``).
The schedules below are the intended crontab lines, in the configured
timezone. ``next_run`` only understands a fixed minute and hour with ``*`` or
a single number in the day fields; a schedule using steps, ranges or lists
is rejected when the registry is built.
"""

import logging
import re
import time
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Awaitable, Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from billmate.core.exceptions import NotFoundError
from billmate.jobs.notifications import (
    cleanup_read_notifications,
    send_overdue_notifications,
    send_payment_reminders,
)
from billmate.services.bill_service import BillService
from billmate.utils.time import get_utc_now, local_zone, to_local, to_naive_utc

logger = logging.getLogger(__name__)

JobFunc = Callable[[AsyncSession, Optional[datetime]], Awaitable[int]]


_NUMBER = re.compile(r"^\d+$")


def is_supported_schedule(schedule: str) -> bool:
    fields = schedule.split()
    if len(fields) != 5:
        return False
    minute, hour, *days = fields
    return (
        bool(_NUMBER.match(minute))
        and bool(_NUMBER.match(hour))
        and all(f == "*" or _NUMBER.match(f) for f in days)
    )


@dataclass(frozen=True)
class Job:
    name: str
    schedule: str
    description: str
    func: JobFunc

    def __post_init__(self):
        if not is_supported_schedule(self.schedule):
            raise ValueError(f"Unsupported schedule for job {self.name}: {self.schedule}")


JOBS: Dict[str, Job] = {
    job.name: job
    for job in (
        Job(
            "payment-reminder-5-days",
            "0 9 * * *",
            "แจ้งเตือนการชำระเงินล่วงหน้า 5 วัน",
            lambda db, now: send_payment_reminders(db, 5, now),
        ),
        Job(
            "payment-reminder-1-day",
            "0 18 * * *",
            "แจ้งเตือนการชำระเงินล่วงหน้า 1 วัน",
            lambda db, now: send_payment_reminders(db, 1, now),
        ),
        Job(
            "overdue-notifications",
            "0 10 * * *",
            "แจ้งเตือนบิลที่เกินกำหนดชำระ",
            send_overdue_notifications,
        ),
        Job(
            "monthly-bill-generation",
            "0 8 1 * *",
            "สร้างบิลประจำเดือนสำหรับห้องที่มีผู้เช่า",
            lambda db, now: BillService.generate_monthly_bills(db, now=now),
        ),
        Job(
            "notification-cleanup",
            "0 1 * * 0",
            "ลบการแจ้งเตือนที่อ่านแล้วเกิน 30 วัน",
            cleanup_read_notifications,
        ),
    )
}


def get_job(name: str) -> Job:
    job = JOBS.get(name)
    if job is None:
        raise NotFoundError(f"ไม่พบงานชื่อ {name}")
    return job


def _field_matches(field: str, value: int) -> bool:
    return field == "*" or int(field) == value


def next_run(schedule: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Next time a ``minute hour day-of-month month day-of-week`` schedule fires
    after ``now``, as naive UTC.

    Returns None for a schedule outside ``is_supported_schedule``.
    """
    if not is_supported_schedule(schedule):
        return None
    minute, hour, dom, month, dow = schedule.split()

    local_now = to_local(now or get_utc_now())
    day: date = local_now.date()
    for _ in range(366 * 2):
        # Cron counts Sunday as 0; isoweekday() gives Sunday as 7
        if (
            _field_matches(dom, day.day)
            and _field_matches(month, day.month)
            and _field_matches(dow, day.isoweekday() % 7)
        ):
            candidate = datetime(day.year, day.month, day.day, int(hour), int(minute), tzinfo=local_zone())
            if candidate > local_now:
                return to_naive_utc(candidate)
        day += timedelta(days=1)
    return None


def list_jobs(now: Optional[datetime] = None) -> List[dict]:
    return [
        {
            "name": job.name,
            "schedule": job.schedule,
            "description": job.description,
            "next_run": next_run(job.schedule, now),
        }
        for job in JOBS.values()
    ]


async def run_job(db: AsyncSession, name: str, now: Optional[datetime] = None) -> int:
    """Run one job by name and return how many records it acted on."""
    job = get_job(name)
    started = time.perf_counter()
    logger.info("Running job %s", name, extra={"job": name})
    try:
        count = await job.func(db, now)
    except Exception:
        logger.exception("Job %s failed", name, extra={"job": name})
        raise
    logger.info(
        "Job %s finished",
        name,
        extra={
            "job": name,
            "count": count,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
    return count
