#!/usr/bin/env python3
"""
Run one scheduled job and exit. Meant to be called from cron.

Usage:
  python scripts/run_job.py <job-name>
  python scripts/run_job.py --list

Example crontab (server clock in Asia/Bangkok):
  0 9 * * *   cd /srv/billmate && python scripts/run_job.py payment-reminder-5-days
  0 18 * * *  cd /srv/billmate && python scripts/run_job.py payment-reminder-1-day
  0 10 * * *  cd /srv/billmate && python scripts/run_job.py overdue-notifications
  0 8 1 * *   cd /srv/billmate && python scripts/run_job.py monthly-bill-generation
  0 1 * * 0   cd /srv/billmate && python scripts/run_job.py notification-cleanup

Running the same job from two hosts at once is not guarded against;
schedule each job on one host only.
"""
import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(_root, ".env"))
sys.path.insert(0, _root)

from billmate.core.logging import setup_logging  # noqa: E402
from billmate.database import Database  # noqa: E402
from billmate.jobs import scheduler  # noqa: E402


async def _run(name: str) -> int:
    database = Database()
    database.init()
    try:
        async with database.session() as db:
            return await scheduler.run_job(db, name)
    finally:
        await database.shutdown()


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a Bill Mate scheduled job")
    parser.add_argument("job", nargs="?", choices=sorted(scheduler.JOBS), help="job name")
    parser.add_argument("--list", action="store_true", help="list jobs and their schedules")
    args = parser.parse_args()

    if args.list or not args.job:
        for job in scheduler.JOBS.values():
            print(f"{job.schedule:<12} {job.name:<26} {job.description}")
        return

    setup_logging()
    try:
        count = asyncio.run(_run(args.job))
    except Exception as e:
        print(f"FAILED: {args.job}: {e}")
        sys.exit(1)
    print(f"OK: {args.job} processed {count} record(s)")


if __name__ == "__main__":
    main()
