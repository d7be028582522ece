"""Scheduled job endpoints (admin)"""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from billmate.api import deps
from billmate.jobs import scheduler
from billmate.models.user import User
from billmate.schemas.cron import JobInfo, JobRunRequest, JobRunResult
from billmate.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("/jobs", response_model=SuccessResponse[list[JobInfo]])
async def list_jobs(current_user: User = Depends(deps.require_admin)) -> Any:
    """Registered jobs with their schedule and next run time."""
    return SuccessResponse(data=[JobInfo(**job) for job in scheduler.list_jobs()])


@router.post("/run", response_model=SuccessResponse[JobRunResult])
async def run_job(
    body: JobRunRequest,
    current_user: User = Depends(deps.require_admin),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    processed = await scheduler.run_job(db, body.job)
    return SuccessResponse(
        data=JobRunResult(job=body.job, processed=processed),
        message=f"รันงาน {body.job} สำเร็จ",
    )
