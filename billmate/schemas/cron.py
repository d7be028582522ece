from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class JobRunRequest(BaseModel):
    job: str


class JobInfo(BaseModel):
    name: str
    schedule: str
    description: str
    next_run: Optional[datetime] = None


class JobRunResult(BaseModel):
    job: str
    processed: int
