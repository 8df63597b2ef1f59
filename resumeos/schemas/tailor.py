from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .memory import CareerMemory, JobMeta, SessionStatus
from .resume import ResumeRecord


class TailorRequest(BaseModel):
    job_description: str = Field(min_length=1)


class TailorResponse(BaseModel):
    resume: ResumeRecord
    flagged_bullets: int = 0


class RecordSessionRequest(BaseModel):
    job: JobMeta = Field(default_factory=JobMeta)
    confirmed_resume: dict[str, Any] = Field(default_factory=dict)
    keywords_used: list[str] | None = None
    job_description: str | None = None


class RecordSessionResponse(BaseModel):
    session_id: int
    summary_rebuild_scheduled: bool = False


class UpdateStatusRequest(BaseModel):
    status: SessionStatus


class MemoryResponse(BaseModel):
    memory: CareerMemory
    should_rebuild_summary: bool = False
