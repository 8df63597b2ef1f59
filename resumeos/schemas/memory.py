from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class SessionStatus(str, Enum):
    TAILORED = "tailored"
    APPLIED = "applied"
    INTERVIEW = "interview"
    OFFER = "offer"
    REJECTED = "rejected"


class JobMeta(BaseModel):
    title: str = ""
    company: str = ""
    source: str = "manual"
    url: str = ""


class SessionRecord(BaseModel):
    id: int
    date: str
    job: JobMeta = Field(default_factory=JobMeta)
    target_role: str = ""
    keywords_used: list[str] = Field(default_factory=list)
    bullet_verbs: list[str] = Field(default_factory=list)
    avg_bullet_len: int = 0
    status: SessionStatus = SessionStatus.TAILORED


class AggregateRecord(BaseModel):
    total_sessions: int = 0
    target_roles: dict[str, int] = Field(default_factory=dict)
    top_keywords: list[str] = Field(default_factory=list)
    top_bullet_verbs: list[str] = Field(default_factory=list)
    avg_bullet_len: int = 0
    preference_summary: str | None = None
    summary_built_at: int = 0


class CareerMemory(BaseModel):
    sessions: list[SessionRecord] = Field(default_factory=list)
    aggregate: AggregateRecord = Field(default_factory=AggregateRecord)
