"""Career memory: the rolling aggregate of confirmed tailoring sessions.

Only resumes the user confirmed (downloaded) are recorded, so every signal
here is inferred from whole accepted outputs rather than per-bullet feedback.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Any

from resumeos.core.store import StateStore
from resumeos.normalize.utils import first_word, round_half_up, word_count
from resumeos.schemas.memory import (
    AggregateRecord,
    CareerMemory,
    JobMeta,
    SessionRecord,
    SessionStatus,
)
from resumeos.schemas.resume import ResumeRecord

logger = logging.getLogger(__name__)

MEMORY_KEY = "resumeos_memory"
SUMMARY_REBUILD_EVERY = 5
SUMMARY_MIN_SESSIONS = 2
SUMMARY_SESSION_WINDOW = 10
TOP_KEYWORDS_LIMIT = 20
TOP_VERBS_LIMIT = 10
DEFAULT_AVG_BULLET_LEN = 18


def _load(raw: Any) -> CareerMemory:
    if not raw:
        return CareerMemory()
    return CareerMemory.model_validate(raw)


def _dump(memory: CareerMemory) -> dict[str, Any]:
    return memory.model_dump(mode="json")


def extract_bullet_verbs(resume: ResumeRecord) -> list[str]:
    # First word of each bullet as a stand-in for its action verb.
    verbs: list[str] = []
    for bullet in resume.bullets():
        word = first_word(bullet.text)
        if len(word) > 1 and word[0].isupper() and word not in verbs:
            verbs.append(word)
    return verbs


def calc_avg_bullet_len(resume: ResumeRecord) -> int:
    lengths = [word_count(bullet.text) for bullet in resume.bullets()]
    if not lengths:
        return DEFAULT_AVG_BULLET_LEN
    return round_half_up(sum(lengths) / len(lengths))


def top_by_frequency(values: Iterable[str], limit: int) -> list[str]:
    counts: Counter[str] = Counter()
    for value in values:
        counts[value] += 1
    # sorted() is stable, so equal counts keep first-seen order.
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [value for value, _ in ranked[:limit]]


def rebuild_aggregate(sessions: Sequence[SessionRecord], previous: AggregateRecord) -> AggregateRecord:
    target_roles: dict[str, int] = {}
    for session in sessions:
        if session.target_role:
            target_roles[session.target_role] = target_roles.get(session.target_role, 0) + 1

    if sessions:
        avg_bullet_len = round_half_up(
            sum(session.avg_bullet_len or DEFAULT_AVG_BULLET_LEN for session in sessions) / len(sessions)
        )
    else:
        avg_bullet_len = DEFAULT_AVG_BULLET_LEN

    return AggregateRecord(
        total_sessions=len(sessions),
        target_roles=target_roles,
        top_keywords=top_by_frequency(
            (keyword for session in sessions for keyword in session.keywords_used),
            TOP_KEYWORDS_LIMIT,
        ),
        top_bullet_verbs=top_by_frequency(
            (verb for session in sessions for verb in session.bullet_verbs),
            TOP_VERBS_LIMIT,
        ),
        avg_bullet_len=avg_bullet_len,
        # The summary comes from an external call and survives recomputation.
        preference_summary=previous.preference_summary,
        summary_built_at=previous.summary_built_at,
    )


def should_rebuild_summary(aggregate: AggregateRecord) -> bool:
    since_last_build = aggregate.total_sessions - (aggregate.summary_built_at or 0)
    return since_last_build >= SUMMARY_REBUILD_EVERY and aggregate.total_sessions >= SUMMARY_MIN_SESSIONS


def recent_sessions(memory: CareerMemory, limit: int = SUMMARY_SESSION_WINDOW) -> list[SessionRecord]:
    return list(memory.sessions[-limit:]) if limit > 0 else []


async def read_memory(store: StateStore) -> CareerMemory:
    stored = await store.get([MEMORY_KEY])
    return _load(stored.get(MEMORY_KEY))


async def clear_memory(store: StateStore) -> None:
    await store.remove([MEMORY_KEY])
    logger.info("career_memory_cleared")


async def record_session(
    store: StateStore,
    *,
    job: JobMeta,
    confirmed_resume: ResumeRecord,
    keywords_used: Sequence[str] | None = None,
    now: datetime | None = None,
) -> int:
    """Append a confirmed session and recompute the aggregate; returns the session id."""
    moment = now or datetime.now(timezone.utc)
    bullet_verbs = extract_bullet_verbs(confirmed_resume)
    avg_bullet_len = calc_avg_bullet_len(confirmed_resume)
    created: dict[str, int] = {}

    def mutate(raw: Any) -> dict[str, Any]:
        memory = _load(raw)
        session_id = int(moment.timestamp() * 1000)
        if memory.sessions:
            session_id = max(session_id, memory.sessions[-1].id + 1)
        memory.sessions.append(
            SessionRecord(
                id=session_id,
                date=moment.date().isoformat(),
                job=job,
                target_role=job.title,
                keywords_used=list(keywords_used or []),
                bullet_verbs=bullet_verbs,
                avg_bullet_len=avg_bullet_len,
                status=SessionStatus.TAILORED,
            )
        )
        memory.aggregate = rebuild_aggregate(memory.sessions, memory.aggregate)
        created["id"] = session_id
        return _dump(memory)

    await store.update(MEMORY_KEY, mutate)
    logger.info("career_session_recorded id=%s verbs=%s", created["id"], len(bullet_verbs))
    return created["id"]


async def update_session_status(store: StateStore, session_id: int, status: SessionStatus) -> bool:
    found: list[bool] = []

    def mutate(raw: Any) -> Any:
        memory = _load(raw)
        for session in memory.sessions:
            if session.id == session_id:
                session.status = status
                found.append(True)
                return _dump(memory)
        return raw

    await store.update(MEMORY_KEY, mutate)
    return bool(found)


async def update_preference_summary(store: StateStore, summary: str) -> AggregateRecord:
    """Store a rebuilt summary, stamping it with the session count at write time."""

    def mutate(raw: Any) -> dict[str, Any]:
        memory = _load(raw)
        memory.aggregate.preference_summary = summary
        memory.aggregate.summary_built_at = memory.aggregate.total_sessions
        return _dump(memory)

    updated = await store.update(MEMORY_KEY, mutate)
    return _load(updated).aggregate
