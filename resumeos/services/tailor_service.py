from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Sequence

from resumeos.ai.errors import TailorError, classify_failure, no_key_error, no_resume_error
from resumeos.ai.factory import get_ai_client
from resumeos.ai.prompts import build_summary_prompt, build_system_prompt, build_user_prompt
from resumeos.ai.types import AIClient, AIClientFactory
from resumeos.analytics.db import log_ai_run
from resumeos.core.config import settings
from resumeos.core.store import StateStore
from resumeos.features.skill_gap import analyze_skill_gap
from resumeos.normalize.ai_response import ParseError, normalize_ai_response
from resumeos.schemas.memory import SessionRecord
from resumeos.schemas.resume import ResumeRecord

from .memory_service import read_memory
from .settings_service import get_settings

logger = logging.getLogger(__name__)

TAILOR_MAX_OUTPUT_TOKENS = 1500
TAILOR_TEMPERATURE = 0.3
SUMMARY_MAX_OUTPUT_TOKENS = 200
SUMMARY_TEMPERATURE = 0.1


def _log_ai_run(
    *,
    run_id: str,
    kind: str,
    model: str,
    status: str,
    started: float,
    error_code: str | None = None,
) -> None:
    try:
        log_ai_run(
            run_id=run_id,
            kind=kind,
            model=model,
            status=status,
            error_code=error_code,
            latency_ms=int((time.perf_counter() - started) * 1000),
        )
    except Exception:  # pragma: no cover - analytics must not break AI responses
        logger.debug("ai_run_logging_failed", exc_info=True)


async def tailor_resume(
    store: StateStore,
    job_description: str,
    *,
    client_factory: AIClientFactory = get_ai_client,
) -> ResumeRecord:
    """Tailor the stored base resume toward ``job_description``.

    Raises TailorError for missing local state and for classified collaborator
    failures, and ParseError when the response holds no usable JSON object.
    """
    user_settings = await get_settings(store)
    if not user_settings.api_key:
        raise no_key_error()
    if not user_settings.base_resume_text:
        raise no_resume_error()

    memory = await read_memory(store)
    gap = analyze_skill_gap(job_description, user_settings.base_resume_text)
    missing = gap.missing_skills()
    client = client_factory(user_settings.api_key)
    system_prompt = build_system_prompt(memory.aggregate.preference_summary)
    user_prompt = build_user_prompt(
        user_settings.base_resume_text,
        job_description,
        jd_keywords=gap.matched_skills() + missing,
        missing_keywords=missing,
        max_job_chars=settings.job_text_max_chars,
    )

    run_id = uuid.uuid4().hex
    started = time.perf_counter()
    try:
        raw_text = await client.generate(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            max_output_tokens=TAILOR_MAX_OUTPUT_TOKENS,
            temperature=TAILOR_TEMPERATURE,
        )
    except Exception as exc:
        error = classify_failure(exc)
        logger.warning("tailor_failed code=%s model=%s", error.code.value, client.model)
        _log_ai_run(
            run_id=run_id,
            kind="tailor",
            model=client.model,
            status="error",
            started=started,
            error_code=error.code.value,
        )
        raise TailorError(error) from exc

    try:
        resume = normalize_ai_response(raw_text)
    except ParseError:
        logger.warning("tailor_parse_failed model=%s response_len=%s", client.model, len(raw_text))
        _log_ai_run(
            run_id=run_id,
            kind="tailor",
            model=client.model,
            status="invalid_response",
            started=started,
            error_code="PARSE_ERROR",
        )
        raise

    _log_ai_run(run_id=run_id, kind="tailor", model=client.model, status="success", started=started)
    return resume


async def rebuild_preference_summary(client: AIClient, sessions: Sequence[SessionRecord]) -> str:
    run_id = uuid.uuid4().hex
    started = time.perf_counter()
    try:
        summary = await client.generate(
            system_prompt=None,
            user_prompt=build_summary_prompt(sessions),
            max_output_tokens=SUMMARY_MAX_OUTPUT_TOKENS,
            temperature=SUMMARY_TEMPERATURE,
        )
    except Exception as exc:
        _log_ai_run(
            run_id=run_id,
            kind="summary",
            model=client.model,
            status="error",
            started=started,
            error_code=classify_failure(exc).code.value,
        )
        raise
    _log_ai_run(run_id=run_id, kind="summary", model=client.model, status="success", started=started)
    return summary.strip()
