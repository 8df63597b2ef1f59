from __future__ import annotations

import logging

from resumeos.analytics.db import log_skill_gap_run
from resumeos.core.store import StateStore
from resumeos.features.skill_gap import analyze_skill_gap
from resumeos.schemas.skill_gap import SkillGapReport

from .settings_service import get_settings

logger = logging.getLogger(__name__)


def _log_run(report: SkillGapReport) -> None:
    try:
        log_skill_gap_run(
            hard_score=report.hard_skills.score,
            soft_score=report.soft_skills.score,
            other_score=report.other_skills.score,
            required_count=sum(category.total for category in report.categories()),
        )
    except Exception:  # pragma: no cover - analytics must not break the analysis
        logger.debug("skill_gap_logging_failed", exc_info=True)


async def run_skill_gap(store: StateStore, job_text: str, resume_text: str | None = None) -> SkillGapReport:
    """Analyze ``job_text`` against the given resume, or the stored base resume."""
    resume = resume_text
    if not (resume or "").strip():
        resume = (await get_settings(store)).base_resume_text
    report = analyze_skill_gap(job_text, resume)
    _log_run(report)
    return report
