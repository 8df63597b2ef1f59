from __future__ import annotations

from dataclasses import dataclass, field

from resumeos.normalize.text import token_set
from resumeos.normalize.utils import round_half_up
from resumeos.schemas.skill_gap import CategoryReport, SkillGapReport, SkillStatus
from resumeos.taxonomy import SkillGraph, Vocabulary, get_default_skill_graph

from .skill_detector import detect_skills

_IMPACT_LABELS = {"hard": "High Impact", "soft": "Medium Impact"}
_DEFAULT_IMPACT = "Low Impact"
_TITLES = {"hard": "Hard Skills", "soft": "Soft Skills"}
_DEFAULT_TITLE = "Other Skills"


@dataclass(frozen=True, slots=True)
class DetectionResult:
    matched: frozenset[str] = field(default_factory=frozenset)
    missing: frozenset[str] = field(default_factory=frozenset)
    score: int = 0

    @property
    def required(self) -> frozenset[str]:
        return self.matched | self.missing


def calc_score(matched: int, required: int) -> int:
    # An empty requirement set scores 0, not a perfect 100.
    if required <= 0:
        return 0
    return round_half_up(100 * matched / required)


def impact_label(category: str) -> str:
    return _IMPACT_LABELS.get(category, _DEFAULT_IMPACT)


def detect_category(
    jd_tokens: frozenset[str],
    resume_tokens: frozenset[str],
    vocabulary: Vocabulary,
) -> DetectionResult:
    required = detect_skills(jd_tokens, vocabulary)
    possessed = detect_skills(resume_tokens, vocabulary)
    matched = frozenset(required & possessed)
    missing = frozenset(required - possessed)
    return DetectionResult(
        matched=matched,
        missing=missing,
        score=calc_score(len(matched), len(required)),
    )


def format_category(category: str, result: DetectionResult) -> CategoryReport:
    skills = [SkillStatus(name=name, status="matched") for name in result.matched]
    skills.extend(SkillStatus(name=name, status="missing") for name in result.missing)
    skills.sort(key=lambda skill: (skill.name.casefold(), skill.name))
    return CategoryReport(
        category=category,
        title=_TITLES.get(category, _DEFAULT_TITLE),
        impact=impact_label(category),
        score=result.score,
        total=len(skills),
        missing_count=len(result.missing),
        skills=skills,
    )


def analyze_skill_gap(
    job_text: str | None,
    resume_text: str | None,
    graph: SkillGraph | None = None,
) -> SkillGapReport:
    skill_graph = graph or get_default_skill_graph()
    jd_tokens = token_set(job_text)
    resume_tokens = token_set(resume_text)

    reports: dict[str, CategoryReport] = {}
    for category in ("hard", "soft", "other"):
        result = detect_category(jd_tokens, resume_tokens, skill_graph.vocabulary(category))
        reports[category] = format_category(category, result)

    return SkillGapReport(
        hard_skills=reports["hard"],
        soft_skills=reports["soft"],
        other_skills=reports["other"],
    )
