"""Normalization of the model's token-optimized resume JSON.

The prompt asks for abbreviated keys (``n`` for name, ``x`` for experience,
...) to save output tokens, while older prompts and stored payloads use the
long names. Both spellings stay parseable: every field is looked up short key
first, then long key, then falls back to a typed default.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Literal

from resumeos.schemas.resume import Bullet, EducationEntry, ExperienceEntry, ResumeRecord

from .utils import strip_code_fence

logger = logging.getLogger(__name__)

_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")


class ParseError(ValueError):
    """Raised when the raw text holds no parseable JSON object."""


@dataclass(frozen=True, slots=True)
class FieldSpec:
    name: str
    short: str
    long: str
    kind: Literal["str", "list"] = "str"


RESUME_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("name", "n", "name"),
    FieldSpec("email", "e", "email"),
    FieldSpec("phone", "ph", "phone"),
    FieldSpec("location", "lo", "location"),
    FieldSpec("linkedin", "li", "linkedin"),
    FieldSpec("summary", "su", "summary"),
    FieldSpec("experience", "x", "experience", "list"),
    FieldSpec("skills", "sk", "skills", "list"),
    FieldSpec("education", "ed", "education", "list"),
)

EXPERIENCE_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("company", "c", "company"),
    FieldSpec("title", "t", "title"),
    FieldSpec("dates", "d", "dates"),
    FieldSpec("bullets", "b", "bullets", "list"),
)

EDUCATION_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("institution", "i", "institution"),
    FieldSpec("degree", "dg", "degree"),
    FieldSpec("dates", "d", "dates"),
)

BULLET_TEXT = FieldSpec("text", "tx", "text")
BULLET_FLAG_SHORT = "f"
BULLET_FLAG_LONG = "authentic"


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, dict)):
        return not value
    return False


def _as_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def lookup(data: dict[str, Any], spec: FieldSpec) -> Any:
    for key in (spec.short, spec.long):
        value = data.get(key)
        if not _is_empty(value):
            return value
    return None


def map_fields(data: Any, specs: tuple[FieldSpec, ...]) -> dict[str, Any]:
    source = data if isinstance(data, dict) else {}
    mapped: dict[str, Any] = {}
    for spec in specs:
        value = lookup(source, spec)
        mapped[spec.name] = _as_list(value) if spec.kind == "list" else _as_str(value)
    return mapped


def normalize_bullet(raw: Any) -> Bullet:
    if isinstance(raw, str):
        return Bullet(text=raw, authentic=True)
    if not isinstance(raw, dict):
        return Bullet()

    text = _as_str(lookup(raw, BULLET_TEXT))
    # The text key picks the flag convention: short bullets carry "f",
    # long-form bullets carry "authentic".
    if BULLET_TEXT.short in raw:
        authentic = not bool(raw.get(BULLET_FLAG_SHORT))
    else:
        # Only an explicit false marks a long-form bullet as not authentic.
        authentic = raw.get(BULLET_FLAG_LONG) is not False
    return Bullet(text=text, authentic=authentic)


def normalize_experience(raw: Any) -> ExperienceEntry:
    fields = map_fields(raw, EXPERIENCE_FIELDS)
    fields["bullets"] = [normalize_bullet(item) for item in fields["bullets"]]
    return ExperienceEntry(**fields)


def normalize_education(raw: Any) -> EducationEntry:
    return EducationEntry(**map_fields(raw, EDUCATION_FIELDS))


def _normalize_skills(values: list[Any]) -> list[str]:
    skills: list[str] = []
    for value in values:
        if isinstance(value, str):
            skills.append(value)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            skills.append(str(value))
    return skills


def resume_from_payload(data: Any) -> ResumeRecord:
    """Map an already parsed payload (either key style) onto a ResumeRecord."""
    fields = map_fields(data, RESUME_FIELDS)
    fields["experience"] = [normalize_experience(item) for item in fields["experience"]]
    fields["education"] = [normalize_education(item) for item in fields["education"]]
    fields["skills"] = _normalize_skills(fields["skills"])
    return ResumeRecord(**fields)


def extract_json_object(raw_text: str) -> dict[str, Any]:
    text = strip_code_fence(raw_text or "")

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ParseError("No JSON object found in AI response")
    text = text[start : end + 1]

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        repaired = _TRAILING_COMMA_RE.sub(r"\1", text)
        try:
            parsed = json.loads(repaired)
        except json.JSONDecodeError as exc:
            raise ParseError(f"AI response is not valid JSON: {exc.msg}") from exc
        logger.info("ai_response_repaired trailing_commas=1")

    if not isinstance(parsed, dict):
        raise ParseError("AI response JSON is not an object")
    return parsed


def normalize_ai_response(raw_text: str) -> ResumeRecord:
    return resume_from_payload(extract_json_object(raw_text))
