from __future__ import annotations

import json
from collections.abc import Sequence

from resumeos.normalize.utils import truncate
from resumeos.schemas.memory import SessionRecord

DEFAULT_JOB_TEXT_MAX_CHARS = 6000

_SYSTEM_RULES = """You are ResumeOS, an expert resume tailoring assistant. Rewrite the user's base resume to better match a specific job description.

CORE RULES:
1. NEVER invent experience, skills, or achievements not grounded in the base resume.
   If the job asks for a skill the candidate doesn't have, do NOT add it.
2. Keep bullets action-verb first (Built, Led, Reduced, Designed, Shipped, etc.).
3. Match the job's keywords naturally. No keyword stuffing.
4. Keep bullet length consistent with the base resume's style.
5. Output ONLY one valid JSON object. No markdown fences, no explanation, no preamble.
6. Use EXACTLY this compact schema with short keys. No extra fields, no missing fields:

{"n":"name","e":"email","ph":"phone","lo":"location","li":"linkedin url","su":"summary, 2-3 keyword-optimised sentences",
 "x":[{"c":"company","t":"title","d":"dates","b":["bullet text", {"tx":"bullet text","f":1}]}],
 "sk":["skill"],
 "ed":[{"i":"institution","dg":"degree","d":"dates"}]}

Bullets: write a plain string when the bullet is fully supported by the base resume.
Write {"tx": "...", "f": 1} when you:
- added a keyword, technology, or achievement not mentioned in the base resume
- made a quantitative claim stronger than the base resume states
- invented context the base resume doesn't support
The user reviews flagged bullets before sending. Be honest."""


def build_system_prompt(preference_summary: str | None = None) -> str:
    system = _SYSTEM_RULES
    summary = (preference_summary or "").strip()
    if summary:
        system += f"\n\nCAREER MEMORY (match the user's confirmed style):\n{summary}"
    return system


def _keywords_section(jd_keywords: Sequence[str]) -> str:
    if not jd_keywords:
        return ""
    phrases = [keyword for keyword in jd_keywords if " " in keyword]
    tokens = [keyword for keyword in jd_keywords if " " not in keyword]
    lines = [
        "KEY SKILLS AND CONCEPTS FROM THIS JOB (weave into bullets and summary naturally, "
        "only where the candidate's experience supports it):"
    ]
    if phrases:
        lines.append(f"  Skill phrases: {', '.join(phrases)}")
    if tokens:
        lines.append(f"  Technologies/tools: {', '.join(tokens)}")
    return "\n".join(lines) + "\n\n"


def _missing_section(missing_keywords: Sequence[str]) -> str:
    if not missing_keywords:
        return ""
    return (
        "SKILLS IN THE JD NOT DETECTED IN THE BASE RESUME:\n"
        f"{', '.join(missing_keywords)}\n"
        "IMPORTANT: Do NOT add these unless the base resume contains clear evidence the candidate "
        "has this skill. If there is adjacent experience (e.g. resume has \"PyTorch\" and JD asks "
        "for \"distributed training\"), you may reframe an existing bullet to highlight that "
        "connection, but write it as {\"tx\": ..., \"f\": 1} so the user can verify.\n\n"
    )


def build_user_prompt(
    base_resume: str,
    job_description: str,
    *,
    jd_keywords: Sequence[str] = (),
    missing_keywords: Sequence[str] = (),
    max_job_chars: int = DEFAULT_JOB_TEXT_MAX_CHARS,
) -> str:
    job_text = truncate((job_description or "").strip(), max_job_chars)
    return (
        "BASE RESUME (source of truth, only work from what's here):\n"
        f"{(base_resume or '').strip()}\n\n"
        "JOB DESCRIPTION (tailor the resume toward this):\n"
        f"{job_text}\n\n"
        f"{_keywords_section(jd_keywords)}"
        f"{_missing_section(missing_keywords)}"
        "Now output the tailored resume as a single JSON object using the short keys. "
        "Flag any bullet you stretched or added. No markdown. No explanation. JSON only."
    )


def build_summary_prompt(sessions: Sequence[SessionRecord]) -> str:
    session_data = [
        {
            "role": session.target_role,
            "keywords": session.keywords_used,
            "verbs": session.bullet_verbs,
            "avg_len": session.avg_bullet_len,
        }
        for session in sessions
    ]
    return (
        "Based on these resume tailoring sessions, write a 2-3 sentence preference summary "
        "(under 150 tokens) in the exact format shown. Focus on: target roles, bullet verb style, "
        "keyword patterns, bullet length preference.\n\n"
        f"Sessions: {json.dumps(session_data, ensure_ascii=False)}\n\n"
        'Output format: "User targets [roles]. Prefers [bullet style] bullets averaging [N] words. '
        'Recurring keywords: [top keywords]."\n\n'
        "Output ONLY the summary sentence. No JSON. No explanation."
    )
