from __future__ import annotations

import math
import re

_WS_RE = re.compile(r"\s+")
_FENCE_OPEN_RE = re.compile(r"^```[A-Za-z0-9_+-]*\s*", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\s*```$")


def round_half_up(value: float) -> int:
    # round() uses banker's rounding; scores and averages round .5 upwards.
    return int(math.floor(value + 0.5))


def normalize_line(line: str) -> str:
    return _WS_RE.sub(" ", line).strip()


def words(text: str | None) -> list[str]:
    return (text or "").split()


def first_word(text: str | None) -> str:
    parts = words(text)
    return parts[0] if parts else ""


def word_count(text: str | None) -> int:
    # An empty bullet still counts as one word.
    return max(1, len(words(text)))


def strip_code_fence(text: str) -> str:
    stripped = _FENCE_OPEN_RE.sub("", text.strip())
    return _FENCE_CLOSE_RE.sub("", stripped)


def truncate(text: str | None, max_chars: int) -> str:
    value = text or ""
    if max_chars <= 0 or len(value) <= max_chars:
        return value
    return value[:max_chars]
