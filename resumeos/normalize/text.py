from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"[^\w\s]", re.ASCII)

STOPWORDS = frozenset(
    {
        "the",
        "a",
        "an",
        "and",
        "or",
        "to",
        "of",
        "in",
        "on",
        "for",
        "with",
        "our",
        "your",
        "you",
        "we",
        "is",
        "are",
        "be",
        "this",
        "that",
        "will",
        "can",
        "should",
        "may",
    }
)


def normalize_text(text: str | None) -> list[str]:
    """Lowercase, blank out punctuation, split and drop stopwords.

    No stemming is applied: variant forms (plurals etc.) have to be listed as
    separate synonyms in the skill graph.
    """
    cleaned = _NON_WORD_RE.sub(" ", (text or "").lower())
    return [token for token in cleaned.split() if token and token not in STOPWORDS]


def token_set(text: str | None) -> frozenset[str]:
    return frozenset(normalize_text(text))
