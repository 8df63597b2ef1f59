from __future__ import annotations

from collections.abc import Iterable

from resumeos.taxonomy import Vocabulary


def detect_skills(tokens: Iterable[str], vocabulary: Vocabulary) -> set[str]:
    """Return the skills whose synonym words all occur in ``tokens``.

    Matching is set containment over words, not phrase adjacency: the words
    of "machine learning" may appear in any order and in unrelated sentences.
    """
    token_set = tokens if isinstance(tokens, (set, frozenset)) else set(tokens)
    detected: set[str] = set()
    for skill, synonyms in vocabulary.items():
        for phrase in synonyms:
            if phrase and all(word in token_set for word in phrase):
                detected.add(skill)
                break
    return detected
