from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from resumeos.normalize.text import normalize_text

Phrase = tuple[str, ...]
Vocabulary = Mapping[str, tuple[Phrase, ...]]

CATEGORIES: tuple[str, ...] = ("hard", "soft", "other")


class SkillGraph:
    """Read-only category -> skill -> synonym phrases mapping.

    Synonyms are stored as tuples of normalized words so that detection can
    compare them directly against a token set.
    """

    def __init__(self, raw: Mapping[str, Mapping[str, list[str]]]) -> None:
        graph: dict[str, Vocabulary] = {}
        for category, skills in raw.items():
            if not isinstance(skills, Mapping):
                raise ValueError(f"Skill graph category '{category}' must be a mapping.")
            vocabulary: dict[str, tuple[Phrase, ...]] = {}
            for skill, synonyms in skills.items():
                vocabulary[str(skill)] = self._normalize_synonyms(skill, synonyms)
            graph[str(category)] = MappingProxyType(vocabulary)
        self._graph = MappingProxyType(graph)

    @staticmethod
    def _normalize_synonyms(skill: str, synonyms: object) -> tuple[Phrase, ...]:
        if not isinstance(synonyms, list):
            raise ValueError(f"Synonyms for skill '{skill}' must be a list.")
        phrases: list[Phrase] = []
        for synonym in synonyms:
            phrase = tuple(normalize_text(str(synonym)))
            if phrase and phrase not in phrases:
                phrases.append(phrase)
        return tuple(phrases)

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self._graph)

    def vocabulary(self, category: str) -> Vocabulary:
        return self._graph.get(category, MappingProxyType({}))

    def skills(self, category: str) -> tuple[str, ...]:
        return tuple(self.vocabulary(category))

    def __contains__(self, category: object) -> bool:
        return category in self._graph


def load_skill_graph(path: str | Path | None = None) -> SkillGraph:
    graph_path = Path(path) if path else Path(__file__).with_name("skill_graph.json")
    with graph_path.open("r", encoding="utf-8") as handle:
        raw = json.load(handle)
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid skill graph '{graph_path}': expected a top-level mapping.")
    return SkillGraph(raw)
