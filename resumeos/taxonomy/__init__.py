from functools import lru_cache

from .skill_graph import CATEGORIES, SkillGraph, Vocabulary, load_skill_graph


@lru_cache(maxsize=1)
def get_default_skill_graph() -> SkillGraph:
    return load_skill_graph()


__all__ = ["CATEGORIES", "SkillGraph", "Vocabulary", "load_skill_graph", "get_default_skill_graph"]
