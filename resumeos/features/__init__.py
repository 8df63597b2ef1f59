from .skill_detector import detect_skills
from .skill_gap import (
    DetectionResult,
    analyze_skill_gap,
    calc_score,
    detect_category,
    format_category,
    impact_label,
)

__all__ = [
    "detect_skills",
    "DetectionResult",
    "analyze_skill_gap",
    "calc_score",
    "detect_category",
    "format_category",
    "impact_label",
]
