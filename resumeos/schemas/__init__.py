from .memory import AggregateRecord, CareerMemory, JobMeta, SessionRecord, SessionStatus
from .resume import Bullet, EducationEntry, ExperienceEntry, ResumeRecord
from .settings import UserSettings
from .skill_gap import CategoryReport, SkillGapReport, SkillGapRequest, SkillStatus

__all__ = [
    "AggregateRecord",
    "CareerMemory",
    "JobMeta",
    "SessionRecord",
    "SessionStatus",
    "Bullet",
    "EducationEntry",
    "ExperienceEntry",
    "ResumeRecord",
    "UserSettings",
    "CategoryReport",
    "SkillGapReport",
    "SkillGapRequest",
    "SkillStatus",
]
