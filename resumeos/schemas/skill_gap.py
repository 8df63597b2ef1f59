from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class SkillStatus(BaseModel):
    name: str
    status: Literal["matched", "missing"]


class CategoryReport(BaseModel):
    category: str
    title: str
    impact: str
    score: int = Field(ge=0, le=100)
    total: int = 0
    missing_count: int = 0
    skills: list[SkillStatus] = Field(default_factory=list)

    def names(self, status: str) -> list[str]:
        return [skill.name for skill in self.skills if skill.status == status]


class SkillGapReport(BaseModel):
    hard_skills: CategoryReport
    soft_skills: CategoryReport
    other_skills: CategoryReport

    def categories(self) -> list[CategoryReport]:
        return [self.hard_skills, self.soft_skills, self.other_skills]

    def matched_skills(self) -> list[str]:
        return [name for report in self.categories() for name in report.names("matched")]

    def missing_skills(self) -> list[str]:
        return [name for report in self.categories() for name in report.names("missing")]


class SkillGapRequest(BaseModel):
    job_text: str = Field(min_length=1)
    resume_text: str | None = None
