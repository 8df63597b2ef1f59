from __future__ import annotations

from pydantic import BaseModel, Field


class Bullet(BaseModel):
    text: str = ""
    authentic: bool = True


class ExperienceEntry(BaseModel):
    company: str = ""
    title: str = ""
    dates: str = ""
    bullets: list[Bullet] = Field(default_factory=list)


class EducationEntry(BaseModel):
    institution: str = ""
    degree: str = ""
    dates: str = ""


class ResumeRecord(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    summary: str = ""
    experience: list[ExperienceEntry] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)

    def bullets(self) -> list[Bullet]:
        return [bullet for entry in self.experience for bullet in entry.bullets]

    def flagged_bullet_count(self) -> int:
        return sum(1 for bullet in self.bullets() if not bullet.authentic)
