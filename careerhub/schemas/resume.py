from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from careerhub.schemas.base import ApiModel

SectionName = Literal["experience", "education", "skills", "summary"]


def _coerce_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    # 0, False and NaN count as blank fields.
    if isinstance(value, (int, float)) and (not value or (isinstance(value, float) and math.isnan(value))):
        return ""
    return str(value)


def _coerce_entries(value: Any) -> list[Any]:
    """Keep only mapping-shaped entries; anything else is treated as absent."""
    if not isinstance(value, (list, tuple)):
        return []
    entries: list[Any] = []
    for item in value:
        if isinstance(item, BaseModel):
            entries.append(item.model_dump())
        elif isinstance(item, Mapping):
            entries.append(dict(item))
    return entries


class _ResumeModel(ApiModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class PersonalInfo(_ResumeModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    summary: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _coerce_text(value)


class ExperienceEntry(_ResumeModel):
    company: str = ""
    position: str = ""
    duration: str = ""
    description: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _coerce_text(value)

    @property
    def is_complete(self) -> bool:
        return bool(self.company and self.position and self.description)


class EducationEntry(_ResumeModel):
    institution: str = ""
    degree: str = ""
    year: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _coerce_text(value)

    @property
    def is_complete(self) -> bool:
        return bool(self.institution and self.degree)


class ResumeRecord(_ResumeModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    section_order: list[SectionName] | None = None

    @field_validator("personal_info", mode="before")
    @classmethod
    def coerce_personal_info(cls, value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value.model_dump()
        if isinstance(value, Mapping):
            return value
        return {}

    @field_validator("experience", "education", mode="before")
    @classmethod
    def coerce_entries(cls, value: Any) -> list[Any]:
        return _coerce_entries(value)

    @field_validator("skills", mode="before")
    @classmethod
    def coerce_skills(cls, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple)):
            return []
        return [_coerce_text(item) for item in value]

    @field_validator("section_order", mode="before")
    @classmethod
    def coerce_section_order(cls, value: Any) -> list[str] | None:
        if not isinstance(value, (list, tuple)):
            return None
        allowed = {"experience", "education", "skills", "summary"}
        return [item for item in value if isinstance(item, str) and item in allowed]

    @classmethod
    def from_payload(cls, payload: Any) -> "ResumeRecord":
        """Build a record from loosely shaped editor data; never raises for bad shapes."""
        if isinstance(payload, cls):
            return payload
        if isinstance(payload, BaseModel):
            payload = payload.model_dump()
        if not isinstance(payload, Mapping):
            return cls()
        return cls.model_validate(dict(payload))

    def as_prompt_text(self) -> str:
        info = self.personal_info
        experience = "\n".join(
            f"- {exp.position} at {exp.company} ({exp.duration})\n  {exp.description}"
            for exp in self.experience
        )
        education = "\n".join(
            f"- {edu.degree} from {edu.institution} ({edu.year})" for edu in self.education
        )
        return (
            f"Personal Info: {info.full_name}, {info.email}\n"
            f"Summary: {info.summary}\n\n"
            f"Experience:\n{experience}\n\n"
            f"Education:\n{education}\n\n"
            f"Skills: {', '.join(self.skills)}"
        ).strip()
