from __future__ import annotations

from typing import Any, Literal

from pydantic import ConfigDict, Field, field_validator

from careerhub.schemas.base import ApiModel
from careerhub.schemas.resume import ResumeRecord

CheckKind = Literal["pass", "warning", "fail", "info"]
RatingLabel = Literal["Excellent", "Good", "Needs Improvement"]
RatingColor = Literal["green", "yellow", "red"]
TemplateCategory = Literal["modern", "classic", "creative", "tech", "executive"]


class ATSCheck(ApiModel):
    model_config = ConfigDict(frozen=True)

    kind: CheckKind
    message: str


class ATSScoreResult(ApiModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    checks: list[ATSCheck]
    template_bonus: int = Field(ge=0, le=10)


class ScoreRating(ApiModel):
    model_config = ConfigDict(frozen=True)

    label: RatingLabel
    color: RatingColor


class ATSScoreRequest(ApiModel):
    resume: ResumeRecord = Field(default_factory=ResumeRecord)
    template_id: str = Field(default="", max_length=100)

    @field_validator("resume", mode="before")
    @classmethod
    def coerce_resume(cls, value: Any) -> ResumeRecord:
        return ResumeRecord.from_payload(value)

    @field_validator("template_id", mode="before")
    @classmethod
    def coerce_template_id(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


class ATSScoreResponse(ATSScoreResult):
    rating: ScoreRating


class ResumeTemplate(ApiModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    category: TemplateCategory
    ats_score: int = Field(ge=0, le=100)
    template_bonus: int = Field(ge=0, le=10)


class ResumeTemplateListResponse(ApiModel):
    templates: list[ResumeTemplate]
