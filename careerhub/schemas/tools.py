from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from careerhub.schemas.ats import ATSScoreResult
from careerhub.schemas.base import ApiModel
from careerhub.schemas.resume import ResumeRecord

ResultSource = Literal["ai", "fallback"]
SkillImportance = Literal["critical", "important", "nice-to-have"]
LinkedInSectionStatus = Literal["good", "needs-work", "missing"]


class ToolResult(ApiModel):
    source: ResultSource
    generated_at: datetime


class KeywordScanRequest(ApiModel):
    resume_text: str = Field(min_length=1, max_length=50000)
    job_description: str = Field(min_length=1, max_length=50000)


class KeywordScanResponse(ToolResult):
    match_score: int = Field(ge=0, le=100)
    found_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class SkillsGapRequest(ApiModel):
    resume_skills: str = Field(min_length=1, max_length=20000)
    job_description: str = Field(min_length=1, max_length=50000)
    target_role: str | None = Field(default=None, max_length=200)


class LearningResource(ApiModel):
    title: str
    platform: str = ""
    url: str = ""
    type: str = ""
    duration: str = ""


class SkillGap(ApiModel):
    skill: str
    importance: SkillImportance = "important"
    current_level: int = Field(default=0, ge=0, le=100)
    required_level: int = Field(default=0, ge=0, le=100)
    resources: list[LearningResource] = Field(default_factory=list)


class LearningPhase(ApiModel):
    phase: str
    duration: str = ""
    skills: list[str] = Field(default_factory=list)
    description: str = ""


class SkillsGapResponse(ToolResult):
    match_score: int = Field(ge=0, le=100)
    matched_skills: list[str] = Field(default_factory=list)
    gap_analysis: list[SkillGap] = Field(default_factory=list)
    learning_path: list[LearningPhase] = Field(default_factory=list)
    career_tips: list[str] = Field(default_factory=list)


class LinkedInOptimizeRequest(ApiModel):
    linkedin_profile: str = Field(min_length=1, max_length=50000)
    resume_content: str = Field(default="", max_length=50000)


class LinkedInSection(ApiModel):
    name: str
    score: int = Field(ge=0, le=100)
    status: LinkedInSectionStatus = "needs-work"
    suggestions: list[str] = Field(default_factory=list)


class KeywordMatch(ApiModel):
    matched: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)


class LinkedInOptimizeResponse(ToolResult):
    overall_score: int = Field(ge=0, le=100)
    sections: list[LinkedInSection] = Field(default_factory=list)
    keyword_match: KeywordMatch = Field(default_factory=KeywordMatch)
    general_tips: list[str] = Field(default_factory=list)


class ResumeComparisonRequest(ApiModel):
    resume1: str = Field(min_length=1, max_length=50000)
    resume2: str = Field(min_length=1, max_length=50000)
    job_description: str | None = Field(default=None, max_length=50000)


class ResumeComparisonResponse(ToolResult):
    resume1_score: int = Field(ge=0, le=100)
    resume2_score: int = Field(ge=0, le=100)
    resume1_strengths: list[str] = Field(default_factory=list)
    resume2_strengths: list[str] = Field(default_factory=list)
    resume1_weaknesses: list[str] = Field(default_factory=list)
    resume2_weaknesses: list[str] = Field(default_factory=list)
    recommendation: str = ""


class ResumeOptimizeRequest(ApiModel):
    resume: ResumeRecord
    template_id: str = Field(default="", max_length=100)


class ResumeOptimizeResponse(ToolResult):
    optimized_resume: ResumeRecord
    suggestions: list[str] = Field(default_factory=list)
    score_before: ATSScoreResult
    score_after: ATSScoreResult
