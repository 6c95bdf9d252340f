"""ATS compatibility rubric for structured resumes.

Five content categories are scored independently and the chosen template
adds a fixed bonus. The weights and thresholds below are product-tuned
business rules and are kept exactly as shipped.
"""

from __future__ import annotations

from typing import Any

from careerhub.schemas.ats import ATSCheck, ATSScoreResult, ScoreRating
from careerhub.schemas.resume import ResumeRecord

MAX_SCORE = 100

CONTACT_POINTS = 20
SUMMARY_POINTS = 15
SUMMARY_MIN_CHARS = 50
EXPERIENCE_FULL_POINTS = 25
EXPERIENCE_PARTIAL_POINTS = 15
EXPERIENCE_FULL_ENTRIES = 2
EDUCATION_POINTS = 15
SKILLS_FULL_POINTS = 15
SKILLS_PARTIAL_POINTS = 10
SKILLS_FULL_COUNT = 5
SKILLS_PARTIAL_COUNT = 3

TEMPLATE_BONUSES: dict[str, int] = {
    "classic-minimal": 10,
    "tech-specialist": 9,
    "modern-professional": 8,
}
DEFAULT_TEMPLATE_BONUS = 6

EXCELLENT_THRESHOLD = 80
GOOD_THRESHOLD = 60


def template_bonus(template_id: Any) -> int:
    if not isinstance(template_id, str):
        return DEFAULT_TEMPLATE_BONUS
    return TEMPLATE_BONUSES.get(template_id, DEFAULT_TEMPLATE_BONUS)


def _score_contact(record: ResumeRecord) -> tuple[int, ATSCheck]:
    info = record.personal_info
    if info.full_name and info.email and info.phone:
        return CONTACT_POINTS, ATSCheck(kind="pass", message="Complete contact information")
    return 0, ATSCheck(kind="fail", message="Missing contact information")


def _score_summary(record: ResumeRecord) -> tuple[int, ATSCheck]:
    summary = record.personal_info.summary
    if summary and len(summary) > SUMMARY_MIN_CHARS:
        return SUMMARY_POINTS, ATSCheck(kind="pass", message="Professional summary present")
    return 0, ATSCheck(kind="warning", message="Add a professional summary (50+ characters)")


def _score_experience(record: ResumeRecord) -> tuple[int, ATSCheck]:
    valid = [exp for exp in record.experience if exp.is_complete]
    if len(valid) >= EXPERIENCE_FULL_ENTRIES:
        return EXPERIENCE_FULL_POINTS, ATSCheck(kind="pass", message="Sufficient work experience")
    if len(valid) == 1:
        return EXPERIENCE_PARTIAL_POINTS, ATSCheck(kind="warning", message="Add more work experience entries")
    return 0, ATSCheck(kind="fail", message="Missing work experience")


def _score_education(record: ResumeRecord) -> tuple[int, ATSCheck]:
    if any(edu.is_complete for edu in record.education):
        return EDUCATION_POINTS, ATSCheck(kind="pass", message="Education information complete")
    return 0, ATSCheck(kind="fail", message="Missing education information")


def _score_skills(record: ResumeRecord) -> tuple[int, ATSCheck]:
    skills = record.skills
    # An editor's placeholder list starts with an empty entry.
    has_first = bool(skills) and bool(skills[0])
    if len(skills) >= SKILLS_FULL_COUNT and has_first:
        return SKILLS_FULL_POINTS, ATSCheck(kind="pass", message="Relevant skills listed")
    if len(skills) >= SKILLS_PARTIAL_COUNT and has_first:
        return SKILLS_PARTIAL_POINTS, ATSCheck(kind="warning", message="Add more relevant skills (5+ recommended)")
    return 0, ATSCheck(kind="fail", message="Missing skills section")


_CATEGORY_SCORERS = (
    _score_contact,
    _score_summary,
    _score_experience,
    _score_education,
    _score_skills,
)


def calculate_ats_score(record: ResumeRecord | Any, template_id: Any = "") -> ATSScoreResult:
    """Score a resume for ATS compatibility.

    Accepts a ``ResumeRecord`` or any loosely shaped mapping; missing or
    malformed fields only lower the score. The result always holds six
    checks: contact, summary, experience, education, skills and the
    informational template line.
    """
    resume = ResumeRecord.from_payload(record)

    score = 0
    checks: list[ATSCheck] = []
    for scorer in _CATEGORY_SCORERS:
        points, check = scorer(resume)
        score += points
        checks.append(check)

    bonus = template_bonus(template_id)
    score += bonus
    checks.append(ATSCheck(kind="info", message=f"Template ATS Score: {bonus}/10"))

    return ATSScoreResult(score=min(score, MAX_SCORE), checks=checks, template_bonus=bonus)


def score_rating(score: int) -> ScoreRating:
    if score >= EXCELLENT_THRESHOLD:
        return ScoreRating(label="Excellent", color="green")
    if score >= GOOD_THRESHOLD:
        return ScoreRating(label="Good", color="yellow")
    return ScoreRating(label="Needs Improvement", color="red")
