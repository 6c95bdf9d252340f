from __future__ import annotations

from careerhub.schemas.ats import ResumeTemplate
from careerhub.scoring.ats_score import template_bonus

_TEMPLATE_ROWS = (
    (
        "modern-professional",
        "Modern Professional",
        "Clean, contemporary design perfect for tech and business roles",
        "modern",
        95,
    ),
    (
        "classic-minimal",
        "Classic Minimal",
        "Timeless design that works for any industry",
        "classic",
        98,
    ),
    (
        "tech-specialist",
        "Tech Specialist",
        "Optimized for software engineers and technical roles",
        "tech",
        97,
    ),
    (
        "creative-designer",
        "Creative Designer",
        "Stand out with a unique, creative layout",
        "creative",
        85,
    ),
)

RESUME_TEMPLATES: tuple[ResumeTemplate, ...] = tuple(
    ResumeTemplate(
        id=template_id,
        name=name,
        description=description,
        category=category,
        ats_score=ats_score,
        template_bonus=template_bonus(template_id),
    )
    for template_id, name, description, category, ats_score in _TEMPLATE_ROWS
)

_TEMPLATES_BY_ID = {template.id: template for template in RESUME_TEMPLATES}


def list_templates() -> list[ResumeTemplate]:
    return list(RESUME_TEMPLATES)


def get_template(template_id: str) -> ResumeTemplate | None:
    return _TEMPLATES_BY_ID.get(template_id)
