from .ats_score import calculate_ats_score, score_rating, template_bonus
from .templates import RESUME_TEMPLATES, get_template, list_templates

__all__ = [
    "RESUME_TEMPLATES",
    "calculate_ats_score",
    "get_template",
    "list_templates",
    "score_rating",
    "template_bonus",
]
