from fastapi import APIRouter, HTTPException, Request, status

from careerhub.core.rate_limit import rate_limit
from careerhub.schemas.ats import (
    ATSScoreRequest,
    ATSScoreResponse,
    ResumeTemplate,
    ResumeTemplateListResponse,
)
from careerhub.scoring import calculate_ats_score, get_template, list_templates, score_rating

router = APIRouter()


@router.post(
    "/resume/ats-score",
    response_model=ATSScoreResponse,
    summary="ATS Score",
    description="Score a structured resume for ATS compatibility with the selected template.",
)
@rate_limit()
async def resume_ats_score(request: Request, payload: ATSScoreRequest):
    result = calculate_ats_score(payload.resume, payload.template_id)
    return ATSScoreResponse(**result.model_dump(), rating=score_rating(result.score))


@router.get("/resume/templates", response_model=ResumeTemplateListResponse)
async def resume_templates():
    return ResumeTemplateListResponse(templates=list_templates())


@router.get("/resume/templates/{template_id}", response_model=ResumeTemplate)
async def resume_template(template_id: str):
    template = get_template(template_id)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown template.")
    return template
