from fastapi import APIRouter, Depends, HTTPException, Request, status

from careerhub.core.rate_limit import tools_rate_limit
from careerhub.core.security import require_api_key
from careerhub.schemas.tools import (
    KeywordScanRequest,
    KeywordScanResponse,
    LinkedInOptimizeRequest,
    LinkedInOptimizeResponse,
    ResumeComparisonRequest,
    ResumeComparisonResponse,
    ResumeOptimizeRequest,
    ResumeOptimizeResponse,
    SkillsGapRequest,
    SkillsGapResponse,
)
from careerhub.services.career_tools import (
    analyze_skills_gap,
    compare_resumes,
    optimize_linkedin,
    optimize_resume,
    scan_keywords,
)
from careerhub.services.tools_llm import ToolsLLMError

router = APIRouter(dependencies=[Depends(require_api_key)])


def _raise_llm_http_error(exc: ToolsLLMError) -> None:
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


# Plain ``def`` handlers: the AI gateway client blocks, so FastAPI runs these in its threadpool.
@router.post("/tools/keyword-scan", response_model=KeywordScanResponse)
@tools_rate_limit()
def tools_keyword_scan(request: Request, payload: KeywordScanRequest):
    try:
        return scan_keywords(payload)
    except ToolsLLMError as exc:
        _raise_llm_http_error(exc)


@router.post("/tools/skills-gap", response_model=SkillsGapResponse)
@tools_rate_limit()
def tools_skills_gap(request: Request, payload: SkillsGapRequest):
    try:
        return analyze_skills_gap(payload)
    except ToolsLLMError as exc:
        _raise_llm_http_error(exc)


@router.post("/tools/linkedin-optimizer", response_model=LinkedInOptimizeResponse)
@tools_rate_limit()
def tools_linkedin_optimizer(request: Request, payload: LinkedInOptimizeRequest):
    try:
        return optimize_linkedin(payload)
    except ToolsLLMError as exc:
        _raise_llm_http_error(exc)


@router.post("/tools/resume-comparison", response_model=ResumeComparisonResponse)
@tools_rate_limit()
def tools_resume_comparison(request: Request, payload: ResumeComparisonRequest):
    try:
        return compare_resumes(payload)
    except ToolsLLMError as exc:
        _raise_llm_http_error(exc)


@router.post("/tools/resume-optimizer", response_model=ResumeOptimizeResponse)
@tools_rate_limit()
def tools_resume_optimizer(request: Request, payload: ResumeOptimizeRequest):
    try:
        return optimize_resume(payload)
    except ToolsLLMError as exc:
        _raise_llm_http_error(exc)
