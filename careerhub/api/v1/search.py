import logging

from fastapi import APIRouter, Depends, Request

from careerhub.core.rate_limit import tools_rate_limit
from careerhub.core.security import require_api_key
from careerhub.schemas.search import (
    ContactSearchRequest,
    ContactSearchResponse,
    JobMarketRequest,
    JobMarketResponse,
    JobSearchRequest,
    JobSearchResponse,
)
from careerhub.services.apify_client import ApifyError
from careerhub.services.job_market import fallback_job_market, fetch_job_market
from careerhub.services.search_service import (
    fallback_contacts,
    fallback_jobs,
    search_contacts,
    search_jobs,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post("/search/jobs", response_model=JobSearchResponse)
@tools_rate_limit()
def search_jobs_route(request: Request, payload: JobSearchRequest):
    try:
        return search_jobs(payload)
    except ApifyError as exc:
        logger.warning("job_search_failed: %s", exc)
        return fallback_jobs(payload, error=str(exc))


@router.post("/search/contacts", response_model=ContactSearchResponse)
@tools_rate_limit()
def search_contacts_route(request: Request, payload: ContactSearchRequest):
    try:
        return search_contacts(payload)
    except ApifyError as exc:
        logger.warning("contact_search_failed: %s", exc)
        return fallback_contacts(error=str(exc))


@router.post("/search/job-market", response_model=JobMarketResponse)
@tools_rate_limit()
def search_job_market_route(request: Request, payload: JobMarketRequest):
    try:
        return fetch_job_market(payload)
    except ApifyError as exc:
        logger.warning("job_market_failed: %s", exc)
        return fallback_job_market(payload.industry, error=str(exc))
