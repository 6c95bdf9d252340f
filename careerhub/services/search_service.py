from __future__ import annotations

import logging
import re
from typing import Any

from careerhub.core.tools_config import get_tools_value
from careerhub.schemas.search import (
    Contact,
    ContactSearchRequest,
    ContactSearchResponse,
    JobPosting,
    JobSearchRequest,
    JobSearchResponse,
)
from careerhub.services.apify_client import ApifyClient

logger = logging.getLogger(__name__)

DEFAULT_ACTOR_ID = "apify~google-search-scraper"
DEFAULT_JOB_BOARDS = (
    "linkedin.com/jobs",
    "indeed.com",
    "glassdoor.com",
    "lever.co",
    "greenhouse.io",
    "workday.com",
)

_TITLE_COMPANY_RE = re.compile(r"(?:at|@|-)\s*([^|]+?)(?:\s*\||$)", re.IGNORECASE)
_DESCRIPTION_COMPANY_RE = re.compile(r"(?:at|@)\s*([^,.\n]+)", re.IGNORECASE)
_JOB_TITLE_SPLIT_RE = re.compile(r"[-|@]")
_JOB_NOISE_RE = re.compile(r"job|hiring|career", re.IGNORECASE)
_CONTACT_SPLIT_RE = re.compile(r"[-|–]")
_CONTACT_TITLE_RE = re.compile(r"[-|–]\s*(.+?)(?:\s*[-|–]|$)")
_LINKEDIN_SUFFIX_RE = re.compile(r"\s*-\s*LinkedIn.*$", re.IGNORECASE)


def _actor_id() -> str:
    return str(get_tools_value("search.actor_id", DEFAULT_ACTOR_ID))


def _search_limit(kind: str, key: str, default: int) -> int:
    return int(get_tools_value(f"search.{kind}.{key}", default))


def _run_input(query: str, *, max_pages: int, results_per_page: int) -> dict[str, Any]:
    return {
        "queries": query,
        "maxPagesPerQuery": max_pages,
        "resultsPerPage": results_per_page,
        "mobileResults": False,
        "languageCode": "",
        "maxConcurrency": 1,
    }


def _organic_results(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    results: list[dict[str, Any]] = []
    for item in items:
        organic = item.get("organicResults") or []
        if isinstance(organic, list):
            results.extend(entry for entry in organic if isinstance(entry, dict))
    return results


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def build_job_query(request: JobSearchRequest) -> str:
    skills_query = " OR ".join(request.skills[:3])
    return f"{request.job_title or 'software developer'} {skills_query} jobs {request.location or ''}".strip()


def build_contact_query(request: ContactSearchRequest) -> str:
    if request.role_filter:
        return f"{request.query} {request.role_filter} site:linkedin.com/in"
    return f'{request.query} recruiter OR "hiring manager" OR "talent acquisition" site:linkedin.com/in'


def _is_job_result(item: dict[str, Any]) -> bool:
    url = _text(item.get("url")).lower()
    title = _text(item.get("title")).lower()
    boards = get_tools_value("search.job_boards", list(DEFAULT_JOB_BOARDS)) or DEFAULT_JOB_BOARDS
    title_terms = get_tools_value("search.job_title_terms", ["job", "career", "hiring"]) or ()
    return any(board in url for board in boards) or any(term in title for term in title_terms)


def _extract_company(title: str, description: str) -> str:
    match = _TITLE_COMPANY_RE.search(title) or _DESCRIPTION_COMPANY_RE.search(description)
    company = match.group(1).strip() if match else ""
    return company or "Company"


def _job_source(url: str) -> str:
    if "linkedin" in url:
        return "LinkedIn"
    if "indeed" in url:
        return "Indeed"
    if "glassdoor" in url:
        return "Glassdoor"
    return "Job Board"


def parse_job_results(items: list[dict[str, Any]], location: str = "", max_results: int = 20) -> list[JobPosting]:
    jobs: list[JobPosting] = []
    matching = [item for item in _organic_results(items) if _is_job_result(item)][:max_results]
    for index, item in enumerate(matching):
        title = _text(item.get("title")) or "Job Position"
        description = _text(item.get("description"))
        url = _text(item.get("url"))

        job_title = _JOB_NOISE_RE.sub("", _JOB_TITLE_SPLIT_RE.split(title)[0]).strip() or "Position"
        jobs.append(
            JobPosting(
                id=f"job-{index}",
                title=job_title[:60],
                company=_extract_company(title, description)[:40],
                location=location or "Remote/Various",
                url=url,
                description=description[:200],
                source=_job_source(url),
                posted_date="Recently",
            )
        )
    return jobs


def parse_contact_results(items: list[dict[str, Any]], max_results: int = 10) -> list[Contact]:
    contacts: list[Contact] = []
    matching = [item for item in _organic_results(items) if "linkedin.com/in" in _text(item.get("url"))][:max_results]
    for index, item in enumerate(matching):
        title = _text(item.get("title"))
        description = _text(item.get("description"))
        url = _text(item.get("url"))

        name = _CONTACT_SPLIT_RE.split(title)[0].strip() or "Unknown"
        title_match = _CONTACT_TITLE_RE.search(title)
        job_title = (
            (title_match.group(1).strip() if title_match else "")
            or description.split(".")[0].strip()
            or "Professional"
        )
        company_match = _DESCRIPTION_COMPANY_RE.search(description)
        company = (company_match.group(1).strip() if company_match else "") or "Company"

        contacts.append(
            Contact(
                id=f"contact-{index}",
                name=_LINKEDIN_SUFFIX_RE.sub("", name).strip(),
                title=job_title[:50],
                company=company,
                location="Location not specified",
                linkedin=url.replace("https://", "", 1),
            )
        )
    return contacts


def search_jobs(request: JobSearchRequest, client: ApifyClient | None = None) -> JobSearchResponse:
    """Search job boards through the Google search scraper actor. Raises ApifyError on failure."""
    query = build_job_query(request)
    logger.info("job_search query=%r", query)
    items = (client or ApifyClient()).run_actor(
        _actor_id(),
        _run_input(
            query,
            max_pages=_search_limit("jobs", "max_pages_per_query", 2),
            results_per_page=_search_limit("jobs", "results_per_page", 20),
        ),
    )
    jobs = parse_job_results(
        items,
        location=request.location,
        max_results=_search_limit("jobs", "max_results", 20),
    )
    logger.info("job_search_parsed count=%s", len(jobs))
    return JobSearchResponse(jobs=jobs, source="apify")


def search_contacts(request: ContactSearchRequest, client: ApifyClient | None = None) -> ContactSearchResponse:
    """Find recruiter profiles on LinkedIn through the search scraper. Raises ApifyError on failure."""
    query = build_contact_query(request)
    logger.info("contact_search query=%r", query)
    items = (client or ApifyClient()).run_actor(
        _actor_id(),
        _run_input(
            query,
            max_pages=_search_limit("contacts", "max_pages_per_query", 1),
            results_per_page=_search_limit("contacts", "results_per_page", 10),
        ),
    )
    contacts = parse_contact_results(items, max_results=_search_limit("contacts", "max_results", 10))
    logger.info("contact_search_parsed count=%s", len(contacts))
    return ContactSearchResponse(contacts=contacts, source="apify")


def fallback_jobs(request: JobSearchRequest, error: str | None = None) -> JobSearchResponse:
    rows = get_tools_value("fallbacks.jobs", []) or []
    jobs: list[JobPosting] = []
    for index, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            continue
        data = dict(row)
        if request.job_title:
            data["title"] = f"Senior {request.job_title}" if index == 2 else request.job_title
        if index == 1 and request.location:
            data["location"] = request.location
        jobs.append(JobPosting(id=str(index), **data))
    return JobSearchResponse(jobs=jobs, source="fallback", error=error)


def fallback_contacts(error: str | None = None) -> ContactSearchResponse:
    rows = get_tools_value("fallbacks.contacts", []) or []
    contacts = [
        Contact(id=str(index), **row)
        for index, row in enumerate(rows, start=1)
        if isinstance(row, dict)
    ]
    return ContactSearchResponse(contacts=contacts, source="fallback", error=error)
