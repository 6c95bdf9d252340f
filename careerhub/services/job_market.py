"""Job-market insights aggregated from Indeed postings scraped through Apify.

Salaries, locations, skill mentions and employers are summarised from a
sample of postings. Sections the sample cannot fill are taken from the
static market snapshot in config/tools.yaml.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from careerhub.core.tools_config import get_tools_value
from careerhub.schemas.search import (
    JobMarketRequest,
    JobMarketResponse,
    LocationStats,
    MarketAnalysis,
    SalaryTrend,
    SkillDemand,
)
from careerhub.services.apify_client import ApifyClient

logger = logging.getLogger(__name__)

DEFAULT_ACTOR_ID = "misceres/indeed-scraper"

MIN_SALARY = 20_000
MAX_SALARY = 500_000
DEFAULT_AVERAGE_SALARY = 100_000

# Market totals are extrapolated from the scraped sample.
POSTINGS_PER_SAMPLE = 50_000
OPENINGS_PER_SALARY = 100

TOP_LOCATIONS = 6
TOP_SKILLS = 8
TOP_ROLES = 6
TOP_COMPANIES = 8
ROLE_MATCH_CHARS = 10
ROLE_MAX_CHARS = 30

_SALARY_RE = re.compile(r"\$?([\d,]+)")


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _round(value: float) -> int:
    return int(math.floor(value + 0.5))


def _average(values: list[int]) -> int:
    if not values:
        return DEFAULT_AVERAGE_SALARY
    return _round(sum(values) / len(values))


def _fill(value: Any, industry: str) -> Any:
    if isinstance(value, str):
        return value.replace("{industry}", industry)
    if isinstance(value, list):
        return [_fill(item, industry) for item in value]
    if isinstance(value, dict):
        return {key: _fill(item, industry) for key, item in value.items()}
    return value


def parse_salary(value: Any) -> int | None:
    """First number in a salary string, if it falls inside the plausible annual range."""
    match = _SALARY_RE.search(_text(value))
    if not match:
        return None
    digits = match.group(1).replace(",", "")
    if not digits:
        return None
    salary = int(digits)
    if MIN_SALARY < salary < MAX_SALARY:
        return salary
    return None


def _demand_level(samples: int) -> str:
    if samples > 5:
        return "high"
    if samples > 2:
        return "medium"
    return "low"


def _snapshot(industry: str) -> dict[str, Any]:
    return _fill(get_tools_value("fallbacks.job_market", {}) or {}, industry)


def summarize_job_market(items: list[dict[str, Any]], industry: str) -> JobMarketResponse:
    roles: list[tuple[str, list[int]]] = []
    locations: dict[str, dict[str, Any]] = {}
    skill_counts: dict[str, int] = {}
    companies: dict[str, None] = {}
    all_salaries: list[int] = []
    common_skills = [str(skill) for skill in get_tools_value("search.market.common_skills", []) or []]

    for job in items:
        company = _text(job.get("company"))
        if company:
            companies.setdefault(company, None)

        city = _text(job.get("location")) or "Unknown"
        stats = locations.setdefault(city, {"count": 0, "salaries": []})
        stats["count"] += 1

        salary = parse_salary(job.get("salary"))
        if salary is not None:
            stats["salaries"].append(salary)
            all_salaries.append(salary)
            role = _text(job.get("positionName")) or _text(job.get("title")) or "Unknown"
            prefix = role.lower()[:ROLE_MATCH_CHARS]
            for name, salaries in roles:
                if prefix in name.lower():
                    salaries.append(salary)
                    break
            else:
                roles.append((role, [salary]))

        description = _text(job.get("description")).lower()
        for skill in common_skills:
            if skill.lower() in description:
                skill_counts[skill] = skill_counts.get(skill, 0) + 1

    top_locations = [
        LocationStats(city=city, jobs=stats["count"], avg_salary=_average(stats["salaries"]))
        for city, stats in sorted(locations.items(), key=lambda entry: entry[1]["count"], reverse=True)
    ][:TOP_LOCATIONS]

    skills = sorted(
        (
            SkillDemand(
                name=skill[:1].upper() + skill[1:],
                demand_score=min(100, _round(count / len(items) * 200)),
            )
            for skill, count in skill_counts.items()
        ),
        key=lambda entry: entry.demand_score,
        reverse=True,
    )[:TOP_SKILLS]

    salary_trends = [
        SalaryTrend(
            role=role[:ROLE_MAX_CHARS],
            average_salary=_average(salaries),
            demand_level=_demand_level(len(salaries)),
            openings=len(salaries) * OPENINGS_PER_SALARY,
        )
        for role, salaries in roles[:TOP_ROLES]
    ]

    snapshot = _snapshot(industry)
    snapshot_analysis = snapshot.get("market_analysis") or {}
    market_text = _fill(get_tools_value("search.market", {}) or {}, industry)

    return JobMarketResponse(
        industry=industry,
        salary_trends=salary_trends or snapshot.get("salary_trends", []),
        in_demand_skills=skills or snapshot.get("in_demand_skills", []),
        market_analysis=MarketAnalysis(
            total_jobs=len(items) * POSTINGS_PER_SAMPLE,
            average_salary=_average(all_salaries),
            top_companies=list(companies)[:TOP_COMPANIES],
            top_locations=top_locations or snapshot_analysis.get("top_locations", []),
        ),
        outlook=str(market_text.get("outlook") or ""),
        predictions=[str(item) for item in market_text.get("predictions") or []],
        is_live_data=bool(items),
        source="apify",
    )


def fetch_job_market(request: JobMarketRequest, client: ApifyClient | None = None) -> JobMarketResponse:
    """Scrape Indeed postings for an industry and summarise them. Raises ApifyError on failure."""
    logger.info("job_market_fetch industry=%r location=%r", request.industry, request.location)
    items = (client or ApifyClient()).run_actor(
        str(get_tools_value("search.market.actor_id", DEFAULT_ACTOR_ID)),
        {
            "position": request.industry,
            "country": str(get_tools_value("search.market.country", "US")),
            "location": request.location,
            "maxItems": int(get_tools_value("search.market.max_items", 50)),
            "parseCompanyDetails": True,
            "saveOnlyUniqueItems": True,
        },
    )
    logger.info("job_market_items count=%s", len(items))
    return summarize_job_market(items, request.industry)


def fallback_job_market(industry: str, error: str | None = None) -> JobMarketResponse:
    snapshot = _snapshot(industry)
    return JobMarketResponse.model_validate(
        {
            "industry": industry,
            "salary_trends": snapshot.get("salary_trends", []),
            "in_demand_skills": snapshot.get("in_demand_skills", []),
            "market_analysis": snapshot.get("market_analysis") or {"total_jobs": 0, "average_salary": 0},
            "outlook": snapshot.get("outlook", ""),
            "predictions": snapshot.get("predictions", []),
            "is_live_data": False,
            "source": "fallback",
            "error": error,
        }
    )
