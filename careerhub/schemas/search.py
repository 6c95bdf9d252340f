from __future__ import annotations

from typing import Literal

from pydantic import Field

from careerhub.schemas.base import ApiModel

SearchSource = Literal["apify", "fallback"]


class JobSearchRequest(ApiModel):
    skills: list[str] = Field(default_factory=list, max_length=100)
    job_title: str = Field(default="", max_length=200)
    location: str = Field(default="", max_length=200)
    experience: str = Field(default="", max_length=200)


class JobPosting(ApiModel):
    id: str
    title: str
    company: str
    location: str
    url: str
    description: str = ""
    source: str
    posted_date: str = "Recently"


class JobSearchResponse(ApiModel):
    jobs: list[JobPosting] = Field(default_factory=list)
    source: SearchSource = "apify"
    error: str | None = None


class ContactSearchRequest(ApiModel):
    query: str = Field(min_length=1, max_length=300)
    role_filter: str = Field(default="", max_length=200)


class Contact(ApiModel):
    id: str
    name: str
    title: str
    company: str
    location: str = "Location not specified"
    linkedin: str = ""


class ContactSearchResponse(ApiModel):
    contacts: list[Contact] = Field(default_factory=list)
    source: SearchSource = "apify"
    error: str | None = None


DemandLevel = Literal["high", "medium", "low"]


class JobMarketRequest(ApiModel):
    industry: str = Field(min_length=1, max_length=200)
    location: str = Field(default="United States", max_length=200)


class SalaryTrend(ApiModel):
    role: str
    average_salary: int
    demand_level: DemandLevel
    openings: int
    change: float | None = None


class SkillDemand(ApiModel):
    name: str
    demand_score: int = Field(ge=0, le=100)
    growth_rate: float | None = None
    average_salary_boost: int | None = None


class LocationStats(ApiModel):
    city: str
    jobs: int
    avg_salary: int


class MarketAnalysis(ApiModel):
    total_jobs: int
    average_salary: int
    top_companies: list[str] = Field(default_factory=list)
    top_locations: list[LocationStats] = Field(default_factory=list)
    job_growth: float | None = None
    salary_growth: float | None = None


class JobMarketResponse(ApiModel):
    industry: str
    salary_trends: list[SalaryTrend] = Field(default_factory=list)
    in_demand_skills: list[SkillDemand] = Field(default_factory=list)
    market_analysis: MarketAnalysis
    outlook: str = ""
    predictions: list[str] = Field(default_factory=list)
    is_live_data: bool = False
    source: SearchSource = "apify"
    error: str | None = None
