"""Filter an already-fetched job list against search criteria.

Groups (keywords, locations, employment types) combine with AND; values
inside a group combine with OR; an empty group places no constraint.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from jobboard.models import JobPosting, SearchCriteria

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _normalize(s: str | None) -> str:
    return (s or "").lower()


def _keyword_match(job: JobPosting, keywords: Iterable[str]) -> bool:
    title = _normalize(job.title)
    desc = _normalize(job.description)
    return any(_normalize(k) in title or _normalize(k) in desc for k in keywords)


def _location_match(job: JobPosting, locations: Iterable[str]) -> bool:
    job_locs = [_normalize(loc) for loc in job.locations or []]
    return any(_normalize(wanted) in loc for wanted in locations for loc in job_locs)


def _type_match(job: JobPosting, types: Iterable[str]) -> bool:
    job_types = {_normalize(t) for t in job.employment_type or []}
    return any(_normalize(t) in job_types for t in types)


def matches(job: JobPosting, criteria: SearchCriteria) -> bool:
    if criteria.keywords and not _keyword_match(job, criteria.keywords):
        return False
    if criteria.locations and not _location_match(job, criteria.locations):
        return False
    if criteria.employment_types and not _type_match(job, criteria.employment_types):
        return False
    return True


def filter_jobs(jobs: Iterable[JobPosting], criteria: SearchCriteria) -> list[JobPosting]:
    """Jobs matching every active group, in input order."""
    return [j for j in jobs if matches(j, criteria)]


def sort_newest_first(jobs: Iterable[JobPosting]) -> list[JobPosting]:
    """Descending post date; undated jobs last, ties keep input order."""
    return sorted(
        jobs,
        key=lambda j: (j.posted_at is not None, j.posted_at or _EPOCH),
        reverse=True,
    )
