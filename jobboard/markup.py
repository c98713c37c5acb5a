"""HTML snippets for job cards. Backend text is always escaped."""
from __future__ import annotations

from html import escape
from typing import Iterable

from jobboard.models import JobPosting


def tags_html(values: Iterable[str]) -> str:
    return "".join(f'<span class="job-tag">{escape(str(v))}</span>' for v in values)


def job_meta_html(job: JobPosting) -> str:
    """Location, salary, experience and post date on one line; "" if none."""
    meta = []
    if job.locations:
        meta.append(", ".join(job.locations))
    if job.salary_range:
        meta.append(f"₹ {job.salary_range.label()}")
    if job.experience_range:
        meta.append(f"{job.experience_range.label()} yrs")
    if job.posted_at:
        meta.append(f"Posted {job.posted_at.strftime('%d %b %Y')}")
    if not meta:
        return ""
    return f'<div class="job-meta">{" · ".join(escape(m) for m in meta)}</div>'
