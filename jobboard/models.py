"""Data models for sessions, job postings, search criteria and applications."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Role(str, Enum):
    JOBSEEKER = "jobseeker"
    EMPLOYER = "employer"
    ADMIN = "admin"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    INTERVIEWING = "interviewing"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# ── Parsing helpers ──────────────────────────────────────────────────────


def _as_list(value: Any) -> list[str]:
    """Backend fields arrive as a list or as a comma-separated string."""
    if not value:
        return []
    if isinstance(value, str):
        return [p.strip() for p in value.split(",") if p.strip()]
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    return [str(value).strip()]


def _as_number(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """ISO-8601 (with or without trailing Z) to an aware UTC datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _object_id(data: dict, *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if isinstance(value, dict):
            value = value.get("_id") or value.get("id")
        if value:
            return str(value)
    return ""


# ── Models ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Session:
    user_id: str
    email: str
    role: str
    company_name: str | None = None
    authenticated: bool = True

    @classmethod
    def from_user(cls, user: Any) -> "Session":
        """Build from the backend's user object; raises ValueError if unusable."""
        if not isinstance(user, dict):
            raise ValueError(f"user profile must be an object, got {type(user).__name__}")
        email = user.get("email")
        if not email:
            raise ValueError("user profile has no email")
        return cls(
            user_id=_object_id(user, "id", "_id", "userId"),
            email=str(email),
            role=str(user.get("role") or ""),
            company_name=user.get("companyName") or None,
        )


@dataclass(frozen=True)
class Range:
    min: float
    max: float

    @classmethod
    def from_values(cls, lo: Any, hi: Any) -> "Range | None":
        lo_n, hi_n = _as_number(lo), _as_number(hi)
        if lo_n is None and hi_n is None:
            return None
        # A single bound is an exact figure, not a range down/up to zero.
        if lo_n is None:
            lo_n = hi_n
        if hi_n is None:
            hi_n = lo_n
        return cls(min=lo_n, max=hi_n)

    def label(self, unit: str = "") -> str:
        def _fmt(n: float) -> str:
            return str(int(n)) if float(n).is_integer() else f"{n:g}"

        if self.min == self.max:
            return f"{_fmt(self.min)}{unit}"
        return f"{_fmt(self.min)}{unit} - {_fmt(self.max)}{unit}"


@dataclass
class JobPosting:
    id: str
    title: str
    company_name: str = ""
    company_logo: str | None = None
    company_url: str | None = None
    employment_type: list[str] = field(default_factory=list)
    work_mode: list[str] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    salary_range: Range | None = None
    experience_range: Range | None = None
    description: str = ""
    responsibilities: str = ""
    posted_at: datetime | None = None
    status: str = "active"
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict) -> "JobPosting":
        salary = data.get("salary") or {}
        if isinstance(salary, dict) and salary:
            salary_range = Range.from_values(salary.get("min"), salary.get("max"))
        else:
            salary_range = Range.from_values(data.get("minPrice"), data.get("maxPrice"))
        experience = data.get("experience") or {}
        experience_range = (
            Range.from_values(experience.get("min"), experience.get("max"))
            if isinstance(experience, dict) else None
        )
        return cls(
            id=_object_id(data, "_id", "id"),
            title=str(data.get("jobTitle") or data.get("title") or ""),
            company_name=str(data.get("companyName") or ""),
            company_logo=data.get("companyLogo") or None,
            company_url=data.get("companyUrl") or None,
            employment_type=_as_list(data.get("employmentType")),
            work_mode=_as_list(data.get("workMode")),
            locations=_as_list(data.get("jobLocation", data.get("locations"))),
            salary_range=salary_range,
            experience_range=experience_range,
            description=str(data.get("description") or ""),
            responsibilities=str(data.get("rolesAndResponsibilities") or ""),
            posted_at=parse_timestamp(data.get("createdAt")),
            status=str(data.get("status") or "active"),
            raw=data,
        )


@dataclass(frozen=True)
class SearchCriteria:
    keywords: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()
    employment_types: tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not (self.keywords or self.locations or self.employment_types)


@dataclass
class Application:
    id: str
    job_id: str
    applicant_email: str
    linkedin_url: str
    resume_reference: str
    status: ApplicationStatus = ApplicationStatus.PENDING
    submitted_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict) -> "Application":
        try:
            status = ApplicationStatus(str(data.get("status") or "pending").lower())
        except ValueError:
            status = ApplicationStatus.PENDING
        return cls(
            id=_object_id(data, "_id", "id"),
            job_id=_object_id(data, "jobId", "job"),
            applicant_email=str(data.get("email") or ""),
            linkedin_url=str(data.get("linkedinUrl") or ""),
            resume_reference=str(data.get("resume") or data.get("resumePath") or ""),
            status=status,
            submitted_at=parse_timestamp(data.get("createdAt") or data.get("appliedAt")),
        )

    @property
    def resume_filename(self) -> str:
        """Stored paths may come from a Windows backend."""
        return self.resume_reference.replace("\\", "/").rsplit("/", 1)[-1]
