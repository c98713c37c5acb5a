"""Client-side validation for the Post Job and Apply forms.

Both forms raise ValidationError before anything is sent to the backend.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jobboard.errors import ValidationError

RESUME_SUFFIXES = (".pdf", ".doc", ".docx")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def format_url(url: str) -> str:
    """Trim, drop trailing slashes, and default the scheme to https."""
    if not url:
        return ""
    url = url.strip().rstrip("/")
    if not url:
        return ""
    if re.match(r"^https?://", url):
        return url
    return f"https://{url}"


def _number(value: Any) -> float:
    """Blank or unparseable input counts as 0."""
    try:
        return float(value) if value not in (None, "") else 0.0
    except (TypeError, ValueError):
        return 0.0


def _fmt(n: float) -> str:
    return str(int(n)) if n.is_integer() else str(n)


@dataclass
class JobPostingForm:
    title: str = ""
    employment_type: list[str] = field(default_factory=list)
    work_mode: list[str] = field(default_factory=list)
    min_salary: Any = ""
    max_salary: Any = ""
    description: str = ""
    responsibilities: str = ""
    min_experience: Any = ""
    max_experience: Any = ""
    company_name: str = ""
    locations: list[str] = field(default_factory=list)
    company_logo: str = ""
    company_url: str = ""
    status: str = "active"

    def errors(self) -> list[str]:
        errors: list[str] = []
        min_sal, max_sal = _number(self.min_salary), _number(self.max_salary)
        min_exp, max_exp = _number(self.min_experience), _number(self.max_experience)

        if not self.title.strip():
            errors.append("Job title is required")
        if min_sal < 0:
            errors.append("Minimum salary cannot be negative")
        if max_sal < 0:
            errors.append("Maximum salary cannot be negative")
        if max_sal < min_sal:
            errors.append("Maximum salary cannot be less than minimum salary")
        if min_exp < 0:
            errors.append("Minimum experience cannot be negative")
        if max_exp < 0:
            errors.append("Maximum experience cannot be negative")
        if max_exp < min_exp:
            errors.append("Maximum experience cannot be less than minimum experience")
        if not self.employment_type:
            errors.append("Please select at least one employment type")
        if not self.work_mode:
            errors.append("Please select at least one work mode")
        return errors

    def validate(self) -> None:
        errors = self.errors()
        if errors:
            raise ValidationError(errors)

    def to_payload(self) -> dict[str, Any]:
        """Validated request body for POST /api/jobs."""
        self.validate()
        locations = [loc.strip() for loc in self.locations if loc.strip()]
        return {
            "jobTitle": self.title.strip(),
            "employmentType": list(self.employment_type),
            "workMode": list(self.work_mode),
            "minPrice": _fmt(_number(self.min_salary)),
            "maxPrice": _fmt(_number(self.max_salary)),
            "description": self.description,
            "companyName": self.company_name.strip(),
            "jobLocation": locations,
            "companyLogo": self.company_logo.strip() or None,
            "companyUrl": format_url(self.company_url) or None,
            "rolesAndResponsibilities": self.responsibilities,
            "experience": {
                "min": _fmt(_number(self.min_experience)),
                "max": _fmt(_number(self.max_experience)),
            },
            "status": self.status or "active",
        }


@dataclass
class ApplicationForm:
    email: str = ""
    linkedin_url: str = ""
    resume_path: Path | None = None

    def errors(self) -> list[str]:
        errors: list[str] = []
        if not self.email.strip() or not self.linkedin_url.strip() or self.resume_path is None:
            errors.append("Please fill in all required fields")
        if self.email.strip() and not _EMAIL_RE.match(self.email.strip()):
            errors.append("Please enter a valid email address")
        if self.resume_path is not None:
            if self.resume_path.suffix.lower() not in RESUME_SUFFIXES:
                errors.append("Resume must be a PDF or Word document")
            elif not self.resume_path.is_file():
                errors.append(f"Resume file not found: {self.resume_path.name}")
        return errors

    def validate(self) -> None:
        errors = self.errors()
        if errors:
            raise ValidationError(errors)
