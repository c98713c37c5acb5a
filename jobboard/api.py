"""HTTP client for the job board backend.

One method per backend endpoint. Failures are mapped onto the error types in
``jobboard.errors``; nothing here retries, the user retries by hand.
"""
from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Any, Callable
from urllib.parse import quote

import requests

from jobboard.errors import AuthError, FetchError, ValidationError
from jobboard.log import get_logger
from jobboard.models import Application, ApplicationStatus, JobPosting

log = get_logger(__name__)

TokenProvider = Callable[[], str | None]


def _error_message(r: requests.Response) -> str:
    try:
        data = r.json()
    except ValueError:
        return ""
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or "")
    return ""


class JobBoardClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15,
        http: requests.Session | None = None,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()
        self.token_provider = token_provider

    # ── Plumbing ─────────────────────────────────────────────────────────

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api{path}"

    def _auth_headers(self) -> dict[str, str]:
        token = self.token_provider() if self.token_provider else None
        if not token:
            raise FetchError("You need to log in first.", status_code=401)
        return {"Authorization": f"Bearer {token}"}

    def _send(
        self,
        method: str,
        path: str,
        *,
        auth: bool = False,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> requests.Response:
        hdrs = self._auth_headers() if auth else {}
        hdrs.update(headers or {})
        try:
            r = self.http.request(method, self._url(path), headers=hdrs, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, path, exc)
            raise FetchError(f"Could not reach the server: {exc}") from exc
        if not r.ok:
            message = _error_message(r) or f"Request failed with status {r.status_code}"
            log.warning("%s %s -> %d %s", method, path, r.status_code, message)
            raise FetchError(message, status_code=r.status_code)
        log.debug("%s %s -> %d", method, path, r.status_code)
        return r

    def _json(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        r = self._send(method, path, **kwargs)
        try:
            data = r.json()
        except ValueError as exc:
            raise FetchError("Unexpected response from server", status_code=r.status_code) from exc
        if not isinstance(data, dict):
            raise FetchError("Unexpected response from server", status_code=r.status_code)
        return data

    # ── Auth ─────────────────────────────────────────────────────────────

    def login(self, email: str, password: str) -> tuple[str, dict[str, Any]]:
        """Return (token, user profile) or raise AuthError."""
        try:
            data = self._json("POST", "/auth/login", json={"email": email, "password": password})
        except FetchError as exc:
            if exc.status_code is None:
                raise AuthError("Login failed") from exc
            raise AuthError(exc.message) from exc

        token = data.get("token")
        if not data.get("success") or not token:
            raise AuthError(
                data.get("error")
                or data.get("message")
                or "Incorrect email or password. Please try again."
            )
        user = data.get("user")
        return str(token), user if isinstance(user, dict) else {}

    def register(
        self, email: str, password: str, role: str, company_name: str | None = None
    ) -> None:
        body: dict[str, Any] = {"email": email, "password": password, "role": role}
        if company_name:
            body["companyName"] = company_name
        try:
            data = self._json("POST", "/auth/register", json=body)
        except FetchError as exc:
            if exc.status_code is None:
                raise AuthError("Registration failed") from exc
            raise AuthError(exc.message) from exc
        if data.get("success") is False:
            raise AuthError(data.get("message") or data.get("error") or "Registration failed")
        log.info("Registered %s as %s", email, role)

    # ── Jobs ─────────────────────────────────────────────────────────────

    def list_jobs(self) -> list[JobPosting]:
        data = self._json("GET", "/jobs")
        if not data.get("success"):
            raise FetchError("Failed to fetch jobs")
        return [JobPosting.from_api(d) for d in data.get("data") or [] if isinstance(d, dict)]

    def get_job(self, job_id: str) -> JobPosting:
        data = self._json("GET", f"/jobs/{quote(job_id, safe='')}")
        payload = data.get("data") if isinstance(data.get("data"), dict) else data
        if not payload or data.get("success") is False:
            raise FetchError("Job not found", status_code=404)
        return JobPosting.from_api(payload)

    def create_job(self, payload: dict[str, Any]) -> JobPosting | None:
        data = self._json("POST", "/jobs", auth=True, json=payload)
        if not data.get("success"):
            raise FetchError(data.get("message") or "Error posting job")
        created = data.get("data")
        log.info("Posted job %r", payload.get("jobTitle"))
        return JobPosting.from_api(created) if isinstance(created, dict) else None

    def delete_job(self, job_id: str) -> None:
        data = self._json("DELETE", f"/jobs/{quote(job_id, safe='')}", auth=True)
        if data.get("success") is False:
            raise FetchError(data.get("message") or "Failed to delete job")
        log.info("Deleted job %s", job_id)

    def my_jobs(self) -> list[JobPosting]:
        data = self._json("GET", "/my-jobs", auth=True)
        if data.get("success") is False:
            raise FetchError("Failed to fetch jobs")
        return [JobPosting.from_api(d) for d in data.get("data") or [] if isinstance(d, dict)]

    def save_jobs(self, jobs: list[dict[str, Any]]) -> dict[str, Any]:
        """Bulk upload raw job objects."""
        data = self._json("POST", "/save-jobs", json=jobs)
        log.info("Uploaded %d job(s)", len(jobs))
        return data

    # ── Applications ─────────────────────────────────────────────────────

    def submit_application(
        self, job_id: str, email: str, linkedin_url: str, resume_path: Path
    ) -> None:
        mime = mimetypes.guess_type(resume_path.name)[0] or "application/octet-stream"
        fields = {"jobId": job_id, "email": email, "linkedinUrl": linkedin_url}
        with open(resume_path, "rb") as fh:
            data = self._json(
                "POST",
                "/applications",
                data=fields,
                files={"resume": (resume_path.name, fh, mime)},
            )
        if data.get("success") is False:
            raise FetchError(data.get("message") or "Failed to submit application")
        log.info("Submitted application for job %s", job_id)

    def applications_for_job(self, job_id: str) -> list[Application]:
        data = self._json("GET", f"/applications/job/{quote(job_id, safe='')}", auth=True)
        return [Application.from_api(a) for a in data.get("applications") or [] if isinstance(a, dict)]

    def update_application_status(
        self, application_id: str, status: ApplicationStatus | str
    ) -> ApplicationStatus:
        try:
            new_status = ApplicationStatus(status)
        except ValueError as exc:
            raise ValidationError([f"Unknown application status: {status}"]) from exc
        self._json(
            "PATCH",
            f"/applications/{quote(application_id, safe='')}/status",
            auth=True,
            json={"status": new_status.value},
        )
        log.info("Application %s -> %s", application_id, new_status.value)
        return new_status

    def resume_view_url(self, filename: str) -> str:
        return self._url(f"/applications/resume/view/{quote(filename, safe='')}")

    def download_resume(self, filename: str) -> bytes:
        r = self._send(
            "GET",
            f"/applications/resume/download/{quote(filename, safe='')}",
            auth=True,
            headers={"Accept": "application/octet-stream"},
        )
        return r.content
