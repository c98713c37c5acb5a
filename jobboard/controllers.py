"""Page controllers: the state behind each screen, independent of the UI toolkit.

Each controller keeps the last error as a user-displayable string so the
page can render an error panel with a retry action instead of crashing.
"""
from __future__ import annotations

from itertools import count
from typing import Any, Iterable

from jobboard.api import JobBoardClient
from jobboard.errors import FetchError, ValidationError
from jobboard.filters import filter_jobs, sort_newest_first
from jobboard.forms import ApplicationForm, JobPostingForm, format_url
from jobboard.log import get_logger
from jobboard.models import Application, ApplicationStatus, JobPosting, SearchCriteria
from jobboard.search import SearchInputCollector
from jobboard.session import SessionStore

log = get_logger(__name__)


# ── Home / Find Jobs ─────────────────────────────────────────────────────


class JobListController:
    """Fetched jobs (newest first) plus the current filter state.

    Fetches are numbered; a response that is not for the most recently
    issued fetch is dropped so a slow early request cannot overwrite a
    newer list.
    """

    def __init__(self, client: JobBoardClient, cities: Iterable[str] | None = None) -> None:
        self.client = client
        self.collector = SearchInputCollector(cities=cities, listener=self.on_search)
        self.jobs: list[JobPosting] = []
        self.results: list[JobPosting] = []
        self.selected_types: list[str] = []
        self.error: str | None = None
        self.loading = False
        self.is_filtered = False
        self._keywords: tuple[str, ...] = ()
        self._locations: tuple[str, ...] = ()
        self._seq = count(1)
        self._latest = 0

    @property
    def criteria(self) -> SearchCriteria:
        return SearchCriteria(
            keywords=self._keywords,
            locations=self._locations,
            employment_types=tuple(self.selected_types),
        )

    # ── Fetching ─────────────────────────────────────────────────────────

    def begin_fetch(self) -> int:
        self._latest = next(self._seq)
        self.loading = True
        return self._latest

    def receive(self, seq: int, jobs: list[JobPosting]) -> bool:
        if seq != self._latest:
            log.info("Discarding stale job list (fetch #%d, latest #%d)", seq, self._latest)
            return False
        self.jobs = sort_newest_first(jobs)
        self.error = None
        self.loading = False
        self._refilter()
        log.info("Loaded %d job(s)", len(self.jobs))
        return True

    def fail(self, seq: int, exc: FetchError) -> bool:
        if seq != self._latest:
            log.info("Ignoring error from stale fetch #%d: %s", seq, exc.message)
            return False
        self.jobs = []
        self.results = []
        self.error = exc.message or "Failed to fetch jobs"
        self.loading = False
        return True

    def load(self) -> None:
        seq = self.begin_fetch()
        try:
            jobs = self.client.list_jobs()
        except FetchError as exc:
            log.error("Job list fetch failed: %s", exc.message)
            self.fail(seq, exc)
            return
        self.receive(seq, jobs)

    retry = load

    # ── Filtering ────────────────────────────────────────────────────────

    def _refilter(self) -> None:
        self.results = filter_jobs(self.jobs, self.criteria)

    def on_search(self, criteria: SearchCriteria) -> None:
        self._keywords = tuple(criteria.keywords)
        self._locations = tuple(criteria.locations)
        self.is_filtered = not criteria.is_empty()
        self._refilter()

    def toggle_type(self, job_type: str) -> None:
        if job_type in self.selected_types:
            self.selected_types.remove(job_type)
        else:
            self.selected_types.append(job_type)
        self._refilter()

    def summary(self) -> str:
        n = len(self.results)
        return f"{n} {'job' if n == 1 else 'jobs'} found"


# ── Job detail / apply ───────────────────────────────────────────────────


class JobDetailController:
    def __init__(self, client: JobBoardClient, job_id: str) -> None:
        self.client = client
        self.job_id = job_id
        self.job: JobPosting | None = None
        self.error: str | None = None
        self.apply_errors: list[str] = []
        self.applied = False

    def load(self) -> None:
        try:
            self.job = self.client.get_job(self.job_id)
            self.error = None
        except FetchError as exc:
            log.error("Job %s fetch failed: %s", self.job_id, exc.message)
            self.job = None
            self.error = exc.message or "Failed to fetch job details"

    def apply(self, form: ApplicationForm) -> bool:
        self.applied = False
        try:
            form.validate()
            self.client.submit_application(
                self.job_id,
                form.email.strip(),
                format_url(form.linkedin_url),
                form.resume_path,
            )
        except ValidationError as exc:
            self.apply_errors = exc.errors
            return False
        except FetchError as exc:
            self.apply_errors = [exc.message or "Failed to submit application"]
            return False
        self.apply_errors = []
        self.applied = True
        return True


# ── Post Job ─────────────────────────────────────────────────────────────


class PostJobController:
    """Fill, preview, then post."""

    def __init__(self, client: JobBoardClient) -> None:
        self.client = client
        self.form = JobPostingForm()
        self.preview: dict[str, Any] | None = None
        self.errors: list[str] = []
        self.posted: JobPosting | None = None

    def submit(self, form: JobPostingForm) -> bool:
        """Validate and switch to preview; nothing is sent yet."""
        self.form = form
        try:
            self.preview = form.to_payload()
        except ValidationError as exc:
            self.preview = None
            self.errors = exc.errors
            return False
        self.errors = []
        return True

    def edit(self) -> None:
        self.preview = None

    def post(self) -> bool:
        try:
            payload = self.form.to_payload()
            self.posted = self.client.create_job(payload)
        except ValidationError as exc:
            self.errors = exc.errors
            return False
        except FetchError as exc:
            self.errors = [exc.message or "Error posting job"]
            return False
        self.reset()
        return True

    def reset(self) -> None:
        self.form = JobPostingForm()
        self.preview = None
        self.errors = []


# ── Employer dashboard ───────────────────────────────────────────────────


class EmployerDashboardController:
    """The employer's own postings. A 401 ends the session."""

    def __init__(self, client: JobBoardClient, sessions: SessionStore) -> None:
        self.client = client
        self.sessions = sessions
        self.jobs: list[JobPosting] = []
        self.error: str | None = None
        self.needs_login = False

    def _unauthorized(self) -> None:
        log.warning("Token rejected, logging out")
        self.sessions.logout()
        self.needs_login = True

    def load(self) -> None:
        try:
            self.jobs = self.client.my_jobs()
            self.error = None
        except FetchError as exc:
            if exc.unauthorized:
                self._unauthorized()
                return
            self.error = "Failed to fetch jobs"

    def delete(self, job_id: str) -> bool:
        try:
            self.client.delete_job(job_id)
        except FetchError as exc:
            if exc.unauthorized:
                self._unauthorized()
            elif exc.forbidden:
                self.error = "You are not authorized to delete this job"
            else:
                self.error = "Failed to delete job"
            return False
        self.jobs = [j for j in self.jobs if j.id != job_id]
        return True


# ── Applicants ───────────────────────────────────────────────────────────


class ApplicationsController:
    def __init__(self, client: JobBoardClient, job_id: str) -> None:
        self.client = client
        self.job_id = job_id
        self.applications: list[Application] = []
        self.error: str | None = None

    def load(self) -> None:
        try:
            self.applications = self.client.applications_for_job(self.job_id)
            self.error = None
        except FetchError as exc:
            self.error = exc.message or "Failed to fetch applications"

    def update_status(self, application_id: str, status: ApplicationStatus | str) -> bool:
        try:
            new_status = self.client.update_application_status(application_id, status)
        except (FetchError, ValidationError):
            self.error = "Failed to update status"
            return False
        for app in self.applications:
            if app.id == application_id:
                app.status = new_status
        return True

    def resume_url(self, application: Application) -> str:
        return self.client.resume_view_url(application.resume_filename)

    def download_resume(self, application: Application) -> bytes | None:
        try:
            return self.client.download_resume(application.resume_filename)
        except FetchError:
            self.error = "Failed to download resume"
            return None

    @staticmethod
    def download_name(application: Application) -> str:
        return f"{application.applicant_email}_resume.pdf"
