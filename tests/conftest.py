"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os

os.environ.setdefault("JOBBOARD_LOG_FILE", "0")

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pytest

from jobboard.api import JobBoardClient
from jobboard.models import JobPosting, Session
from jobboard.session import SessionStore
from jobboard.storage import MemoryStorage

BASE_URL = "http://backend.test"


class FakeResponse:
    """Just enough of requests.Response for the client."""

    def __init__(self, status_code: int = 200, body: Any = None, content: bytes = b"") -> None:
        self.status_code = status_code
        self._body = body
        self.content = content

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


@dataclass
class Call:
    method: str
    url: str
    headers: dict[str, str]
    timeout: float | None
    kwargs: dict[str, Any] = field(default_factory=dict)


class FakeHttp:
    """Records requests and replays queued responses in order."""

    def __init__(self) -> None:
        self.calls: list[Call] = []
        self._queue: list[FakeResponse | Exception] = []

    def queue(self, status_code: int = 200, body: Any = None, content: bytes = b"") -> None:
        self._queue.append(FakeResponse(status_code, body, content))

    def queue_error(self, exc: Exception) -> None:
        self._queue.append(exc)

    def request(self, method: str, url: str, headers=None, timeout=None, **kwargs: Any):
        files = kwargs.get("files")
        if files:
            # File handles are closed once the client returns; keep the bytes.
            kwargs["files"] = {
                k: (name, fh.read(), mime) for k, (name, fh, mime) in files.items()
            }
        self.calls.append(Call(method, url, dict(headers or {}), timeout, kwargs))
        if not self._queue:
            raise AssertionError(f"unexpected request: {method} {url}")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def last(self) -> Call:
        return self.calls[-1]


def make_job(
    job_id: str,
    title: str,
    *,
    description: str = "",
    locations: list[str] | None = None,
    employment_type: list[str] | None = None,
    posted: str | None = None,
) -> JobPosting:
    return JobPosting(
        id=job_id,
        title=title,
        description=description,
        locations=list(locations or []),
        employment_type=list(employment_type or []),
        posted_at=(
            datetime.fromisoformat(posted).replace(tzinfo=timezone.utc) if posted else None
        ),
    )


def user_payload(role: str = "employer", email: str = "boss@acme.test") -> dict[str, Any]:
    return {"_id": "u1", "email": email, "role": role, "companyName": "Acme"}


@pytest.fixture
def http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def client(http: FakeHttp) -> JobBoardClient:
    return JobBoardClient(BASE_URL, timeout=5, http=http)


@pytest.fixture
def sessions(client: JobBoardClient, storage: MemoryStorage) -> SessionStore:
    store = SessionStore(client, storage)
    client.token_provider = lambda: store.token
    return store


@pytest.fixture
def employer() -> Session:
    return Session(user_id="u1", email="boss@acme.test", role="employer", company_name="Acme")


@pytest.fixture
def sample_jobs() -> list[JobPosting]:
    """Four postings in no particular date order."""
    return [
        make_job(
            "j1", "Backend Engineer",
            description="Build REST APIs in Python",
            locations=["Bangalore"], employment_type=["Full-time"], posted="2024-03-01T10:00:00",
        ),
        make_job(
            "j2", "Frontend Developer",
            description="React and TypeScript",
            locations=["Mumbai", "Remote"], employment_type=["Part-time"], posted="2024-03-05T09:00:00",
        ),
        make_job(
            "j3", "Data Scientist",
            locations=["New Delhi"], employment_type=["Full-time", "Remote"],
        ),
        make_job(
            "j4", "Platform engineer",
            description="Kubernetes and Go",
            locations=["Pune"], employment_type=["Contract"], posted="2024-02-01T08:00:00",
        ),
    ]
