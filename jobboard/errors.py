"""Error types surfaced to the UI. None of them is fatal to the app."""
from __future__ import annotations


class JobBoardError(Exception):
    """Base class; ``message`` is always safe to show to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthError(JobBoardError):
    """Bad credentials, registration conflict, or login transport failure."""


class FetchError(JobBoardError):
    """Network or server failure talking to the backend."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def forbidden(self) -> bool:
        return self.status_code == 403


class ValidationError(JobBoardError):
    """Client-side form violations, raised before any network call."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = list(errors)
