"""Tests for the backend HTTP client."""

from pathlib import Path

import pytest
import requests
from conftest import BASE_URL

from jobboard.errors import AuthError, FetchError, ValidationError
from jobboard.models import ApplicationStatus


def _authed(client, token: str = "tok") -> None:
    client.token_provider = lambda: token


class TestPlumbing:
    """Tests for URL building, headers and error mapping."""

    def test_list_jobs(self, http, client) -> None:
        http.queue(200, {"success": True, "data": [{"_id": "1", "jobTitle": "Dev"}, "junk"]})
        jobs = client.list_jobs()
        assert [j.title for j in jobs] == ["Dev"]
        assert http.last.method == "GET"
        assert http.last.url == f"{BASE_URL}/api/jobs"
        assert http.last.timeout == 5
        assert "Authorization" not in http.last.headers

    def test_list_jobs_unsuccessful(self, http, client) -> None:
        http.queue(200, {"success": False})
        with pytest.raises(FetchError, match="Failed to fetch jobs"):
            client.list_jobs()

    def test_server_error_carries_status_and_message(self, http, client) -> None:
        http.queue(500, {"error": "database down"})
        with pytest.raises(FetchError) as exc_info:
            client.list_jobs()
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "database down"

    def test_error_without_json_body(self, http, client) -> None:
        http.queue(502)
        with pytest.raises(FetchError, match="status 502"):
            client.get_job("x")

    def test_network_error(self, http, client) -> None:
        http.queue_error(requests.Timeout("slow"))
        with pytest.raises(FetchError, match="Could not reach the server") as exc_info:
            client.list_jobs()
        assert exc_info.value.status_code is None

    def test_non_object_body(self, http, client) -> None:
        http.queue(200, ["a", "b"])
        with pytest.raises(FetchError, match="Unexpected response"):
            client.list_jobs()

    def test_trailing_slash_in_base_url(self, http) -> None:
        from jobboard.api import JobBoardClient

        c = JobBoardClient(BASE_URL + "/", http=http)
        http.queue(200, {"success": True, "data": []})
        c.list_jobs()
        assert http.last.url == f"{BASE_URL}/api/jobs"

    def test_ids_are_url_quoted(self, http, client) -> None:
        http.queue(200, {"success": True, "data": {"_id": "a/b"}})
        client.get_job("a/b")
        assert http.last.url == f"{BASE_URL}/api/jobs/a%2Fb"


class TestAuthenticatedCalls:
    def test_bearer_token_sent(self, http, client) -> None:
        _authed(client, "secret")
        http.queue(200, {"success": True, "data": []})
        client.my_jobs()
        assert http.last.headers["Authorization"] == "Bearer secret"
        assert http.last.url == f"{BASE_URL}/api/my-jobs"

    def test_missing_token_fails_without_request(self, http, client) -> None:
        with pytest.raises(FetchError) as exc_info:
            client.delete_job("1")
        assert exc_info.value.unauthorized
        assert http.calls == []

    def test_create_job(self, http, client) -> None:
        _authed(client)
        http.queue(201, {"success": True, "data": {"_id": "new", "jobTitle": "QA"}})
        job = client.create_job({"jobTitle": "QA"})
        assert job.id == "new"
        assert http.last.method == "POST"
        assert http.last.kwargs["json"] == {"jobTitle": "QA"}

    def test_delete_forbidden(self, http, client) -> None:
        _authed(client)
        http.queue(403, {"message": "Not yours"})
        with pytest.raises(FetchError) as exc_info:
            client.delete_job("1")
        assert exc_info.value.forbidden


class TestLogin:
    def test_returns_token_and_user(self, http, client) -> None:
        http.queue(200, {"success": True, "token": "t", "user": {"email": "a@b.c"}})
        assert client.login("a@b.c", "pw") == ("t", {"email": "a@b.c"})
        assert http.last.url == f"{BASE_URL}/api/auth/login"

    def test_missing_token_is_auth_error(self, http, client) -> None:
        http.queue(200, {"success": True, "message": "Account locked"})
        with pytest.raises(AuthError, match="Account locked"):
            client.login("a@b.c", "pw")


class TestApplications:
    """Tests for application endpoints."""

    def test_submit_multipart(self, http, client, tmp_path: Path) -> None:
        resume = tmp_path / "cv.pdf"
        resume.write_bytes(b"%PDF-1.4")
        http.queue(201, {"success": True})

        client.submit_application("job1", "me@x.test", "https://linkedin.com/in/me", resume)

        call = http.last
        assert call.url == f"{BASE_URL}/api/applications"
        assert call.kwargs["data"] == {
            "jobId": "job1", "email": "me@x.test", "linkedinUrl": "https://linkedin.com/in/me",
        }
        assert call.kwargs["files"]["resume"] == ("cv.pdf", b"%PDF-1.4", "application/pdf")
        assert "Authorization" not in call.headers

    def test_applications_for_job(self, http, client) -> None:
        _authed(client)
        http.queue(200, {"applications": [
            {"_id": "a1", "jobId": "j1", "email": "x@y.z", "status": "interviewing",
             "resume": "uploads\\resumes\\x.pdf"},
        ]})
        apps = client.applications_for_job("j1")
        assert http.last.url == f"{BASE_URL}/api/applications/job/j1"
        assert apps[0].status is ApplicationStatus.INTERVIEWING
        assert apps[0].resume_filename == "x.pdf"

    def test_update_status(self, http, client) -> None:
        _authed(client)
        http.queue(200, {"success": True})
        assert client.update_application_status("a1", "accepted") is ApplicationStatus.ACCEPTED
        assert http.last.method == "PATCH"
        assert http.last.url == f"{BASE_URL}/api/applications/a1/status"
        assert http.last.kwargs["json"] == {"status": "accepted"}

    def test_update_unknown_status_never_sent(self, http, client) -> None:
        _authed(client)
        with pytest.raises(ValidationError):
            client.update_application_status("a1", "hired")
        assert http.calls == []

    def test_resume_urls(self, http, client) -> None:
        _authed(client)
        assert client.resume_view_url("my cv.pdf") == (
            f"{BASE_URL}/api/applications/resume/view/my%20cv.pdf"
        )
        http.queue(200, content=b"bytes")
        assert client.download_resume("x.pdf") == b"bytes"
        assert http.last.headers["Accept"] == "application/octet-stream"
        assert http.last.headers["Authorization"] == "Bearer tok"

    def test_save_jobs(self, http, client) -> None:
        http.queue(200, {"message": "Jobs saved"})
        assert client.save_jobs([{"jobTitle": "A"}]) == {"message": "Jobs saved"}
        assert http.last.url == f"{BASE_URL}/api/save-jobs"
        assert http.last.kwargs["json"] == [{"jobTitle": "A"}]
