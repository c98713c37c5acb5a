"""Tests for service wiring and the bulk-upload script."""

import json
from pathlib import Path

import pytest
from conftest import user_payload

import seed_jobs
from jobboard.services import build_services
from jobboard.session import TOKEN_KEY, USER_KEY
from jobboard.storage import MemoryStorage

SETTINGS = {"api_url": "http://backend.test", "request_timeout": 7}


class TestBuildServices:
    def test_rehydrates_and_wires_token(self, http) -> None:
        storage = MemoryStorage({TOKEN_KEY: "persisted", USER_KEY: json.dumps(user_payload())})
        svc = build_services(dict(SETTINGS), storage=storage, http=http)

        assert svc.sessions.current.email == "boss@acme.test"
        http.queue(200, {"success": True, "data": []})
        svc.client.my_jobs()
        assert http.last.headers["Authorization"] == "Bearer persisted"
        assert http.last.timeout == 7

    def test_logged_out_client_has_no_token(self, http) -> None:
        svc = build_services(dict(SETTINGS), storage=MemoryStorage(), http=http)
        assert svc.sessions.current is None
        assert svc.client.token_provider() is None


class TestSeedJobs:
    """Tests for seed_jobs."""

    def test_load_list_or_wrapped(self, tmp_path: Path) -> None:
        bare = tmp_path / "bare.json"
        bare.write_text(json.dumps([{"jobTitle": "A"}, "skip"]), encoding="utf-8")
        wrapped = tmp_path / "wrapped.json"
        wrapped.write_text(json.dumps({"jobs": [{"jobTitle": "B"}]}), encoding="utf-8")
        assert seed_jobs.load_jobs(bare) == [{"jobTitle": "A"}]
        assert seed_jobs.load_jobs(wrapped) == [{"jobTitle": "B"}]

    def test_load_rejects_scalar(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("42", encoding="utf-8")
        with pytest.raises(ValueError):
            seed_jobs.load_jobs(path)

    def test_upload_posts_jobs(self, http, client, tmp_path: Path) -> None:
        path = tmp_path / "jobs.json"
        path.write_text(json.dumps([{"jobTitle": "A"}, {"jobTitle": "B"}]), encoding="utf-8")
        http.queue(200, {"message": "saved"})
        assert seed_jobs.upload(path, client) == {"message": "saved"}
        assert http.last.url.endswith("/api/save-jobs")
        assert len(http.last.kwargs["json"]) == 2
