#!/usr/bin/env python3
"""Bulk-upload a JSON file of job postings to the backend.

Usage: python seed_jobs.py [path/to/jobs.json]   (default: data/jobs.json)
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobboard.api import JobBoardClient
from jobboard.config import DATA_DIR, load_settings
from jobboard.errors import FetchError
from jobboard.log import get_logger

log = get_logger(__name__)

DEFAULT_JOBS_PATH = DATA_DIR / "jobs.json"


def load_jobs(path: Path) -> list[dict]:
    """Job objects from ``path``: a bare list or ``{"jobs": [...]}``."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("jobs", [])
    if not isinstance(data, list):
        raise ValueError(f"{path.name}: expected a list of jobs")
    return [j for j in data if isinstance(j, dict)]


def upload(path: Path, client: JobBoardClient | None = None) -> dict:
    jobs = load_jobs(path)
    if client is None:
        settings = load_settings()
        client = JobBoardClient(settings["api_url"], timeout=float(settings["request_timeout"]))
    log.info("Uploading %d job(s) from %s to %s", len(jobs), path.name, client.base_url)
    return client.save_jobs(jobs)


if __name__ == "__main__":
    jobs_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_JOBS_PATH
    if not jobs_path.exists():
        log.error("Jobs file not found: %s", jobs_path)
        sys.exit(1)
    try:
        result = upload(jobs_path)
    except (FetchError, ValueError) as exc:
        log.error("Upload failed: %s", exc)
        sys.exit(1)
    log.info("Upload successful: %s", result.get("message") or "ok")
