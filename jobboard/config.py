"""Load settings and env configuration."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobboard.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
DATA_DIR: Path = ROOT_DIR / "data"
SESSION_PATH: Path = DATA_DIR / "session.json"

DEFAULT_API_URL = "http://localhost:5000"

MAJOR_CITIES: list[str] = [
    "Mumbai", "Delhi", "Bangalore", "Hyderabad", "Chennai", "Kolkata",
    "Pune", "Ahmedabad", "Jaipur", "Surat", "Lucknow", "Kanpur",
    "Nagpur", "Indore", "Thane", "Bhopal", "Visakhapatnam",
    "Pimpri-Chinchwad", "Patna", "Vadodara", "Ghaziabad",
    "Ludhiana", "Agra", "Nashik", "Faridabad", "Meerut",
    "Rajkot", "Kalyan-Dombivli", "Vasai-Virar", "Varanasi",
]

# Type toggles on the Find Jobs page
JOB_TYPES: list[str] = ["Full-time", "Part-time", "Temporary", "Remote", "Internship"]

# Checkbox options on the Post Job form
POST_JOB_TYPES: list[str] = [
    "Full-time", "Part-time", "Contract", "Internship", "Freelance", "Temporary",
]
WORK_MODES: list[str] = ["Remote", "On-site", "Hybrid", "Work From Office"]


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _defaults() -> dict[str, Any]:
    return {
        "api_url": DEFAULT_API_URL,
        "request_timeout": 15,
        "cities": list(MAJOR_CITIES),
        "job_types": list(JOB_TYPES),
        "post_job_types": list(POST_JOB_TYPES),
        "work_modes": list(WORK_MODES),
    }


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Defaults, overlaid by config/settings.yaml, overlaid by env vars."""
    settings = _defaults()
    path = path or SETTINGS_PATH
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            log.warning("Ignoring %s: expected a mapping, got %s", path.name, type(data).__name__)
            data = {}
        for key, value in data.items():
            if key in settings and value is not None:
                settings[key] = value

    api_url = get_env("JOBBOARD_API_URL")
    if api_url:
        settings["api_url"] = api_url
    timeout = get_env("JOBBOARD_REQUEST_TIMEOUT")
    if timeout:
        try:
            settings["request_timeout"] = float(timeout)
        except ValueError:
            log.warning("Invalid JOBBOARD_REQUEST_TIMEOUT=%r, using %s", timeout, settings["request_timeout"])

    settings["api_url"] = str(settings["api_url"]).rstrip("/")
    return settings


def ensure_dirs() -> None:
    for d in (CONFIG_DIR, DATA_DIR):
        d.mkdir(parents=True, exist_ok=True)
