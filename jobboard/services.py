"""Wire the API client, durable storage and session store together."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from jobboard.api import JobBoardClient
from jobboard.config import SESSION_PATH, load_settings
from jobboard.log import get_logger
from jobboard.session import KeyValueStorage, SessionStore
from jobboard.storage import FileStorage

log = get_logger(__name__)


@dataclass
class Services:
    settings: dict[str, Any]
    client: JobBoardClient
    sessions: SessionStore


def build_services(
    settings: dict[str, Any] | None = None,
    storage: KeyValueStorage | None = None,
    http: requests.Session | None = None,
) -> Services:
    """Build the app's collaborators and restore any persisted login."""
    settings = settings or load_settings()
    client = JobBoardClient(
        settings["api_url"],
        timeout=float(settings.get("request_timeout", 15)),
        http=http,
    )
    sessions = SessionStore(client, storage if storage is not None else FileStorage(SESSION_PATH))
    client.token_provider = lambda: sessions.token
    sessions.rehydrate()
    log.info("Backend: %s", client.base_url)
    return Services(settings=settings, client=client, sessions=sessions)
