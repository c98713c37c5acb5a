"""Session store: the single owner (and only writer) of the persisted login."""
from __future__ import annotations

import json
from typing import Callable, Protocol

from jobboard.api import JobBoardClient
from jobboard.errors import AuthError
from jobboard.log import get_logger
from jobboard.models import Role, Session

log = get_logger(__name__)

TOKEN_KEY = "token"
USER_KEY = "userData"

Listener = Callable[[Session | None], None]


class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...
    def set_many(self, values: dict[str, str]) -> None: ...
    def clear(self) -> None: ...


class SessionStore:
    """Holds the current Session and publishes changes to subscribers.

    ``current`` is None when nobody is logged in. Consumers get the store
    passed in explicitly and should treat the Session as read-only.
    """

    def __init__(self, client: JobBoardClient, storage: KeyValueStorage) -> None:
        self._client = client
        self._storage = storage
        self._session: Session | None = None
        self._token: str | None = None
        self._listeners: list[Listener] = []

    @property
    def current(self) -> Session | None:
        return self._session

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None and self._session.authenticated

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self) -> None:
        for listener in list(self._listeners):
            listener(self._session)

    def _set(self, session: Session | None, token: str | None) -> None:
        self._session = session
        self._token = token
        self._publish()

    def rehydrate(self) -> Session | None:
        """Restore the session persisted by an earlier login.

        Anything unreadable counts as no session: storage is cleared and
        None returned instead of raising.
        """
        token = self._storage.get(TOKEN_KEY)
        raw_user = self._storage.get(USER_KEY)
        if not token and not raw_user:
            self._set(None, None)
            return None
        try:
            if not token or not raw_user:
                raise ValueError("token and user profile must be stored together")
            session = Session.from_user(json.loads(raw_user))
        except ValueError as exc:
            log.warning("Discarding persisted session: %s", exc)
            self._storage.clear()
            self._set(None, None)
            return None
        log.info("Restored session for %s", session.email)
        self._set(session, token)
        return session

    def login(self, credentials: dict[str, str]) -> Session:
        """Authenticate, persist token + profile together, notify subscribers."""
        email = (credentials.get("email") or "").strip()
        password = credentials.get("password") or ""
        if not email or not password:
            raise AuthError("Email and password are required.")

        token, user = self._client.login(email, password)
        try:
            session = Session.from_user(user)
        except ValueError as exc:
            log.error("Login response had no usable user profile: %s", exc)
            raise AuthError("Login failed") from exc

        self._storage.set_many({TOKEN_KEY: token, USER_KEY: json.dumps(user)})
        log.info("Logged in %s (role=%s)", session.email, session.role or "-")
        self._set(session, token)
        return session

    def register(
        self, email: str, password: str, role: Role | str, company_name: str | None = None
    ) -> None:
        role_value = role.value if isinstance(role, Role) else str(role)
        if not email.strip() or not password:
            raise AuthError("Email and password are required.")
        if role_value == Role.EMPLOYER.value and not (company_name or "").strip():
            raise AuthError("Company name is required for employers.")
        self._client.register(
            email.strip(),
            password,
            role_value,
            company_name.strip() if role_value == Role.EMPLOYER.value and company_name else None,
        )

    def logout(self) -> None:
        self._storage.clear()
        if self._session:
            log.info("Logged out %s", self._session.email)
        self._set(None, None)
