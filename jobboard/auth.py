"""Role-based route protection.

``authorize`` is a pure function of (session, requirement, path). A denial is
an ordinary return value so the page chrome can stay on screen.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from jobboard.models import Role, Session

LOGIN_PATH = "/login"

# Raw backend role strings -> application roles. Anything else falls back
# to the least-privileged role.
ROLE_MAP: dict[str, Role] = {
    "user": Role.JOBSEEKER,
    "jobseeker": Role.JOBSEEKER,
    "employer": Role.EMPLOYER,
    "admin": Role.ADMIN,
}
DEFAULT_ROLE = Role.JOBSEEKER


def normalize_role(raw: str | Role | None) -> Role:
    if isinstance(raw, Role):
        return raw
    return ROLE_MAP.get((raw or "").strip().lower(), DEFAULT_ROLE)


# ── Requirements & decisions ─────────────────────────────────────────────


@dataclass(frozen=True)
class RequiredRole:
    role: Role

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", Role(self.role))


@dataclass(frozen=True)
class AllowedRoles:
    roles: tuple[Role, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "roles", tuple(Role(r) for r in self.roles))

    @classmethod
    def of(cls, *roles: Role | str) -> "AllowedRoles":
        return cls(tuple(Role(r) for r in roles))


Requirement = Union[RequiredRole, AllowedRoles]


@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class Deny:
    reason: str
    permitted: tuple[Role, ...] = ()


@dataclass(frozen=True)
class RedirectToLogin:
    next_path: str
    login_path: str = LOGIN_PATH


Decision = Union[Allow, Deny, RedirectToLogin]

ALLOW = Allow()


def _deny_required(role: Role) -> Deny:
    if role is Role.EMPLOYER:
        reason = (
            "This page is restricted to employers only. "
            "Please register as an employer to access this feature."
        )
    else:
        reason = f"This page is restricted to {role.value}s only."
    return Deny(reason=reason, permitted=(role,))


def _deny_allowed(roles: tuple[Role, ...]) -> Deny:
    names = " or ".join(r.value for r in roles)
    return Deny(
        reason=(
            "You don't have permission to access this page. "
            f"This page is restricted to {names} only."
        ),
        permitted=roles,
    )


def authorize(
    session: Session | None, requirement: Requirement | None, path: str = "/"
) -> Decision:
    if requirement is None:
        return ALLOW
    if session is None or not session.authenticated:
        return RedirectToLogin(next_path=path)

    role = normalize_role(session.role)
    if isinstance(requirement, RequiredRole):
        return ALLOW if role is requirement.role else _deny_required(requirement.role)
    if not requirement.roles or role in requirement.roles:
        return ALLOW
    return _deny_allowed(requirement.roles)


# ── Route table ──────────────────────────────────────────────────────────

ROUTES: dict[str, Requirement | None] = {
    "/": None,
    "/find-jobs": None,
    "/jobs/{id}": None,
    LOGIN_PATH: None,
    "/post-job": RequiredRole(Role.EMPLOYER),
    "/dashboard": RequiredRole(Role.EMPLOYER),
    "/jobs/{id}/applications": AllowedRoles.of(Role.EMPLOYER, Role.ADMIN),
}


def _pattern(route: str) -> re.Pattern[str]:
    return re.compile("^" + re.sub(r"\\\{\w+\\\}", r"[^/]+", re.escape(route)) + "$")


_COMPILED = [(route, _pattern(route)) for route in ROUTES]


def match_route(path: str) -> str | None:
    """Route pattern for a concrete path, or None if the app has no such page."""
    clean = "/" + path.split("?", 1)[0].strip("/").lower()
    for route, pattern in _COMPILED:
        if pattern.match(clean):
            return route
    return None


def requirement_for(path: str) -> Requirement | None:
    route = match_route(path)
    return ROUTES.get(route) if route else None


def authorize_path(session: Session | None, path: str) -> Decision:
    return authorize(session, requirement_for(path), path)


def permitted_routes(role: str | Role) -> list[str]:
    probe = Session(user_id="", email="", role=normalize_role(role).value)
    return [route for route, req in ROUTES.items() if isinstance(authorize(probe, req, route), Allow)]


def can_view_applicants(session: Session | None) -> bool:
    """Same rule the applicants page enforces, for showing links to it."""
    decision = authorize(session, ROUTES["/jobs/{id}/applications"])
    return isinstance(decision, Allow)


@dataclass(frozen=True)
class NavItem:
    label: str
    path: str
    protected: bool = False


def nav_items(session: Session | None) -> list[NavItem]:
    items = [NavItem("Home", "/"), NavItem("Find Jobs", "/find-jobs")]
    if session is None or not session.authenticated:
        items.append(NavItem("Login/Signup", LOGIN_PATH))
        return items
    if normalize_role(session.role) is Role.EMPLOYER:
        items.append(NavItem("Post a Job", "/post-job", protected=True))
        items.append(NavItem("Dashboard", "/dashboard", protected=True))
    items.append(NavItem("Logout", "/logout"))
    return items
