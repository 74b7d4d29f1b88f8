"""Client Route Table — typed path patterns for every page of the web client.

Invariants:
    - Patterns declare parameter names and types; `:id` is an int, `:id?` an optional int
    - match_route() returns RouteMatch or NoMatch, never raises on user input
    - resolve_route() never returns NoMatch: unmatched paths resolve to Page.NOT_FOUND
    - Table order is match order; the first pattern that matches wins
    - Query strings, fragments and a trailing slash are ignored

Design Decisions:
    - Patterns compiled once into segment tuples at import time (ROUTES)
    - Per-page requirements (auth, scoped resource, fallback) live next to the pattern
      so page_guards can evaluate any page without special cases
"""

from dataclasses import dataclass, field
from enum import Enum


class Page(str, Enum):
    HOME = "home"
    PROFILE = "profile"
    PROFILE_EDIT = "profile_edit"
    SERVICES = "services"
    ADMIN = "admin"
    INSTANCE_SETTINGS = "instance_settings"
    INSTANCE_ANALYTICS = "instance_analytics"
    INSTANCE_SETUP = "instance_setup"
    NOT_FOUND = "not_found"


class ScopedResource(str, Enum):
    PROFILE = "profile"
    INSTANCE = "instance"


@dataclass(frozen=True)
class Segment:
    """One path segment: a literal, or a typed parameter."""
    literal: str | None = None
    param: str | None = None
    optional: bool = False

    @classmethod
    def parse(cls, raw: str) -> "Segment":
        if raw.startswith(":"):
            name = raw[1:]
            optional = name.endswith("?")
            return cls(param=name.rstrip("?"), optional=optional)
        return cls(literal=raw)


@dataclass(frozen=True)
class RouteSpec:
    pattern: str
    page: Page
    requires_auth: bool = False
    resource: ScopedResource | None = None
    fallback: str = "/"
    segments: tuple[Segment, ...] = field(init=False)

    def __post_init__(self):
        parts = [p for p in self.pattern.split("/") if p]
        object.__setattr__(self, "segments", tuple(Segment.parse(p) for p in parts))


@dataclass(frozen=True)
class RouteMatch:
    page: Page
    path: str
    params: dict[str, int | None]
    spec: RouteSpec


@dataclass(frozen=True)
class NoMatch:
    path: str


ROUTES: tuple[RouteSpec, ...] = (
    RouteSpec("/", Page.HOME),
    RouteSpec("/profile/:id?/edit", Page.PROFILE_EDIT, requires_auth=True,
              resource=ScopedResource.PROFILE),
    RouteSpec("/profile/:id?", Page.PROFILE, resource=ScopedResource.PROFILE),
    RouteSpec("/services", Page.SERVICES),
    RouteSpec("/admin", Page.ADMIN, requires_auth=True),
    RouteSpec("/admin/instances/:id/settings", Page.INSTANCE_SETTINGS, requires_auth=True,
              resource=ScopedResource.INSTANCE, fallback="/admin"),
    RouteSpec("/admin/instances/:id/analytics", Page.INSTANCE_ANALYTICS, requires_auth=True,
              resource=ScopedResource.INSTANCE, fallback="/admin"),
    RouteSpec("/instance-setup", Page.INSTANCE_SETUP, requires_auth=True),
)

NOT_FOUND_SPEC = RouteSpec("*", Page.NOT_FOUND)


def normalize_path(path: str) -> str:
    path = path.split("#", 1)[0].split("?", 1)[0]
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def _parse_int(raw: str) -> int | None:
    """ASCII decimal digits only: str.isdigit() also accepts superscripts and other scripts."""
    if raw.isascii() and raw.isdigit():
        return int(raw)
    return None


def _match_segments(
    segments: tuple[Segment, ...], parts: list[str], params: dict[str, int | None],
) -> dict[str, int | None] | None:
    if not segments:
        return params if not parts else None
    head, rest = segments[0], segments[1:]
    if head.literal is not None:
        if parts and parts[0] == head.literal:
            return _match_segments(rest, parts[1:], params)
        return None
    if parts:
        value = _parse_int(parts[0])
        if value is not None:
            found = _match_segments(rest, parts[1:], {**params, head.param: value})
            if found is not None:
                return found
    if head.optional:
        return _match_segments(rest, parts, {**params, head.param: None})
    return None


def match_route(path: str, routes: tuple[RouteSpec, ...] = ROUTES) -> RouteMatch | NoMatch:
    normalized = normalize_path(path)
    parts = [p for p in normalized.split("/") if p]
    for spec in routes:
        params = _match_segments(spec.segments, parts, {})
        if params is not None:
            return RouteMatch(page=spec.page, path=normalized, params=params, spec=spec)
    return NoMatch(path=normalized)


def resolve_route(path: str) -> RouteMatch:
    """match_route with the catch-all applied."""
    result = match_route(path)
    if isinstance(result, NoMatch):
        return RouteMatch(page=Page.NOT_FOUND, path=result.path, params={}, spec=NOT_FOUND_SPEC)
    return result


def profile_path(user_id: int | None = None, edit: bool = False) -> str:
    base = f"/profile/{user_id}" if user_id is not None else "/profile"
    return f"{base}/edit" if edit else base


def instance_path(instance_id: int, view: str = "settings") -> str:
    return f"/admin/instances/{instance_id}/{view}"
