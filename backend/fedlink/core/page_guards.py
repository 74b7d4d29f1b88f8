"""Page Guards — decide between placeholder, redirect and render for a matched route.

Invariants:
    - All functions are PURE: load states are passed in
    - While the auth check OR the resource fetch is pending, the result is Loading,
      never a redirect (no redirect flash on transient loading states)
    - Auth redirect wins over resource redirect: an anonymous visitor of a protected
      page goes to "/" regardless of the resource outcome
    - A missing or inaccessible scoped resource redirects to the route's fallback listing
    - Editing someone else's profile redirects to that profile's read-only page
"""

from dataclasses import dataclass, field
from enum import Enum

from fedlink.core.client_routes import (
    Page, RouteMatch, ScopedResource, profile_path,
)


class LoadStatus(str, Enum):
    PENDING = "pending"
    SETTLED = "settled"


@dataclass(frozen=True)
class AuthState:
    status: LoadStatus
    user_id: int | None = None

    @classmethod
    def pending(cls) -> "AuthState":
        return cls(LoadStatus.PENDING)

    @classmethod
    def anonymous(cls) -> "AuthState":
        return cls(LoadStatus.SETTLED)

    @classmethod
    def signed_in(cls, user_id: int) -> "AuthState":
        return cls(LoadStatus.SETTLED, user_id)

    @property
    def settled(self) -> bool:
        return self.status == LoadStatus.SETTLED


@dataclass(frozen=True)
class ResourceState:
    status: LoadStatus
    found: bool = False
    accessible: bool = False
    data: dict | None = None

    @classmethod
    def pending(cls) -> "ResourceState":
        return cls(LoadStatus.PENDING)

    @classmethod
    def not_needed(cls) -> "ResourceState":
        return cls(LoadStatus.SETTLED, found=True, accessible=True)

    @classmethod
    def missing(cls) -> "ResourceState":
        return cls(LoadStatus.SETTLED)

    @classmethod
    def loaded(cls, data: dict, accessible: bool = True) -> "ResourceState":
        return cls(LoadStatus.SETTLED, found=True, accessible=accessible, data=data)

    @property
    def settled(self) -> bool:
        return self.status == LoadStatus.SETTLED


@dataclass(frozen=True)
class Loading:
    page: Page
    status: str = "loading"


@dataclass(frozen=True)
class Redirect:
    location: str
    status: str = "redirect"


@dataclass(frozen=True)
class Ready:
    page: Page
    params: dict = field(default_factory=dict)
    data: dict | None = None
    status: str = "ready"


PageState = Loading | Redirect | Ready


def target_profile_id(match: RouteMatch, auth: AuthState) -> int | None:
    """Profile pages without an id show the signed-in user's profile."""
    explicit = match.params.get("id")
    return explicit if explicit is not None else auth.user_id


def evaluate(match: RouteMatch, auth: AuthState, resource: ResourceState) -> PageState:
    spec = match.spec
    if not auth.settled or not resource.settled:
        return Loading(match.page)

    if spec.requires_auth and auth.user_id is None:
        return Redirect("/")

    if spec.resource == ScopedResource.PROFILE:
        profile_id = target_profile_id(match, auth)
        if profile_id is None:
            return Redirect("/")
        if match.page == Page.PROFILE_EDIT and profile_id != auth.user_id:
            return Redirect(profile_path(profile_id))

    if spec.resource is not None and not (resource.found and resource.accessible):
        return Redirect(spec.fallback)

    return Ready(match.page, dict(match.params), resource.data)
