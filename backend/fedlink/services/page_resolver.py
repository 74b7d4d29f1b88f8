"""Page Resolver — turns a client path into a page state (placeholder, redirect or ready).

Invariants:
    - Route matching, tab sync, resource fetch and guard evaluation happen in that order
    - Resources are fetched through the ViewContext's QueryCache, keyed by API path
    - A result is applied to the PageLoader only under the token issued for this resolve
    - Protected pages never fetch their resource for anonymous callers

Design Decisions:
    - The resolver owns no state: everything mutable lives in the ViewContext it is given
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.core.client_routes import RouteMatch, ScopedResource, resolve_route
from fedlink.core.page_guards import (
    AuthState, PageState, Ready, Redirect, ResourceState, evaluate, target_profile_id,
)
from fedlink.core.view_state import ViewContext
from fedlink.models.user import User
from fedlink.repositories import InstanceRepository, UserRepository
from fedlink.schemas.instance import InstanceResponse
from fedlink.schemas.user import UserResponse

logger = logging.getLogger(__name__)


def user_key(user_id: int) -> str:
    return f"/api/v1/users/{user_id}"


def instance_key(instance_id: int) -> str:
    return f"/api/v1/instances/{instance_id}"


async def _cached(ctx: ViewContext, key: str, load) -> dict | None:
    if ctx.cache.has(key):
        return ctx.cache.get(key)
    data = await load()
    if data is not None:
        ctx.cache.put(key, data)
    return data


async def _load_profile(db: AsyncSession, ctx: ViewContext, user_id: int) -> ResourceState:
    async def load():
        user = await UserRepository(db).get(user_id)
        return UserResponse.model_validate(user).model_dump(mode="json") if user else None

    data = await _cached(ctx, user_key(user_id), load)
    return ResourceState.loaded(data) if data is not None else ResourceState.missing()


async def _load_instance(
    db: AsyncSession, ctx: ViewContext, instance_id: int, viewer_id: int,
) -> ResourceState:
    async def load():
        instance = await InstanceRepository(db).find(instance_id)
        if instance is None:
            return None
        return InstanceResponse.model_validate(instance).model_dump(mode="json")

    data = await _cached(ctx, instance_key(instance_id), load)
    if data is None:
        return ResourceState.missing()
    return ResourceState.loaded(data, accessible=data["admin_id"] == viewer_id)


async def load_resource(
    db: AsyncSession, ctx: ViewContext, match: RouteMatch, auth: AuthState,
) -> ResourceState:
    resource = match.spec.resource
    if resource is None:
        return ResourceState.not_needed()
    if match.spec.requires_auth and auth.user_id is None:
        return ResourceState.not_needed()
    if resource == ScopedResource.PROFILE:
        profile_id = target_profile_id(match, auth)
        if profile_id is None:
            return ResourceState.missing()
        return await _load_profile(db, ctx, profile_id)
    return await _load_instance(db, ctx, match.params["id"], auth.user_id)


async def resolve(
    path: str, db: AsyncSession, current_user: User | None, ctx: ViewContext,
) -> PageState:
    match = resolve_route(path)
    ctx.tabs.sync_from_path(match.path)
    auth = AuthState.signed_in(current_user.id) if current_user else AuthState.anonymous()
    token = ctx.loader.begin()
    resource = await load_resource(db, ctx, match, auth)
    state = evaluate(match, auth, resource)
    ctx.loader.complete(token, state)
    if isinstance(state, Redirect):
        logger.info(f"View redirect {match.path} -> {state.location}", extra={"path": match.path})
    return state


def to_payload(state: PageState) -> dict:
    return {
        "status": state.status,
        "page": state.page.value if not isinstance(state, Redirect) else None,
        "params": state.params if isinstance(state, Ready) else {},
        "location": state.location if isinstance(state, Redirect) else None,
    }
