"""Page Resolver — resolving through a ViewContext that outlives one navigation.

Tests:
    - A reused context serves the cached profile until its key prefix is invalidated
    - The loader holds the state of the latest resolve; the tab follows the path
"""

from fedlink.core.domain_types import Section
from fedlink.core.view_state import ViewContext
from fedlink.repositories import UserRepository
from fedlink.schemas.user import UserUpdate
from fedlink.services.page_resolver import resolve, user_key


async def test_reused_context_caches_until_invalidated(test_db, make_user):
    """A mutation is visible to a reused context only after invalidate()."""
    user = await make_user("alice", headline="Gardener")
    user_id = user.id
    ctx = ViewContext()
    path = f"/profile/{user_id}"

    first = await resolve(path, test_db, None, ctx)
    assert first.data["headline"] == "Gardener"

    await UserRepository(test_db).update(user_id, UserUpdate(headline="Beekeeper"))
    cached = await resolve(path, test_db, None, ctx)
    assert cached.data["headline"] == "Gardener"

    assert ctx.cache.invalidate(user_key(user_id)) == 1
    fresh = await resolve(path, test_db, None, ctx)
    assert fresh.data["headline"] == "Beekeeper"
    assert ctx.loader.result is fresh
    assert ctx.tabs.selected == Section.PROFILE


async def test_missing_profile_is_not_cached(test_db):
    """Absent resources redirect and leave the cache empty."""
    ctx = ViewContext()
    state = await resolve("/profile/404", test_db, None, ctx)
    assert state.location == "/"
    assert len(ctx.cache) == 0
