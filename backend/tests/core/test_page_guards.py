"""Page Guards — verifies loading placeholders, auth redirects and resource fallbacks.

Tests:
    - Pending auth or pending resource yields Loading, never a redirect
    - Protected pages redirect anonymous visitors to "/"
    - Missing or inaccessible instances redirect to the admin listing
    - Editing another user's profile redirects to their read-only profile
"""

from fedlink.core.client_routes import Page, resolve_route
from fedlink.core.page_guards import (
    AuthState, Loading, Ready, Redirect, ResourceState, evaluate,
)


def test_pending_auth_renders_placeholder():
    state = evaluate(
        resolve_route("/admin"), AuthState.pending(), ResourceState.not_needed(),
    )
    assert isinstance(state, Loading)
    assert state.page == Page.ADMIN


def test_pending_resource_renders_placeholder():
    state = evaluate(
        resolve_route("/admin/instances/1/settings"),
        AuthState.signed_in(1), ResourceState.pending(),
    )
    assert isinstance(state, Loading)


def test_protected_page_redirects_anonymous_home():
    state = evaluate(
        resolve_route("/admin/instances/1/analytics"),
        AuthState.anonymous(), ResourceState.missing(),
    )
    assert state == Redirect("/")


def test_missing_instance_redirects_to_listing():
    state = evaluate(
        resolve_route("/admin/instances/99/settings"),
        AuthState.signed_in(1), ResourceState.missing(),
    )
    assert state == Redirect("/admin")


def test_instance_of_other_admin_redirects_to_listing():
    state = evaluate(
        resolve_route("/admin/instances/5/analytics"),
        AuthState.signed_in(1), ResourceState.loaded({"id": 5}, accessible=False),
    )
    assert state == Redirect("/admin")


def test_own_instance_is_ready_with_data():
    state = evaluate(
        resolve_route("/admin/instances/5/settings"),
        AuthState.signed_in(1), ResourceState.loaded({"id": 5, "admin_id": 1}),
    )
    assert isinstance(state, Ready)
    assert state.params == {"id": 5}
    assert state.data["admin_id"] == 1


def test_profile_without_id_or_user_redirects_home():
    state = evaluate(resolve_route("/profile"), AuthState.anonymous(), ResourceState.missing())
    assert state == Redirect("/")


def test_public_profile_ready_for_anonymous():
    state = evaluate(
        resolve_route("/profile/3"), AuthState.anonymous(), ResourceState.loaded({"id": 3}),
    )
    assert isinstance(state, Ready)
    assert state.page == Page.PROFILE


def test_editing_someone_else_redirects_to_their_profile():
    state = evaluate(
        resolve_route("/profile/3/edit"), AuthState.signed_in(1), ResourceState.loaded({"id": 3}),
    )
    assert state == Redirect("/profile/3")


def test_editing_own_profile_without_id_is_ready():
    state = evaluate(
        resolve_route("/profile/edit"), AuthState.signed_in(1), ResourceState.loaded({"id": 1}),
    )
    assert isinstance(state, Ready)
    assert state.page == Page.PROFILE_EDIT


def test_missing_profile_redirects_to_fallback():
    state = evaluate(resolve_route("/profile/404"), AuthState.anonymous(), ResourceState.missing())
    assert state == Redirect("/")


def test_not_found_page_is_ready():
    state = evaluate(resolve_route("/zzz"), AuthState.anonymous(), ResourceState.not_needed())
    assert isinstance(state, Ready)
    assert state.page == Page.NOT_FOUND
