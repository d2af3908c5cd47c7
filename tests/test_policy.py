"""Tests for the route visibility policy."""
from datetime import datetime, timezone

import pytest

from route_sketch.core.policy import authorize, can, can_create, can_view
from route_sketch.errors import AuthorizationError
from route_sketch.models import Route

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _route(owner="u1", is_private=True):
    return Route(id="r1", owner=owner, name="R", is_private=is_private, created_at=NOW, updated_at=NOW)


def test_owner_can_view_regardless_of_privacy():
    assert can_view("u1", _route(is_private=True))
    assert can_view("u1", _route(is_private=False))


def test_non_owner_views_only_public():
    assert can_view("u2", _route(is_private=False))
    assert not can_view("u2", _route(is_private=True))


@pytest.mark.parametrize("capability", ["update", "delete", "restore"])
def test_owner_only_capabilities(capability):
    assert can(capability, "u1", _route(is_private=False))
    assert not can(capability, "u2", _route(is_private=False))


def test_any_authenticated_principal_can_create():
    assert can_create("anyone")
    assert can("create", "u2")
    assert not can_create("")


def test_authorize_raises_for_denied_capability():
    with pytest.raises(AuthorizationError) as exc:
        authorize("update", "u2", _route())
    assert exc.value.capability == "update"
    assert exc.value.route_id == "r1"


def test_authorize_passes_for_owner():
    authorize("delete", "u1", _route())


def test_unknown_capability():
    with pytest.raises(ValueError):
        can("share", "u1", _route())
