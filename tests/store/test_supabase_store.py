"""Tests for the PostgREST store using an in-process transport."""

from __future__ import annotations

import json

import httpx
import pytest

from famly.errors import ConflictError, StoreError
from famly.store.supabase import SupabaseStore, build_filter_params


def _store(handler, access_token=None) -> SupabaseStore:
    return SupabaseStore(
        "https://demo.supabase.co",
        "anon-key",
        access_token=access_token,
        transport=httpx.MockTransport(handler),
    )


def test_build_filter_params_handles_eq_in_and_null():
    params = build_filter_params({"family_id": "f1", "id": ["a", "b"], "parent_id": None, "is_done": False})

    assert ("family_id", "eq.f1") in params
    assert ("id", 'in.("a","b")') in params
    assert ("parent_id", "is.null") in params
    assert ("is_done", "eq.false") in params


def test_select_sends_filters_order_and_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["headers"] = request.headers
        return httpx.Response(200, json=[{"id": "t1", "title": "Laundry"}])

    with _store(handler, access_token="user-token") as store:
        rows = store.select("tasks", {"family_id": "f1"}, order_by="created_at", descending=True)

    assert rows == [{"id": "t1", "title": "Laundry"}]
    assert seen["url"].path == "/rest/v1/tasks"
    assert seen["url"].params["family_id"] == "eq.f1"
    assert seen["url"].params["order"] == "created_at.desc"
    assert seen["headers"]["apikey"] == "anon-key"
    assert seen["headers"]["Authorization"] == "Bearer user-token"


def test_insert_posts_json_and_returns_representation():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert request.method == "POST"
        assert request.headers["Prefer"] == "return=representation"
        return httpx.Response(201, json=[{**body[0], "id": "new"}])

    store = _store(handler)
    row = store.insert("families", {"name": "The Smiths"})

    assert row == {"name": "The Smiths", "id": "new"}


def test_unique_violation_maps_to_conflict():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"code": "23505", "message": "duplicate key value"})

    with pytest.raises(ConflictError) as excinfo:
        _store(handler).insert("family_members", {"family_id": "f1", "user_id": "u1"})

    assert excinfo.value.status_code == 409
    assert excinfo.value.table == "family_members"


def test_server_error_maps_to_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "boom"})

    with pytest.raises(StoreError) as excinfo:
        _store(handler).update("tasks", {"title": "x"}, {"id": "t1"})

    assert not isinstance(excinfo.value, ConflictError)
    assert "boom" in str(excinfo.value)


def test_transport_failure_maps_to_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    with pytest.raises(StoreError):
        _store(handler).select("tasks")


def test_delete_counts_returned_rows():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        return httpx.Response(200, json=[{"id": "a"}, {"id": "b"}])

    assert _store(handler).delete("tasks", {"family_id": "f1"}) == 2
