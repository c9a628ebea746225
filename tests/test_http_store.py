"""
Tests for the HTTP block store, using httpx's mock transport.
"""

import json

import httpx
import pytest

from pagecraft.store import HttpBlockStore, StoreError


def make_store(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler), base_url="https://api.test")
    return HttpBlockStore("secret-token", api_version="2025-09-03", client=client)


def test_sends_auth_and_version_headers():
    seen = {}

    def handler(request):
        seen.update(request.headers)
        return httpx.Response(200, json={"id": "b1", "type": "paragraph"})

    store = make_store(handler)
    store.retrieve_block("b1")

    assert seen["authorization"] == "Bearer secret-token"
    assert seen["notion-version"] == "2025-09-03"


def test_list_children_follows_cursor():
    requests = []

    def handler(request):
        requests.append(dict(request.url.params))
        if "start_cursor" not in request.url.params:
            return httpx.Response(200, json={"results": [{"id": "a"}], "has_more": True, "next_cursor": "c2"})
        return httpx.Response(200, json={"results": [{"id": "b"}], "has_more": False, "next_cursor": None})

    store = make_store(handler)

    blocks = store.list_children("page")

    assert [block["id"] for block in blocks] == ["a", "b"]
    assert len(requests) == 2
    assert requests[1]["start_cursor"] == "c2"


def test_append_children_sends_anchor():
    bodies = []

    def handler(request):
        assert request.method == "PATCH"
        assert request.url.path == "/v1/blocks/page/children"
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"results": [{"id": "new"}]})

    store = make_store(handler)

    created = store.append_children("page", [{"type": "divider", "divider": {}}], insert_after="anchor")

    assert created == [{"id": "new"}]
    assert bodies[0]["after"] == "anchor"
    assert bodies[0]["children"] == [{"type": "divider", "divider": {}}]


def test_append_without_anchor_omits_after():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"results": []})

    make_store(handler).append_children("page", [])

    assert "after" not in bodies[0]


def test_error_body_becomes_store_error():
    def handler(request):
        return httpx.Response(404, json={"object": "error", "code": "object_not_found",
                                         "message": "Could not find block"})

    store = make_store(handler)

    with pytest.raises(StoreError) as excinfo:
        store.delete_block("missing")

    assert excinfo.value.status == 404
    assert excinfo.value.code == "object_not_found"
    assert excinfo.value.message == "Could not find block"


def test_unreachable_store():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    store = make_store(handler)

    with pytest.raises(StoreError) as excinfo:
        store.retrieve_page("p1")

    assert excinfo.value.message.startswith("Failed to reach store")
    assert excinfo.value.status is None


def test_fetch_schema_is_normalized():
    def handler(request):
        assert request.url.path == "/v1/data_sources/ds1"
        return httpx.Response(200, json={"properties": {
            "Priority": {"type": "select", "select": {"options": [{"name": "High"}, {"name": "Low"}]}},
        }})

    schema = make_store(handler).fetch_schema("ds1")

    assert schema == {"Priority": {"type": "select", "options": ["High", "Low"]}}


def test_context_manager_closes_client():
    store = make_store(lambda request: httpx.Response(200, json={}))

    with store:
        pass

    assert store.client.is_closed
