"""Tests for the Loka REST API client."""

import json

import httpx
import pytest
import respx
from httpx import Response

from loka.client import LokaAPIError, LokaClient
from loka.store.schema import BrandTerm, HistoryItemCreate, HistoryStatus

BASE = "http://loka.test"


@pytest.fixture
def client():
    with LokaClient(BASE, tenant="acme") as client:
        yield client


@respx.mock
def test_list_sessions_unwraps_envelope(client):
    route = respx.get(f"{BASE}/api/sessions").mock(
        return_value=Response(
            200,
            json={
                "success": True,
                "data": [{"id": "s1", "title": "Chat", "createdAt": 1, "lastActive": 5}],
            },
        )
    )

    [session] = client.list_sessions()

    assert session.id == "s1"
    assert session.last_active == 5
    assert route.calls.last.request.headers["X-Tenant-ID"] == "acme"


@respx.mock
def test_create_session_omits_unset_fields(client):
    route = respx.post(f"{BASE}/api/sessions").mock(
        return_value=Response(
            200, json={"success": True, "data": {"sessionId": "abc", "title": "Hello"}}
        )
    )

    data = client.create_session(first_message="Hello")

    assert data == {"sessionId": "abc", "title": "Hello"}
    assert json.loads(route.calls.last.request.read()) == {"firstMessage": "Hello"}


@respx.mock
def test_clear_sessions_returns_count(client):
    respx.delete(f"{BASE}/api/sessions").mock(
        return_value=Response(200, json={"success": True, "data": {"deletedCount": 3}})
    )

    assert client.clear_sessions() == 3


@respx.mock
def test_add_brand_term(client):
    route = respx.post(f"{BASE}/api/brand-terms").mock(
        return_value=Response(
            201,
            json={
                "success": True,
                "data": {
                    "id": "b1",
                    "term": "Loka",
                    "variations": "",
                    "notes": "",
                    "translations": {},
                },
            },
        )
    )

    term = client.add_brand_term("Loka")

    assert term.id == "b1"
    assert json.loads(route.calls.last.request.read())["term"] == "Loka"


@respx.mock
def test_update_brand_term_sends_camel_case_record(client):
    route = respx.put(f"{BASE}/api/brand-terms/b1").mock(
        return_value=Response(200, json={"success": True, "data": {"id": "b1"}})
    )

    client.update_brand_term(BrandTerm(id="b1", term="Loka", translations={"th": "โลกา"}))

    body = json.loads(route.calls.last.request.read())
    assert body["translations"] == {"th": "โลกา"}


@respx.mock
def test_add_history_item(client):
    route = respx.post(f"{BASE}/api/history").mock(
        return_value=Response(
            201,
            json={
                "success": True,
                "data": {
                    "id": "h1",
                    "sourceText": "Hello world",
                    "languages": ["th"],
                    "status": "Edited",
                    "wordCount": 2,
                    "date": "2026-10-19",
                },
            },
        )
    )

    item = client.add_history_item(
        HistoryItemCreate(
            source_text="Hello world", languages=["th"], status=HistoryStatus.EDITED, word_count=2
        )
    )

    assert item.status is HistoryStatus.EDITED
    body = json.loads(route.calls.last.request.read())
    assert body["sourceText"] == "Hello world"
    assert body["wordCount"] == 2
    assert body["status"] == "Edited"


@respx.mock
def test_error_envelope_raises(client):
    respx.delete(f"{BASE}/api/sessions/ghost").mock(
        return_value=Response(404, json={"success": False, "error": "Session not found"})
    )

    with pytest.raises(LokaAPIError, match="Session not found") as exc_info:
        client.delete_session("ghost")

    assert exc_info.value.status_code == 404


@respx.mock
def test_non_json_response_raises(client):
    respx.get(f"{BASE}/api/history").mock(return_value=Response(502, text="Bad gateway"))

    with pytest.raises(LokaAPIError) as exc_info:
        client.list_history()

    assert exc_info.value.status_code == 502


@respx.mock
def test_unreachable_server_raises(client):
    respx.get(f"{BASE}/api/brand-terms").mock(side_effect=httpx.ConnectError("refused"))

    with pytest.raises(LokaAPIError, match="Failed to reach Loka server"):
        client.list_brand_terms()


@respx.mock
def test_no_tenant_header_by_default():
    route = respx.get(f"{BASE}/api/history").mock(
        return_value=Response(200, json={"success": True, "data": []})
    )

    with LokaClient(BASE) as client:
        assert client.list_history() == []

    assert "X-Tenant-ID" not in route.calls.last.request.headers
