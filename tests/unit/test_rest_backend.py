"""REST backend request encoding and error mapping, using httpx.MockTransport."""

import asyncio
import json

import httpx
import pytest

from hireboard.core.errors import BackendError
from hireboard.core.storage.base import AnyOf, Eq, ILike, Sort
from hireboard.integrations.rest_backend import (
    RestBackend,
    encode_filters,
    parse_content_range,
)
from hireboard.services.candidates import CandidatesService
from hireboard.ui.kanban import KanbanBoard

BASE_URL = "https://project.example.co"


def _backend(handler) -> RestBackend:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RestBackend(base_url=BASE_URL, api_key="anon-key", client=client)


def test_encode_filters():
    params = encode_filters(
        [
            Eq("status", "active"),
            Eq("archived", False),
            Eq("deleted_at", None),
            ILike("title", "node.js"),
            AnyOf(ILike("name", "ra"), ILike("email", "ra")),
        ]
    )

    assert params == [
        ("status", "eq.active"),
        ("archived", "eq.false"),
        ("deleted_at", "is.null"),
        ("title", "ilike.*node.js*"),
        ("or", "(name.ilike.*ra*,email.ilike.*ra*)"),
    ]


def test_dotted_values_are_sent_verbatim_outside_or_groups():
    params = encode_filters(
        [
            Eq("email", "aarav.singh0@example.com"),
            ILike("title", "Sr. Engineer"),
            AnyOf(ILike("title", "Sr. Engineer"), Eq("email", "a.b@example.com")),
        ]
    )

    assert params == [
        ("email", "eq.aarav.singh0@example.com"),
        ("title", "ilike.*Sr. Engineer*"),
        ("or", '(title.ilike."*Sr. Engineer*",email.eq."a.b@example.com")'),
    ]


@pytest.mark.parametrize(
    "header,expected",
    [("0-9/25", 25), ("*/0", 0), ("0-9/*", 7), (None, 7), ("garbage", 7)],
)
def test_parse_content_range(header, expected):
    assert parse_content_range(header, fallback=7) == expected


def test_fetch_page_sends_range_and_reads_count():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = list(request.url.params.multi_items())
        seen["headers"] = request.headers
        return httpx.Response(
            200,
            json=[{"id": "j1"}, {"id": "j2"}],
            headers={"Content-Range": "10-11/25"},
        )

    async def run():
        async with _backend(handler) as backend:
            return await backend.fetch_page(
                "jobs",
                filters=[ILike("title", "dev"), Eq("status", "active")],
                order=[Sort("order")],
                offset=10,
                limit=10,
            )

    page = asyncio.run(run())

    assert [r["id"] for r in page.rows] == ["j1", "j2"]
    assert page.count == 25
    assert seen["path"] == "/rest/v1/jobs"
    assert seen["params"] == [
        ("select", "*"),
        ("title", "ilike.*dev*"),
        ("status", "eq.active"),
        ("order", "order.asc"),
        ("offset", "10"),
        ("limit", "10"),
    ]
    assert seen["headers"]["Prefer"] == "count=exact"
    assert seen["headers"]["apikey"] == "anon-key"
    assert seen["headers"]["Authorization"] == "Bearer anon-key"


def test_update_patches_by_id():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["params"] = dict(request.url.params)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{"id": "c1", "stage": "tech"}])

    row = asyncio.run(_backend(handler).update("candidates", "c1", {"stage": "tech"}))

    assert row == {"id": "c1", "stage": "tech"}
    assert seen == {"method": "PATCH", "params": {"id": "eq.c1"}, "body": {"stage": "tech"}}


def test_update_of_missing_row_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    assert asyncio.run(_backend(handler).update("candidates", "missing", {"stage": "tech"})) is None


def test_upsert_uses_merge_duplicates():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["prefer"] = request.headers["Prefer"]
        return httpx.Response(201, json=json.loads(request.content))

    rows = asyncio.run(
        _backend(handler).upsert(
            "assessment_responses",
            [{"assessment_id": "a1", "candidate_id": "c1", "responses": {}}],
            on_conflict=("assessment_id", "candidate_id"),
        )
    )

    assert rows[0]["assessment_id"] == "a1"
    assert seen["params"] == {"on_conflict": "assessment_id,candidate_id"}
    assert "resolution=merge-duplicates" in seen["prefer"]


def test_http_error_becomes_backend_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"message": "duplicate key value"})

    with pytest.raises(BackendError) as excinfo:
        asyncio.run(_backend(handler).insert("jobs", [{"title": "x"}]))

    assert excinfo.value.status_code == 409
    assert "duplicate key value" in str(excinfo.value)


def test_transport_error_becomes_backend_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendError, match="Network error"):
        asyncio.run(_backend(handler).fetch_page("jobs"))


def test_missing_credentials_are_rejected(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)

    with pytest.raises(ValueError):
        RestBackend()


@pytest.mark.parametrize("body", [["bad gateway"], "upstream timeout", None])
def test_non_object_error_body_becomes_backend_error(body):
    def handler(request: httpx.Request) -> httpx.Response:
        if body is None:
            return httpx.Response(502, text="<html>Bad Gateway</html>")
        return httpx.Response(502, json=body)

    with pytest.raises(BackendError) as excinfo:
        asyncio.run(_backend(handler).update("jobs", "j1", {"order": 2}))

    assert excinfo.value.status_code == 502


def test_gateway_error_reverts_optimistic_stage_move():
    row = {"id": "c1", "name": "Asha Rao", "email": "asha@example.com", "stage": "applied", "job_id": "j1"}

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=[row], headers={"Content-Range": "0-0/1"})
        return httpx.Response(502, json=["bad gateway"])

    async def run():
        async with _backend(handler) as backend:
            board = KanbanBoard(CandidatesService(backend))
            await board.load()
            moved = await board.move("c1", "tech")
            return board, moved

    board, moved = asyncio.run(run())

    assert moved is False
    assert [c.stage for c in board.candidates] == ["applied"]
    assert board.error.startswith("HTTP 502")
