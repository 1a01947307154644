"""In-memory backend: filters, ordering, pagination, writes."""

import asyncio

from hireboard.core.storage.base import AnyOf, Eq, ILike, Sort
from hireboard.core.storage.memory_store import MemoryStore


def _store() -> MemoryStore:
    return MemoryStore(
        {
            "people": [
                {"id": "p1", "name": "Asha Rao", "email": "asha@example.com", "team": "core", "rank": 3},
                {"id": "p2", "name": "Dev Shah", "email": "dev@example.com", "team": "web", "rank": 1},
                {"id": "p3", "name": "Meera Iyer", "email": "meera@devshop.io", "team": "core", "rank": 2},
                {"id": "p4", "name": "Om Das", "email": "om@example.com", "team": "web", "rank": None},
            ]
        }
    )


def test_fetch_page_filters_sorts_and_counts():
    store = _store()

    async def run():
        return await store.fetch_page(
            "people",
            filters=[AnyOf(ILike("name", "DEV"), ILike("email", "dev"))],
            order=[Sort("rank")],
        )

    page = asyncio.run(run())
    assert [r["id"] for r in page.rows] == ["p2", "p3"]
    assert page.count == 2


def test_pagination_reports_total_count():
    store = _store()

    page = asyncio.run(store.fetch_page("people", order=[Sort("id")], offset=1, limit=2))

    assert [r["id"] for r in page.rows] == ["p2", "p3"]
    assert page.count == 4


def test_nulls_sort_last_ascending_and_first_descending():
    store = _store()

    ascending = asyncio.run(store.fetch_page("people", order=[Sort("rank")]))
    descending = asyncio.run(store.fetch_page("people", order=[Sort("rank", ascending=False)]))

    assert [r["id"] for r in ascending.rows] == ["p2", "p3", "p1", "p4"]
    assert [r["id"] for r in descending.rows] == ["p4", "p1", "p3", "p2"]


def test_multi_key_sort():
    store = _store()

    page = asyncio.run(
        store.fetch_page("people", filters=[Eq("team", "core")], order=[Sort("team"), Sort("rank", False)])
    )

    assert [r["id"] for r in page.rows] == ["p1", "p3"]


def test_insert_fills_defaults_with_increasing_timestamps():
    store = MemoryStore()

    rows = asyncio.run(store.insert("notes", [{"content": "a"}, {"content": "b"}]))

    assert all(row["id"] for row in rows)
    assert rows[0]["created_at"] < rows[1]["created_at"]


def test_update_returns_none_for_missing_row():
    store = _store()

    assert asyncio.run(store.update("people", "nope", {"team": "x"})) is None
    updated = asyncio.run(store.update("people", "p1", {"team": "web", "id": "hijack"}))
    assert updated["team"] == "web"
    assert updated["id"] == "p1"


def test_returned_rows_are_copies():
    store = _store()

    page = asyncio.run(store.fetch_page("people", filters=[Eq("id", "p1")]))
    page.rows[0]["team"] = "mutated"

    assert store.rows("people")[0]["team"] == "core"


def test_upsert_merges_on_conflict_keys():
    store = MemoryStore()

    async def run():
        first = await store.upsert("answers", [{"a": 1, "b": 2, "value": "x"}], on_conflict=("a", "b"))
        second = await store.upsert("answers", [{"a": 1, "b": 2, "value": "y"}], on_conflict=("a", "b"))
        third = await store.upsert("answers", [{"a": 1, "b": 3, "value": "z"}], on_conflict=("a", "b"))
        return first, second, third

    first, second, third = asyncio.run(run())

    assert first[0]["id"] == second[0]["id"]
    assert second[0]["value"] == "y"
    assert third[0]["id"] != first[0]["id"]
    assert len(store.rows("answers")) == 2


def test_fetch_one():
    store = _store()

    assert asyncio.run(store.fetch_one("people", [Eq("email", "om@example.com")]))["id"] == "p4"
    assert asyncio.run(store.fetch_one("people", [Eq("email", "nobody@example.com")])) is None
