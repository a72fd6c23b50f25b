"""
SiteList Backend: Collection Service Unit Tests
==================================================

What:  Tests for the read-modify-write cycle on the stored collection.
How:   CollectionService over a MemoryStore (no HTTP).

What we test:
    ✅ Read-with-default (absent / empty key → [])
    ✅ add / update / delete semantics and what is written back
    ✅ Invalid update indexes leave the stored value untouched
    ✅ Strict id equality used by delete
    ✅ Corrupt stored values and store failures propagate as StoreError
    ✅ Concurrent adds in one process are not lost
"""

import asyncio
import json

import pytest

from sitelist.exceptions import CollectionCorruptError, InvalidIndexError, StoreError
from sitelist.services.collection_service import (
    CollectionService,
    coerce_index,
    ids_match,
    record_id,
)
from sitelist.storage.memory import MemoryStore

from tests.conftest import FailingStore, YieldingStore


def stored(store: MemoryStore, key: str = "websites"):
    return json.loads(store._data[key])


class TestHelpers:

    def test_record_id(self):
        assert record_id({"id": "a"}) == "a"
        assert record_id({"title": "no id"}) is None
        assert record_id("plain string") is None
        assert record_id(None) is None

    @pytest.mark.parametrize(
        "left,right",
        [("a", "a"), (1, 1), (1, 1.0), (True, True), (None, None)],
    )
    def test_ids_match(self, left, right):
        assert ids_match(left, right)

    @pytest.mark.parametrize(
        "left,right",
        [("1", 1), (1, True), (0, False), ("a", "b"), ({"k": 1}, {"k": 1}), ([1], [1]), (None, "")],
    )
    def test_ids_do_not_match(self, left, right):
        assert not ids_match(left, right)

    @pytest.mark.parametrize("value,expected", [(0, 0), (3, 3), (-1, -1), (2.0, 2)])
    def test_coerce_index_accepts_integers(self, value, expected):
        assert coerce_index(value) == expected

    @pytest.mark.parametrize("value", [None, True, False, "1", 1.5, [0], {"i": 0}])
    def test_coerce_index_rejects_others(self, value):
        assert coerce_index(value) is None


class TestList:

    @pytest.mark.asyncio
    async def test_absent_key_is_empty(self, collection_service):
        assert await collection_service.list_websites() == []

    @pytest.mark.asyncio
    async def test_empty_value_is_empty(self, memory_store, collection_service):
        await memory_store.write("websites", b"")
        assert await collection_service.list_websites() == []

    @pytest.mark.asyncio
    async def test_returns_stored_array(self, memory_store, collection_service):
        await memory_store.write("websites", b'[{"id":"a"},2,"x",null]')
        assert await collection_service.list_websites() == [{"id": "a"}, 2, "x", None]

    @pytest.mark.asyncio
    async def test_list_does_not_create_key(self, memory_store, collection_service):
        await collection_service.list_websites()
        assert "websites" not in memory_store

    @pytest.mark.asyncio
    async def test_non_array_value_is_corrupt(self, memory_store, collection_service):
        await memory_store.write("websites", b'{"id": "a"}')
        with pytest.raises(CollectionCorruptError):
            await collection_service.list_websites()

    @pytest.mark.asyncio
    async def test_invalid_json_is_corrupt(self, memory_store, collection_service):
        await memory_store.write("websites", b"not json")
        with pytest.raises(CollectionCorruptError):
            await collection_service.list_websites()

    @pytest.mark.asyncio
    async def test_custom_key(self, memory_store):
        service = CollectionService(memory_store, key="bookmarks")
        await service.add_website({"id": 1})
        assert "websites" not in memory_store
        assert stored(memory_store, "bookmarks") == [{"id": 1}]


class TestAdd:

    @pytest.mark.asyncio
    async def test_first_add_creates_key(self, memory_store, collection_service):
        length = await collection_service.add_website({"id": "a", "title": "A"})
        assert length == 1
        assert stored(memory_store) == [{"id": "a", "title": "A"}]

    @pytest.mark.asyncio
    async def test_appends_in_order(self, memory_store, collection_service):
        for i in range(3):
            await collection_service.add_website({"id": i})
        assert stored(memory_store) == [{"id": 0}, {"id": 1}, {"id": 2}]

    @pytest.mark.asyncio
    async def test_duplicates_are_kept(self, memory_store, collection_service):
        await collection_service.add_website({"id": "a"})
        await collection_service.add_website({"id": "a"})
        assert stored(memory_store) == [{"id": "a"}, {"id": "a"}]

    @pytest.mark.asyncio
    async def test_missing_data_is_stored_as_null(self, memory_store, collection_service):
        await collection_service.add_website(None)
        assert stored(memory_store) == [None]

    @pytest.mark.asyncio
    async def test_encoding_is_compact_utf8(self, memory_store, collection_service):
        await collection_service.add_website({"id": "é", "n": 1})
        assert memory_store._data["websites"] == '[{"id":"é","n":1}]'.encode("utf-8")


class TestUpdate:

    @pytest.mark.asyncio
    async def test_replaces_element(self, memory_store, collection_service):
        await memory_store.write("websites", b'[{"id":"a"},{"id":"b"},{"id":"c"}]')
        await collection_service.update_website(1, {"id": "B"})
        assert stored(memory_store) == [{"id": "a"}, {"id": "B"}, {"id": "c"}]

    @pytest.mark.asyncio
    async def test_last_position(self, memory_store, collection_service):
        await memory_store.write("websites", b'[{"id":"a"},{"id":"b"}]')
        await collection_service.update_website(1, {"id": "z"})
        assert stored(memory_store)[-1] == {"id": "z"}

    @pytest.mark.asyncio
    async def test_integral_float_index(self, memory_store, collection_service):
        await memory_store.write("websites", b'[{"id":"a"}]')
        await collection_service.update_website(0.0, {"id": "x"})
        assert stored(memory_store) == [{"id": "x"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("index", [-1, 2, 100, None, "0", True, 0.5])
    async def test_invalid_index_leaves_collection_unchanged(self, memory_store, collection_service, index):
        original = b'[{"id":"a"},{"id":"b"}]'
        await memory_store.write("websites", original)
        with pytest.raises(InvalidIndexError):
            await collection_service.update_website(index, {"id": "x"})
        assert memory_store._data["websites"] == original

    @pytest.mark.asyncio
    async def test_update_on_empty_collection(self, memory_store, collection_service):
        with pytest.raises(InvalidIndexError):
            await collection_service.update_website(0, {"id": "x"})
        assert "websites" not in memory_store


class TestDelete:

    @pytest.mark.asyncio
    async def test_removes_all_matches_preserving_order(self, memory_store, collection_service):
        await memory_store.write(
            "websites",
            b'[{"id":"a"},{"id":"b","n":1},{"id":"c"},{"id":"b","n":2},{"id":"d"}]',
        )
        removed = await collection_service.delete_website("b")
        assert removed == 2
        assert stored(memory_store) == [{"id": "a"}, {"id": "c"}, {"id": "d"}]

    @pytest.mark.asyncio
    async def test_no_match_still_writes(self, memory_store, collection_service):
        removed = await collection_service.delete_website("missing")
        assert removed == 0
        assert stored(memory_store) == []

    @pytest.mark.asyncio
    async def test_strict_equality(self, memory_store, collection_service):
        await memory_store.write("websites", b'[{"id":1},{"id":"1"},{"id":true}]')
        await collection_service.delete_website(1)
        assert stored(memory_store) == [{"id": "1"}, {"id": True}]

    @pytest.mark.asyncio
    async def test_missing_id_removes_records_without_id(self, memory_store, collection_service):
        await memory_store.write("websites", b'[{"id":"a"},{"title":"no id"},"loose",null]')
        await collection_service.delete_website(None)
        assert stored(memory_store) == [{"id": "a"}]

    @pytest.mark.asyncio
    async def test_delete_everything_leaves_empty_array(self, memory_store, collection_service):
        await collection_service.add_website({"id": "a"})
        await collection_service.delete_website("a")
        assert memory_store._data["websites"] == b"[]"


class TestFailures:

    @pytest.mark.asyncio
    async def test_write_failure_propagates(self):
        store = FailingStore(fail_writes=True)
        service = CollectionService(store)
        with pytest.raises(StoreError):
            await service.add_website({"id": "a"})
        assert "websites" not in store

    @pytest.mark.asyncio
    async def test_read_failure_propagates(self):
        service = CollectionService(FailingStore(fail_reads=True, fail_writes=False))
        with pytest.raises(StoreError):
            await service.list_websites()

    @pytest.mark.asyncio
    async def test_lock_released_after_failure(self):
        store = FailingStore(fail_writes=True)
        service = CollectionService(store)
        with pytest.raises(StoreError):
            await service.add_website({"id": "a"})
        store.fail_writes = False
        await service.add_website({"id": "b"})
        assert stored(store) == [{"id": "b"}]


class TestConcurrency:

    @pytest.mark.asyncio
    async def test_concurrent_adds_are_not_lost(self):
        store = YieldingStore()
        service = CollectionService(store)
        await asyncio.gather(*(service.add_website({"id": i}) for i in range(25)))
        ids = sorted(r["id"] for r in stored(store))
        assert ids == list(range(25))

    @pytest.mark.asyncio
    async def test_concurrent_add_and_delete(self):
        store = YieldingStore({"websites": b'[{"id":"x"},{"id":"y"}]'})
        service = CollectionService(store)
        await asyncio.gather(
            service.add_website({"id": "z"}),
            service.delete_website("x"),
            service.add_website({"id": "w"}),
        )
        assert sorted(r["id"] for r in stored(store)) == ["w", "y", "z"]
