"""Tests for the in-memory cache store."""

import pytest

from service_layer.infrastructure.cache.memory_cache import MemoryCacheStore


async def test_get_set_delete(memory_store: MemoryCacheStore) -> None:
    assert memory_store.is_available()
    assert await memory_store.get("k") is None
    await memory_store.set("k", {"a": [1, 2]})
    assert await memory_store.get("k") == {"a": [1, 2]}
    await memory_store.delete("k")
    assert await memory_store.get("k") is None


async def test_values_are_copies(memory_store: MemoryCacheStore) -> None:
    value = {"items": [1]}
    await memory_store.set("k", value)
    value["items"].append(2)
    cached = await memory_store.get("k")
    cached["items"].append(3)
    assert await memory_store.get("k") == {"items": [1]}


async def test_ttl_expiry() -> None:
    clock = [0.0]
    store = MemoryCacheStore(clock=lambda: clock[0])
    await store.set("short", 1, ttl=5)
    await store.set("forever", 2)
    clock[0] = 4.9
    assert await store.get("short") == 1
    clock[0] = 5.0
    assert await store.get("short") is None
    assert store.keys() == ["forever"]


async def test_delete_missing_key_is_noop(memory_store: MemoryCacheStore) -> None:
    await memory_store.delete("missing")
    assert memory_store.keys() == []


async def test_clear(memory_store: MemoryCacheStore) -> None:
    await memory_store.set("a", 1)
    memory_store.clear()
    assert memory_store.keys() == []


async def test_rejects_non_json_values(memory_store: MemoryCacheStore) -> None:
    with pytest.raises(TypeError):
        await memory_store.set("k", object())
    assert memory_store.keys() == []


async def test_expired_entries_are_purged_on_write() -> None:
    clock = [0.0]
    store = MemoryCacheStore(clock=lambda: clock[0])
    for i in range(50):
        await store.set(f"entry:{i}", i, ttl=10)
        clock[0] += 11
    await store.set("tag", "v1")
    assert store.size == 1
    assert store.keys() == ["tag"]


async def test_maxsize_evicts_least_recently_used() -> None:
    store = MemoryCacheStore(maxsize=3)
    for key in ("a", "b", "c"):
        await store.set(key, key)
    assert await store.get("a") == "a"
    await store.set("d", "d")
    assert store.size == 3
    assert await store.get("b") is None
    assert sorted(store.keys()) == ["a", "c", "d"]
