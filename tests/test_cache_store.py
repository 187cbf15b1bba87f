#!/usr/bin/env python
"""Tests for the bounded TTL/LRU response cache.

Covers:
- Freshness and lazy TTL expiry
- Size bound and least-recently-used eviction
- delete / clear / clear_pattern / clear_expired
- Invalid patterns leave the store untouched

Run with: pytest tests/test_cache_store.py -v
"""

import pytest

from cache import CacheStore, InvalidPatternError, RegexKeyPattern, prefix_pattern


# === TTL ===

def test_set_then_get_returns_value(store):
    store.set("k", {"papers": []})
    assert store.get("k") == {"papers": []}


def test_expired_entry_is_absent_and_removed(store, clock):
    store.set("k", "v", ttl=10)
    clock.advance(10.001)

    assert store.get("k") is None
    assert "k" not in store.get_stats()["keys"]
    assert store.get_stats()["size"] == 0


def test_entry_still_fresh_at_exact_ttl(store, clock):
    """Expiry is strict: now must be past timestamp + ttl."""
    store.set("k", "v", ttl=10)
    clock.advance(10)
    assert store.get("k") == "v"


def test_default_ttl_applies(store, clock):
    store.set("k", "v")
    clock.advance(59)
    assert store.get("k") == "v"
    clock.advance(2)
    assert store.get("k") is None


def test_set_refreshes_timestamp(store, clock):
    store.set("k", "old", ttl=10)
    clock.advance(8)
    store.set("k", "new", ttl=10)
    clock.advance(8)
    assert store.get("k") == "new"


def test_get_default_for_missing_key(store):
    sentinel = object()
    assert store.get("missing", sentinel) is sentinel


def test_clear_expired(store, clock):
    store.set("short", 1, ttl=5)
    store.set("long", 2, ttl=500)
    clock.advance(6)

    assert store.clear_expired() == 1
    assert store.get_stats()["keys"] == ["long"]


# === Size bound / LRU ===

def test_size_never_exceeds_max():
    store = CacheStore(max_size=3)
    for i in range(20):
        store.set(f"k{i}", i)
        assert store.get_stats()["size"] <= 3
    assert len(store) == 3


def test_lru_scenario():
    """maxSize=2: set a, set b, touch a, set c -> b is evicted."""
    store = CacheStore(max_size=2)
    store.set("a", 1)
    store.set("b", 2)
    assert store.get("a") == 1
    store.set("c", 3)

    assert set(store.get_stats()["keys"]) == {"a", "c"}
    assert store.get("b") is None


def test_oldest_evicted_without_access():
    store = CacheStore(max_size=3)
    for key in ["a", "b", "c", "d"]:
        store.set(key, key)
    assert set(store.get_stats()["keys"]) == {"b", "c", "d"}


def test_set_marks_key_most_recently_used():
    store = CacheStore(max_size=2)
    store.set("a", 1)
    store.set("b", 2)
    store.set("a", 10)
    store.set("c", 3)

    assert set(store.get_stats()["keys"]) == {"a", "c"}
    assert store.get("a") == 10


def test_updating_existing_key_never_evicts():
    store = CacheStore(max_size=2)
    store.set("a", 1)
    store.set("b", 2)
    store.set("b", 20)
    assert set(store.get_stats()["keys"]) == {"a", "b"}


def test_expired_get_does_not_count_as_use(clock):
    store = CacheStore(max_size=2, clock=clock)
    store.set("a", 1, ttl=1)
    store.set("b", 2)
    clock.advance(2)
    assert store.get("a") is None
    store.set("c", 3)
    store.set("d", 4)
    assert set(store.get_stats()["keys"]) == {"c", "d"}


def test_max_size_must_be_positive():
    with pytest.raises(ValueError):
        CacheStore(max_size=0)


# === delete / clear ===

def test_delete(store):
    store.set("k", "v")
    assert store.delete("k") is True
    assert store.delete("k") is False
    assert store.get("k") is None


def test_delete_then_reinsert_keeps_bound():
    store = CacheStore(max_size=2)
    store.set("a", 1)
    store.set("b", 2)
    store.delete("a")
    store.set("c", 3)
    assert set(store.get_stats()["keys"]) == {"b", "c"}


def test_clear(store):
    store.set("a", 1)
    store.set("b", 2)
    store.clear()
    assert store.get_stats() == {"size": 0, "max_size": 5, "keys": []}


# === clear_pattern ===

def test_clear_pattern_by_prefix(store):
    store.set("search:q=a", 1)
    store.set("search:q=b", 2)
    store.set("citations:id=1", 3)

    assert store.clear_pattern("^search:") == 2
    assert store.get_stats()["keys"] == ["citations:id=1"]


def test_clear_pattern_matches_anywhere_in_key(store):
    store.set('citations:limit=10&paper_id="abc"', 1)
    store.set('references:limit=10&paper_id="abc"', 2)
    store.set('references:limit=10&paper_id="xyz"', 3)

    assert store.clear_pattern('paper_id="abc"') == 2
    assert len(store) == 1


def test_clear_pattern_no_match(store):
    store.set("a", 1)
    assert store.clear_pattern("^zzz") == 0
    assert len(store) == 1


def test_invalid_pattern_raises_and_leaves_store_untouched(store):
    store.set("search:q=a", 1)
    store.set("search:q=b", 2)

    with pytest.raises(InvalidPatternError) as exc_info:
        store.clear_pattern("search:(")

    assert exc_info.value.pattern == "search:("
    assert isinstance(exc_info.value, ValueError)
    assert len(store) == 2


def test_clear_pattern_accepts_matcher(store):
    store.set("search:q=a", 1)
    store.set("searching:q=b", 2)
    store.set("author:x=1", 3)

    assert store.clear_pattern(prefix_pattern("search")) == 1
    assert store.clear_pattern(RegexKeyPattern("^author")) == 1
    assert store.get_stats()["keys"] == ["searching:q=b"]


def test_invalid_pattern_fails_at_construction():
    with pytest.raises(InvalidPatternError):
        RegexKeyPattern("[unclosed")
