"""
Tests for the lookup store

Coverage includes:
- get/set with positive and negative (empty) entries
- Lazy expiry on read, overwrite after expiry
- Capacity bound and single eviction per over-capacity insert
- Explicit maintenance (delete, keys, size, clear, prune_expired)
- Concurrent writers from multiple threads
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from cache_dial.stores.memory import LookupStore, create_lookup_store


class TestLookupStoreGet:
    """Tests for LookupStore.get"""

    def test_get_missing_key(self, fake_clock):
        """Should return None for a key never set"""
        store = LookupStore(10.0, 100, fake_clock)
        assert store.get("example.com") is None

    def test_get_existing_key(self, fake_clock):
        """Should return the stored addresses"""
        store = LookupStore(10.0, 100, fake_clock)
        store.set("example.com", ["10.0.0.1", "10.0.0.2"])
        assert store.get("example.com") == ("10.0.0.1", "10.0.0.2")

    def test_get_negative_entry(self, fake_clock):
        """Should return an empty tuple, not None, for a cached not-found"""
        store = LookupStore(10.0, 100, fake_clock)
        store.set("missing.invalid", [])

        result = store.get("missing.invalid")
        assert result is not None
        assert result == ()

    def test_keys_are_case_sensitive(self, fake_clock):
        """Should not normalize hostnames"""
        store = LookupStore(10.0, 100, fake_clock)
        store.set("Example.com", ["10.0.0.1"])
        assert store.get("example.com") is None
        assert store.get("Example.com") == ("10.0.0.1",)

    def test_get_before_expiry(self, fake_clock):
        """Should serve the entry until just before expires_at"""
        store = LookupStore(10.0, 100, fake_clock)
        store.set("example.com", ["10.0.0.1"])

        fake_clock.advance(9.999)
        assert store.get("example.com") == ("10.0.0.1",)

    def test_get_at_expiry(self, fake_clock):
        """Should treat an entry as absent once now reaches expires_at"""
        store = LookupStore(10.0, 100, fake_clock)
        store.set("example.com", ["10.0.0.1"])

        fake_clock.advance(10.0)
        assert store.get("example.com") is None

    def test_expired_entry_is_not_removed(self, fake_clock):
        """Should skip expired entries on read without purging them"""
        store = LookupStore(10.0, 100, fake_clock)
        store.set("example.com", ["10.0.0.1"])

        fake_clock.advance(60.0)
        assert store.get("example.com") is None
        assert store.size() == 1


class TestLookupStoreSet:
    """Tests for LookupStore.set"""

    def test_overwrite_replaces_entry(self, fake_clock):
        """Should supersede the previous entry for the same key"""
        store = LookupStore(10.0, 100, fake_clock)
        store.set("example.com", ["10.0.0.1"])
        store.set("example.com", ["10.0.0.2"])

        assert store.get("example.com") == ("10.0.0.2",)
        assert store.size() == 1

    def test_overwrite_refreshes_expiry(self, fake_clock):
        """Should restart the TTL when an expired entry is rewritten"""
        store = LookupStore(10.0, 100, fake_clock)
        store.set("example.com", ["10.0.0.1"])

        fake_clock.advance(15.0)
        assert store.get("example.com") is None

        store.set("example.com", ["10.0.0.3"])
        fake_clock.advance(5.0)
        assert store.get("example.com") == ("10.0.0.3",)

    def test_stored_addresses_are_a_copy(self, fake_clock):
        """Should not alias the caller's list"""
        store = LookupStore(10.0, 100, fake_clock)
        addresses = ["10.0.0.1"]
        store.set("example.com", addresses)
        addresses.append("10.0.0.2")

        assert store.get("example.com") == ("10.0.0.1",)


class TestLookupStoreCapacity:
    """Tests for the max_items bound"""

    def test_fill_to_capacity_without_eviction(self, fake_clock):
        """Should hold exactly max_items entries without evicting"""
        store = LookupStore(10.0, 3, fake_clock)
        for i in range(3):
            store.set(f"host{i}", ["10.0.0.1"])

        assert store.size() == 3
        assert store.evictions == 0

    def test_one_eviction_per_overflow(self, fake_clock):
        """Should evict exactly one entry when max_items + 1 hosts are inserted"""
        store = LookupStore(10.0, 3, fake_clock)
        for i in range(4):
            store.set(f"host{i}", ["10.0.0.1"])

        assert store.size() == 3
        assert store.evictions == 1
        assert store.get("host3") == ("10.0.0.1",)

    def test_size_never_exceeds_max_items(self, fake_clock):
        """Should stay within max_items after every write"""
        store = LookupStore(10.0, 5, fake_clock)
        for i in range(50):
            store.set(f"host{i}", ["10.0.0.1"])
            assert store.size() <= 5

        assert store.evictions == 45

    def test_overwrite_at_capacity_does_not_evict(self, fake_clock):
        """Should not evict when rewriting a key that is already held"""
        store = LookupStore(10.0, 3, fake_clock)
        for i in range(3):
            store.set(f"host{i}", ["10.0.0.1"])

        store.set("host1", ["10.0.0.9"])

        assert store.size() == 3
        assert store.evictions == 0
        assert sorted(store.keys()) == ["host0", "host1", "host2"]

    def test_negative_entries_count_toward_capacity(self, fake_clock):
        """Should bound negative entries the same as positive ones"""
        store = LookupStore(10.0, 2, fake_clock)
        store.set("a.invalid", [])
        store.set("b.invalid", [])
        store.set("c.invalid", [])

        assert store.size() == 2
        assert store.evictions == 1


class TestLookupStoreMaintenance:
    """Tests for delete, keys, size, clear and prune_expired"""

    def test_delete_existing(self, fake_clock):
        store = LookupStore(10.0, 10, fake_clock)
        store.set("example.com", ["10.0.0.1"])

        assert store.delete("example.com") is True
        assert store.get("example.com") is None

    def test_delete_missing(self, fake_clock):
        store = LookupStore(10.0, 10, fake_clock)
        assert store.delete("example.com") is False

    def test_clear(self, fake_clock):
        store = LookupStore(10.0, 10, fake_clock)
        store.set("a.com", ["10.0.0.1"])
        store.set("b.com", [])

        store.clear()

        assert store.size() == 0
        assert store.keys() == []

    def test_prune_expired(self, fake_clock):
        """Should remove only expired entries, and only when asked"""
        store = LookupStore(10.0, 10, fake_clock)
        store.set("old.com", ["10.0.0.1"])
        fake_clock.advance(6.0)
        store.set("new.com", ["10.0.0.2"])
        fake_clock.advance(6.0)

        assert store.prune_expired() == 1
        assert store.keys() == ["new.com"]

    def test_factory(self, fake_clock):
        store = create_lookup_store(5.0, 7, fake_clock)
        assert isinstance(store, LookupStore)
        assert store.ttl_seconds == 5.0
        assert store.max_items == 7


class TestLookupStoreConcurrency:
    """Tests for shared use from several threads"""

    def test_concurrent_writers_distinct_keys(self):
        """Should keep the bound and count every eviction under contention"""
        store = LookupStore(60.0, 10)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: store.set(f"host{i}", ["10.0.0.1"]), range(200)))

        assert store.size() == 10
        assert store.evictions == 190

    def test_concurrent_writers_same_key(self):
        """Should end with one of the written values, uncorrupted"""
        store = LookupStore(60.0, 10)
        values = [[f"10.0.0.{i}"] for i in range(1, 51)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda v: store.set("example.com", v), values))

        result = store.get("example.com")
        assert result is not None
        assert list(result) in values
        assert store.size() == 1

    def test_readers_during_writes(self):
        """Should never observe a partially written entry"""
        store = LookupStore(60.0, 10)
        store.set("example.com", ["10.0.0.1", "10.0.0.2"])
        stop = threading.Event()
        seen = []

        def reader():
            while not stop.is_set():
                seen.append(store.get("example.com"))

        threads = [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        for i in range(200):
            store.set("example.com", ["10.0.0.1", "10.0.0.2"] if i % 2 else ["10.0.0.3", "10.0.0.4"])
        stop.set()
        for t in threads:
            t.join()

        assert all(
            r in (("10.0.0.1", "10.0.0.2"), ("10.0.0.3", "10.0.0.4"))
            for r in seen
        )
