"""
Tests for the in-memory response cache.
"""
from app.core.cache import ResponseCache, CacheKeys, CacheTTL


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_cache(**kwargs):
    clock = FakeClock()
    return ResponseCache(timer=clock, **kwargs), clock


def test_set_and_get():
    cache, _ = make_cache()
    cache.set("key", {"value": 1})
    assert cache.get("key") == {"value": 1}
    assert cache.has("key")


def test_entry_expires_after_default_ttl():
    cache, clock = make_cache(default_ttl=300)
    cache.set("key", "data")
    clock.advance(299)
    assert cache.get("key") == "data"
    clock.advance(2)
    assert cache.get("key") is None


def test_per_entry_ttl():
    cache, clock = make_cache(default_ttl=300)
    cache.set("short", "data", ttl=CacheTTL.SHORT)
    clock.advance(CacheTTL.SHORT + 1)
    assert cache.get("short") is None


def test_version_mismatch_drops_entry():
    cache, _ = make_cache()
    cache.set("key", "data", version="1.0")
    assert cache.get("key", version="2.0") is None
    # dropped, so the original version is gone too
    assert cache.get("key", version="1.0") is None


def test_is_stale():
    cache, clock = make_cache(default_ttl=600, stale_threshold=120)
    assert cache.is_stale("missing")
    cache.set("key", "data")
    assert not cache.is_stale("key")
    clock.advance(121)
    assert cache.is_stale("key")
    assert cache.get("key") == "data"
    assert not cache.is_stale("key", threshold=200)


def test_size_cap_evicts_oldest():
    cache, clock = make_cache(max_entries=3)
    for i in range(4):
        cache.set(f"k{i}", i)
        clock.advance(1)
    assert len(cache) == 3
    assert cache.get("k0") is None
    assert cache.get("k3") == 3


def test_expired_entries_evicted_before_valid_ones():
    cache, clock = make_cache(max_entries=3)
    cache.set("old", "x", ttl=5)
    cache.set("a", 1, ttl=100)
    cache.set("b", 2, ttl=100)
    clock.advance(10)
    cache.set("c", 3, ttl=100)
    assert cache.get("a") == 1
    assert cache.get("b") == 2
    assert cache.get("c") == 3


def test_remove_prefix_and_clear():
    cache, _ = make_cache()
    cache.set(CacheKeys.search_results("Paris", "all", 10), [1])
    cache.set(CacheKeys.search_results("rome", "trips", 10), [2])
    cache.set(CacheKeys.clubs(), [3])
    assert cache.remove_prefix(CacheKeys.SEARCH_PREFIX) == 2
    assert cache.get(CacheKeys.clubs()) == [3]
    cache.clear()
    assert len(cache) == 0


def test_stats_and_metadata():
    cache, clock = make_cache()
    assert cache.stats() == {"total_items": 0, "oldest_item": None}
    cache.set("first", 1)
    clock.advance(5)
    cache.set("second", 2, version="2.0")
    stats = cache.stats()
    assert stats["total_items"] == 2
    assert stats["oldest_item"] == 1000.0
    assert cache.metadata("second")["version"] == "2.0"
    assert cache.metadata("missing") is None


def test_cache_keys():
    assert CacheKeys.user_profile(5) == "user_profile_5"
    assert CacheKeys.trip_detail(9) == "trip_detail_9"
    assert CacheKeys.search_results("Bali", "trips", 5) == "search_trips_bali_5"
