from localization.core.cache import TTLCache
from tests.conftest import FakeClock


def make_cache(ttl: float = 60) -> tuple[TTLCache, FakeClock]:
    clock = FakeClock()
    return TTLCache(ttl_seconds=ttl, clock=clock, name="test"), clock


class TestTTLCache:
    def test_get_returns_fresh_value(self):
        cache, clock = make_cache()
        cache.set("en", "English")
        clock.advance(59)

        assert cache.get("en") == "English"

    def test_entry_expires_at_ttl(self):
        cache, clock = make_cache()
        cache.set("en", "English")
        clock.advance(60)

        assert cache.get("en") is None
        assert len(cache) == 0  # dropped on access

    def test_custom_ttl_per_entry(self):
        cache, clock = make_cache()
        cache.set("short", 1, ttl_seconds=5)
        cache.set("long", 2)
        clock.advance(10)

        assert cache.get("short") is None
        assert cache.get("long") == 2

    def test_none_is_never_cached(self):
        cache, _ = make_cache()
        cache.set("missing", None)

        assert "missing" not in cache
        assert len(cache) == 0

    def test_invalidate(self):
        cache, _ = make_cache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.invalidate("a")
        cache.invalidate("unknown")

        assert cache.get("a") is None
        assert cache.get("b") == 2

    def test_invalidate_all(self):
        cache, _ = make_cache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.invalidate_all()

        assert len(cache) == 0

    def test_cleanup_expired(self):
        cache, clock = make_cache()
        cache.set("old", 1)
        clock.advance(30)
        cache.set("new", 2)
        clock.advance(40)

        assert cache.cleanup_expired() == 1
        assert cache.get("new") == 2

    def test_instances_are_isolated(self):
        first, _ = make_cache()
        second, _ = make_cache()
        first.set("key", "value")

        assert second.get("key") is None
