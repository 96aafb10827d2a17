from gdp_radar.utils.ttl_cache import DAY_SECONDS, TTLCache, countries_key, gdp_key


def test_keys_are_deterministic():
    assert countries_key() == "countries"
    assert gdp_key("USA", 1980, 2023) == "gdp-USA-1980-2023"
    assert gdp_key("USA", 1980, 2023) == gdp_key("USA", 1980, 2023)


def test_fresh_until_ttl(clock):
    cache = TTLCache(clock=clock)
    cache.set("k", [1, 2])

    clock.advance(DAY_SECONDS - 0.001)
    assert cache.get("k") == [1, 2]
    assert "k" in cache

    # age == ttl is already stale
    clock.advance(0.001)
    assert cache.get("k") is None
    assert "k" not in cache


def test_set_overwrites_with_new_timestamp(clock):
    cache = TTLCache(ttl_seconds=10, clock=clock)
    first = cache.set("k", "old")
    clock.advance(20)
    second = cache.set("k", "new")

    assert cache.get("k") == "new"
    assert second.timestamp == first.timestamp + 20
    assert len(cache) == 1


def test_empty_payload_is_still_a_hit(clock):
    cache = TTLCache(clock=clock)
    cache.set("k", [])
    assert cache.get("k") == []
