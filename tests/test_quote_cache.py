from app.services.quote_cache import QuoteCache


def test_get_missing_key_returns_none(clock):
    cache = QuoteCache(ttl_seconds=900, clock=clock)
    assert cache.get("GOLD_PRICE") is None


def test_value_served_until_expiry(clock):
    cache = QuoteCache(ttl_seconds=900, clock=clock)
    cache.set("GOLD_PRICE", {"pricePerGram": 1.0})

    clock.advance(899)
    assert cache.get("GOLD_PRICE") == {"pricePerGram": 1.0}

    # Expiry is exclusive: now == expiry is already stale
    clock.advance(1)
    assert cache.get("GOLD_PRICE") is None


def test_set_overwrites_and_restarts_ttl(clock):
    cache = QuoteCache(ttl_seconds=10, clock=clock)
    cache.set("SILVER_PRICE", 1)
    clock.advance(8)
    cache.set("SILVER_PRICE", 2)
    clock.advance(8)

    assert cache.get("SILVER_PRICE") == 2
    assert len(cache) == 1
