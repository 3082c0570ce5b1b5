from datetime import date, timedelta

import pytest

from app import rate_limiter
from app.rate_limiter import check_rate_limit
from tests.conftest import auth_headers


@pytest.fixture(autouse=True)
def clear_counters():
    rate_limiter.memory_cache.clear()
    yield
    rate_limiter.memory_cache.clear()


class FakeRedis:
    def __init__(self, counts=None):
        self.store = dict(counts or {})
        self.ttls = {}

    def get(self, key):
        return self.store.get(key)

    def ttl(self, key):
        return self.ttls.get(key, -2)

    def set(self, key, value, ex=None):
        self.store[key] = str(value)
        self.ttls[key] = ex


def test_memory_only_limit():
    results = [check_rate_limit("test:ip", 3, 60)[0] for _ in range(4)]
    assert results == [True, True, True, False]


def test_counts_are_per_key():
    for _ in range(2):
        check_rate_limit("test:a", 2, 60)
    assert check_rate_limit("test:a", 2, 60)[0] is False
    assert check_rate_limit("test:b", 2, 60)[0] is True


def test_window_expiry_resets_count(monkeypatch):
    now = [1_000_000]
    monkeypatch.setattr(rate_limiter.time, "time", lambda: now[0])

    check_rate_limit("test:ip", 1, 60)
    assert check_rate_limit("test:ip", 1, 60)[0] is False

    now[0] += 61
    assert check_rate_limit("test:ip", 1, 60)[0] is True


def test_counter_seeded_from_redis():
    redis = FakeRedis({"test:ip": "5"})
    redis.ttls["test:ip"] = 30

    allowed, count, ttl = check_rate_limit("test:ip", 5, 60, client=redis)

    assert allowed is False
    assert count == 5
    assert 0 < ttl <= 30


def test_counter_synced_to_redis_periodically(monkeypatch):
    now = [1_000_000]
    monkeypatch.setattr(rate_limiter.time, "time", lambda: now[0])
    redis = FakeRedis()

    check_rate_limit("test:ip", 5, 60, client=redis)
    assert "test:ip" not in redis.store

    now[0] += rate_limiter.MEMORY_CACHE_SYNC_INTERVAL
    check_rate_limit("test:ip", 5, 60, client=redis)

    assert redis.store["test:ip"] == "2"
    assert redis.ttls["test:ip"] == 60


def test_booking_endpoint_returns_429_when_enabled(client, monkeypatch, make_tourist, bookable_guide):
    monkeypatch.setattr(rate_limiter, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(rate_limiter, "_get_optional_redis_client", lambda: None)
    guide, itinerary = bookable_guide
    tourist = make_tourist()
    payload = {
        "guide_id": guide.id,
        "itinerary_id": itinerary.id,
        "booking_date": (date.today() + timedelta(days=4)).isoformat(),
    }

    statuses = [
        client.post("/api/create-booking", json=payload, headers=auth_headers(tourist)).status_code
        for _ in range(21)
    ]

    # The first request books, the next nineteen hit the duplicate check, the last is throttled
    assert statuses[0] == 201
    assert set(statuses[1:20]) == {409}
    assert statuses[20] == 429


def test_throttled_response_has_retry_after(client, monkeypatch, make_tourist, make_guide):
    monkeypatch.setattr(rate_limiter, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(rate_limiter, "_get_optional_redis_client", lambda: None)
    tourist = make_tourist()
    guide = make_guide()

    response = None
    for _ in range(51):
        response = client.post("/api/save-guide", json={"guide_id": guide.id}, headers=auth_headers(tourist))

    assert response.status_code == 429
    assert int(response.headers["Retry-After"]) > 0
    assert response.json()["detail"]["limit"] == 50
