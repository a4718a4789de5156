from __future__ import annotations

import asyncio

import pytest

from edgecache.fetch import (
    CacheConfig,
    CachedFetcher,
    CacheEnvelope,
    RequestCoalescer,
    generate_cache_key,
)
from edgecache.store import TTLCacheStore


def run_async(coro):
    return asyncio.run(coro)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingProducer:
    def __init__(self, value, *, delay_s: float = 0.0) -> None:
        self.value = value
        self.delay_s = delay_s
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        return self.value


class RecordingMetrics:
    def __init__(self) -> None:
        self.events: list[tuple[str, int, dict[str, str]]] = []

    def incr(self, name, value=1, *, tags=None):
        self.events.append((name, value, dict(tags or {})))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock):
    cache = TTLCacheStore(sweep_interval_s=None, clock=clock)
    yield cache
    cache.close()


def test_first_call_misses_then_hits(store: TTLCacheStore):
    fetcher = CachedFetcher(store)
    produce = CountingProducer({"id": 1, "name": "Test"})

    async def scenario():
        first = await fetcher.with_cache("test-key", produce)
        second = await fetcher.with_cache("test-key", produce)
        return first, second

    first, second = run_async(scenario())
    assert first.data == {"id": 1, "name": "Test"}
    assert first.error is None
    assert first.headers["X-Cache"] == "MISS"
    assert second.headers["X-Cache"] == "HIT"
    assert second.data is first.data
    assert produce.calls == 1


def test_default_cache_control_header(store: TTLCacheStore):
    fetcher = CachedFetcher(store)
    envelope = run_async(fetcher.with_cache("k", CountingProducer(1)))
    assert envelope.headers["Cache-Control"] == (
        "public, max-age=300, stale-while-revalidate=3600"
    )


def test_explicit_cache_control_overrides_default(store: TTLCacheStore):
    fetcher = CachedFetcher(store)
    config = CacheConfig(ttl_s=60, cache_control="private, max-age=5")

    async def scenario():
        miss = await fetcher.with_cache("k", CountingProducer(1), config)
        hit = await fetcher.with_cache("k", CountingProducer(2), config)
        return miss, hit

    miss, hit = run_async(scenario())
    assert miss.headers["Cache-Control"] == "private, max-age=5"
    assert hit.headers["Cache-Control"] == "private, max-age=5"
    assert hit.data == 1


def test_fresh_value_expires_after_ttl_without_stale_window(store, clock):
    fetcher = CachedFetcher(store)
    produce = CountingProducer("v")
    config = CacheConfig(ttl_s=1, stale_while_revalidate_s=0)

    async def scenario():
        first = await fetcher.with_cache("k", produce, config)
        second = await fetcher.with_cache("k", produce, config)
        clock.advance(1.1)
        third = await fetcher.with_cache("k", produce, config)
        return first, second, third

    first, second, third = run_async(scenario())
    assert [e.headers["X-Cache"] for e in (first, second, third)] == ["MISS", "HIT", "MISS"]
    assert produce.calls == 2


def test_stale_window_serves_cached_value_then_recomputes(store, clock):
    fetcher = CachedFetcher(store)
    produce = CountingProducer({"id": 1})
    config = CacheConfig(ttl_s=1, stale_while_revalidate_s=2)

    async def scenario():
        first = await fetcher.with_cache("stale-key", produce, config)
        clock.advance(1.1)
        stale = await fetcher.with_cache("stale-key", produce, config)
        clock.advance(1.1)
        refreshed = await fetcher.with_cache("stale-key", produce, config)
        return first, stale, refreshed

    first, stale, refreshed = run_async(scenario())
    assert first.headers["Cache-Control"] == "public, max-age=1, stale-while-revalidate=2"
    assert first.headers["X-Cache"] == "MISS"
    assert stale.headers["X-Cache"] == "HIT"
    assert stale.data == {"id": 1}
    assert refreshed.headers["X-Cache"] == "MISS"
    assert produce.calls == 2


def test_stored_ttl_is_the_longer_of_fresh_and_stale_windows(store):
    fetcher = CachedFetcher(store)
    run_async(
        fetcher.with_cache(
            "k", CountingProducer(1), CacheConfig(ttl_s=10, stale_while_revalidate_s=20)
        )
    )
    assert store.get_ttl("k") == pytest.approx(20)

    run_async(
        fetcher.with_cache(
            "fresh-only", CountingProducer(1), CacheConfig(ttl_s=30, stale_while_revalidate_s=5)
        )
    )
    assert store.get_ttl("fresh-only") == pytest.approx(30)


def test_errors_are_reported_and_never_cached(store):
    fetcher = CachedFetcher(store)
    error = RuntimeError("Test error")

    async def failing():
        raise error

    async def scenario():
        failed = await fetcher.with_cache("error-key", failing)
        assert store.has("error-key") is False
        recovered = await fetcher.with_cache("error-key", CountingProducer({"id": 1}))
        return failed, recovered

    failed, recovered = run_async(scenario())
    assert failed.data is None
    assert failed.error is error
    assert failed.ok is False
    assert failed.headers == {"Cache-Control": "no-store", "X-Cache": "ERROR"}
    assert recovered.data == {"id": 1}
    assert recovered.headers["X-Cache"] == "MISS"


def test_timeout_is_reported_as_error(store):
    fetcher = CachedFetcher(store)
    slow = CountingProducer("late", delay_s=1.0)
    envelope = run_async(
        fetcher.with_cache("slow", slow, CacheConfig(timeout_s=0.01))
    )
    assert envelope.cache_status == "ERROR"
    assert isinstance(envelope.error, asyncio.TimeoutError)
    assert store.has("slow") is False


def test_concurrent_misses_share_one_computation(store):
    fetcher = CachedFetcher(store)
    produce = CountingProducer({"id": 1, "name": "Test"}, delay_s=0.05)

    async def scenario():
        return await asyncio.gather(
            fetcher.with_cache("concurrent-key", produce),
            fetcher.with_cache("concurrent-key", produce),
            fetcher.with_cache("concurrent-key", produce),
        )

    results = run_async(scenario())
    assert produce.calls == 1
    assert all(r.data == {"id": 1, "name": "Test"} for r in results)
    statuses = [r.headers["X-Cache"] for r in results]
    assert statuses.count("MISS") == 1
    assert statuses.count("HIT") == 2


def test_concurrent_failure_reaches_every_waiter(store):
    fetcher = CachedFetcher(store)
    calls = 0

    async def failing():
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.02)
        raise ValueError("boom")

    async def scenario():
        return await asyncio.gather(
            fetcher.with_cache("k", failing),
            fetcher.with_cache("k", failing),
        )

    results = run_async(scenario())
    assert calls == 1
    assert [r.cache_status for r in results] == ["ERROR", "ERROR"]
    assert store.has("k") is False


def test_without_coalescing_concurrent_misses_each_compute(store):
    fetcher = CachedFetcher(store, coalesce=False)
    produce = CountingProducer("v", delay_s=0.02)

    async def scenario():
        return await asyncio.gather(
            fetcher.with_cache("k", produce),
            fetcher.with_cache("k", produce),
        )

    results = run_async(scenario())
    assert produce.calls == 2
    assert [r.cache_status for r in results] == ["MISS", "MISS"]


def test_equivalent_params_share_cache_entry(store):
    fetcher = CachedFetcher(store)
    produce = CountingProducer({"id": 1})
    key1 = generate_cache_key(
        "test",
        {
            "filters": {"status": "active", "type": "user"},
            "sort": {"field": "name", "order": "asc"},
            "pagination": {"page": 1, "limit": 10},
        },
    )
    key2 = generate_cache_key(
        "test",
        {
            "sort": {"order": "asc", "field": "name"},
            "pagination": {"limit": 10, "page": 1},
            "filters": {"type": "user", "status": "active"},
        },
    )

    async def scenario():
        await fetcher.with_cache(key1, produce)
        await fetcher.with_cache(key2, produce)

    run_async(scenario())
    assert key1 == key2
    assert produce.calls == 1


def test_invalidate_prefix_removes_only_matching_keys(store):
    fetcher = CachedFetcher(store)
    for key in ("p:1", "p:2", "q:1"):
        store.set(key, key)

    assert fetcher.invalidate_prefix("p:") == 2
    assert store.get_keys() == ["q:1"]
    assert fetcher.invalidate_prefix("p:") == 0


def test_get_or_compute_caches_plain_values(store):
    fetcher = CachedFetcher(store)
    produce = CountingProducer({"foo": "bar"})

    async def scenario():
        first = await fetcher.get_or_compute("compute-test", produce, ttl_s=60)
        second = await fetcher.get_or_compute("compute-test", produce)
        return first, second

    first, second = run_async(scenario())
    assert first == second == {"foo": "bar"}
    assert produce.calls == 1
    assert store.get_ttl("compute-test") == pytest.approx(60)


def test_get_or_compute_propagates_errors(store):
    fetcher = CachedFetcher(store)

    async def failing():
        raise KeyError("gone")

    with pytest.raises(KeyError):
        run_async(fetcher.get_or_compute("k", failing))
    assert store.has("k") is False


def test_metrics_record_each_outcome(store):
    metrics = RecordingMetrics()
    fetcher = CachedFetcher(store, metrics=metrics)

    async def failing():
        raise RuntimeError("x")

    async def scenario():
        await fetcher.with_cache("k", CountingProducer(1))
        await fetcher.with_cache("k", CountingProducer(1))
        await fetcher.with_cache("bad", failing)

    run_async(scenario())
    assert [tags["result"] for _, _, tags in metrics.events] == ["miss", "hit", "error"]
    assert {name for name, _, _ in metrics.events} == {"cache_requests_total"}


def test_cache_config_validates_ttls():
    with pytest.raises(ValueError):
        CacheConfig(ttl_s=-1)
    with pytest.raises(ValueError):
        CacheConfig(stale_while_revalidate_s=-1)
    assert CacheConfig(ttl_s=1.5, stale_while_revalidate_s=0).resolve_cache_control() == (
        "public, max-age=1.5, stale-while-revalidate=0"
    )


def test_envelope_constructors():
    hit = CacheEnvelope.hit([1], cache_control="public, max-age=1")
    assert hit.cache_status == "HIT"
    assert hit.ok is True
    failure = CacheEnvelope.failure(ValueError("bad"))
    assert failure.data is None
    assert failure.cache_status == "ERROR"


def test_coalescer_reports_starter_and_clears_after_completion():
    coalescer: RequestCoalescer[str] = RequestCoalescer()
    async def scenario():
        gate = asyncio.Event()

        async def factory():
            await gate.wait()
            return "done"

        first = asyncio.create_task(coalescer.run("k", factory))
        await asyncio.sleep(0)
        assert coalescer.in_flight("k") is True
        second = asyncio.create_task(coalescer.run("k", factory))
        await asyncio.sleep(0)
        gate.set()
        return await first, await second

    first, second = run_async(scenario())
    assert first == ("done", True)
    assert second == ("done", False)
    assert coalescer.in_flight("k") is False


def test_cancelled_starter_keeps_computation_shared(store):
    fetcher = CachedFetcher(store)
    produce = CountingProducer({"id": 7}, delay_s=0.05)

    async def scenario():
        starter = asyncio.create_task(fetcher.with_cache("k", produce))
        await asyncio.sleep(0.01)
        starter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await starter
        return await fetcher.with_cache("k", produce)

    follow_up = run_async(scenario())
    assert produce.calls == 1
    assert follow_up.headers["X-Cache"] == "HIT"
    assert follow_up.data == {"id": 7}
    assert store.get("k") == {"id": 7}


def test_coalescer_forgets_failed_task_nobody_awaits():
    coalescer: RequestCoalescer[str] = RequestCoalescer()

    async def failing():
        await asyncio.sleep(0.02)
        raise RuntimeError("late failure")

    async def scenario():
        starter = asyncio.create_task(coalescer.run("k", failing))
        await asyncio.sleep(0.005)
        starter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await starter
        assert coalescer.in_flight("k") is True
        await asyncio.sleep(0.05)
        assert coalescer.in_flight("k") is False

    run_async(scenario())


def test_with_cache_does_not_join_plain_get_or_compute(store):
    fetcher = CachedFetcher(store)
    produce = CountingProducer("v")

    async def scenario():
        return await asyncio.gather(
            fetcher.get_or_compute("k", produce, ttl_s=5),
            fetcher.with_cache(
                "k", produce, CacheConfig(ttl_s=100, stale_while_revalidate_s=100)
            ),
        )

    plain, envelope = run_async(scenario())
    assert plain == "v"
    assert envelope.headers["X-Cache"] == "MISS"
    assert produce.calls == 2
    assert store.get_ttl("k") == pytest.approx(100)
