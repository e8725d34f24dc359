"""Unit tests for the segment sampler."""

import asyncio

import pytest

from greenplum_exporter.adapters.connection import FakeConnectionProvider
from greenplum_exporter.adapters.segment_metrics import FakeSegmentMetrics
from greenplum_exporter.core.exceptions import QueryError
from greenplum_exporter.core.queries import (
    CHANGE_SEGMENTS,
    DIAGNOSTIC_QUERIES,
    DOWN_SEGMENTS,
    REPLICATION_STREAMS,
    RESPONSIVE_SEGMENTS,
    RESYNC_SEGMENTS,
)
from greenplum_exporter.core.segment_sampler import SegmentSampler

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _healthy_results(**overrides):
    """Scripted results for a healthy cluster; override by gauge name."""
    values = {
        DOWN_SEGMENTS.name: 0,
        CHANGE_SEGMENTS.name: 0,
        RESYNC_SEGMENTS.name: 0,
        RESPONSIVE_SEGMENTS.name: 16,
        REPLICATION_STREAMS.name: 1,
        **overrides,
    }
    return {q.sql: values[q.name] for q in DIAGNOSTIC_QUERIES}


class _ExplodingProvider:
    """Provider whose connect() raises something the sampler does not expect."""

    def __init__(self) -> None:
        self.attempts = 0

    def connect(self):
        self.attempts += 1
        raise RuntimeError("driver bug")


# ---------------------------------------------------------------------------
# sample_once
# ---------------------------------------------------------------------------


class TestSampleOnce:
    """Tests for a single sampling pass."""

    @pytest.mark.asyncio
    async def test_successful_pass_sets_exact_values(self):
        provider = FakeConnectionProvider(
            _healthy_results(down_segments=3, change_segments=2, resync_segments=1)
        )
        metrics = FakeSegmentMetrics()

        await SegmentSampler(provider, metrics).sample_once()

        assert metrics.read("down_segments") == 3
        assert metrics.read("change_segments") == 2
        assert metrics.read("resync_segments") == 1
        assert metrics.read("responsive_segments") == 16
        assert metrics.read("replication_streams") == 1
        assert all(metrics.healthy.values())

    @pytest.mark.asyncio
    async def test_values_are_not_clamped(self):
        provider = FakeConnectionProvider(_healthy_results(down_segments=123456))
        metrics = FakeSegmentMetrics()

        await SegmentSampler(provider, metrics).sample_once()

        assert metrics.read("down_segments") == 123456.0

    @pytest.mark.asyncio
    async def test_down_segments_zero_then_two(self):
        provider = FakeConnectionProvider(_healthy_results(down_segments=0))
        metrics = FakeSegmentMetrics()
        sampler = SegmentSampler(provider, metrics)

        await sampler.sample_once()
        assert metrics.read("down_segments") == 0

        provider.results[DOWN_SEGMENTS.sql] = 2
        await sampler.sample_once()
        assert metrics.read("down_segments") == 2

    @pytest.mark.asyncio
    async def test_one_query_failure_only_touches_its_gauge(self):
        results = _healthy_results(change_segments=4)
        results[DOWN_SEGMENTS.sql] = QueryError(DOWN_SEGMENTS.sql, "relation does not exist")
        provider = FakeConnectionProvider(results)
        metrics = FakeSegmentMetrics()

        await SegmentSampler(provider, metrics).sample_once()

        assert metrics.read("down_segments") == DOWN_SEGMENTS.sentinel
        assert metrics.healthy["down_segments"] is False
        assert metrics.read("change_segments") == 4
        assert metrics.healthy["change_segments"] is True
        assert metrics.read("resync_segments") == 0

    @pytest.mark.asyncio
    async def test_failure_does_not_stop_later_queries(self):
        results = _healthy_results()
        results[DOWN_SEGMENTS.sql] = QueryError(DOWN_SEGMENTS.sql)
        provider = FakeConnectionProvider(results)

        await SegmentSampler(provider, FakeSegmentMetrics()).sample_once()

        assert [sql for sql, _ in provider.executed] == [q.sql for q in DIAGNOSTIC_QUERIES]

    @pytest.mark.asyncio
    async def test_missing_row_sets_sentinel(self):
        results = _healthy_results()
        del results[RESYNC_SEGMENTS.sql]
        metrics = FakeSegmentMetrics()

        await SegmentSampler(FakeConnectionProvider(results), metrics).sample_once()

        assert metrics.read("resync_segments") == RESYNC_SEGMENTS.sentinel

    @pytest.mark.asyncio
    async def test_non_numeric_value_sets_sentinel(self):
        results = _healthy_results()
        results[CHANGE_SEGMENTS.sql] = "not-a-number"
        metrics = FakeSegmentMetrics()

        await SegmentSampler(FakeConnectionProvider(results), metrics).sample_once()

        assert metrics.read("change_segments") == CHANGE_SEGMENTS.sentinel

    @pytest.mark.asyncio
    async def test_null_value_sets_sentinel(self):
        results = _healthy_results()
        results[REPLICATION_STREAMS.sql] = None
        metrics = FakeSegmentMetrics()

        await SegmentSampler(FakeConnectionProvider(results), metrics).sample_once()

        assert metrics.read("replication_streams") == REPLICATION_STREAMS.sentinel

    @pytest.mark.asyncio
    async def test_connect_failure_sets_every_sentinel(self):
        provider = FakeConnectionProvider(_healthy_results())
        provider.fail_connect = True
        metrics = FakeSegmentMetrics()

        await SegmentSampler(provider, metrics).sample_once()

        for query in DIAGNOSTIC_QUERIES:
            assert metrics.read(query.name) == query.sentinel
            assert metrics.healthy[query.name] is False
        assert provider.executed == []

    @pytest.mark.asyncio
    async def test_connect_failure_replaces_previous_real_values(self):
        provider = FakeConnectionProvider(_healthy_results(down_segments=1))
        metrics = FakeSegmentMetrics()
        sampler = SegmentSampler(provider, metrics)

        await sampler.sample_once()
        provider.fail_connect = True
        await sampler.sample_once()

        assert metrics.read("down_segments") == DOWN_SEGMENTS.sentinel

    def test_sentinels_are_outside_legitimate_counts(self):
        assert DOWN_SEGMENTS.sentinel == 1000
        assert CHANGE_SEGMENTS.sentinel == 1000
        assert RESYNC_SEGMENTS.sentinel == 1000
        assert RESPONSIVE_SEGMENTS.sentinel < 0
        assert REPLICATION_STREAMS.sentinel < 0


class TestConnectionLifecycle:
    """Every pass must release exactly the connection it opened."""

    @pytest.mark.asyncio
    async def test_one_open_one_release_per_pass(self):
        provider = FakeConnectionProvider(_healthy_results())
        sampler = SegmentSampler(provider, FakeSegmentMetrics())

        for _ in range(3):
            await sampler.sample_once()

        assert provider.opened == 3
        assert provider.released == 3
        assert provider.open_connections == 0

    @pytest.mark.asyncio
    async def test_release_happens_when_every_query_fails(self):
        provider = FakeConnectionProvider(
            {q.sql: QueryError(q.sql, "connection reset") for q in DIAGNOSTIC_QUERIES}
        )

        await SegmentSampler(provider, FakeSegmentMetrics()).sample_once()

        assert provider.opened == 1
        assert provider.released == 1

    @pytest.mark.asyncio
    async def test_nothing_released_when_open_fails(self):
        provider = FakeConnectionProvider()
        provider.fail_connect = True

        await SegmentSampler(provider, FakeSegmentMetrics()).sample_once()

        assert provider.connect_attempts == 1
        assert provider.opened == 0
        assert provider.released == 0


class TestOutageScenario:
    """Database unreachable for three passes, then back."""

    @pytest.mark.asyncio
    async def test_three_failed_passes_then_recovery(self):
        provider = FakeConnectionProvider(_healthy_results(down_segments=0))
        metrics = FakeSegmentMetrics()
        sampler = SegmentSampler(provider, metrics)

        provider.fail_connect = True
        for _ in range(3):
            await sampler.sample_once()
            assert metrics.read("down_segments") == DOWN_SEGMENTS.sentinel
            assert metrics.read("change_segments") == CHANGE_SEGMENTS.sentinel

        provider.fail_connect = False
        await sampler.sample_once()

        assert metrics.read("down_segments") == 0
        assert metrics.read("change_segments") == 0
        assert all(metrics.healthy.values())
        assert sampler.passes == 4


# ---------------------------------------------------------------------------
# Background loop
# ---------------------------------------------------------------------------


class TestSamplerLoop:
    """Tests for start()/stop() and the background loop."""

    @pytest.mark.asyncio
    async def test_samples_after_start(self):
        provider = FakeConnectionProvider(_healthy_results(down_segments=2))
        metrics = FakeSegmentMetrics()
        sampler = SegmentSampler(provider, metrics, interval=0.01)

        await sampler.start()
        # Give the loop enough time for at least one tick.
        await asyncio.sleep(0.05)
        await sampler.stop()

        assert metrics.read("down_segments") == 2
        assert sampler.passes >= 1

    @pytest.mark.asyncio
    async def test_loop_repeats_on_interval(self):
        provider = FakeConnectionProvider(_healthy_results())
        sampler = SegmentSampler(provider, FakeSegmentMetrics(), interval=0.01)

        await sampler.start()
        await asyncio.sleep(0.1)
        await sampler.stop()

        assert sampler.passes >= 2
        assert provider.open_connections == 0

    @pytest.mark.asyncio
    async def test_stop_cancels_cleanly(self):
        sampler = SegmentSampler(FakeConnectionProvider(), FakeSegmentMetrics(), interval=0.01)

        await sampler.start()
        await sampler.stop()

        assert sampler._task is None

    @pytest.mark.asyncio
    async def test_stop_is_safe_when_not_started(self):
        sampler = SegmentSampler(FakeConnectionProvider(), FakeSegmentMetrics())

        await sampler.stop()  # no-op

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_task(self):
        sampler = SegmentSampler(FakeConnectionProvider(), FakeSegmentMetrics(), interval=0.01)

        await sampler.start()
        task = sampler._task
        await sampler.start()

        assert sampler._task is task
        await sampler.stop()

    @pytest.mark.asyncio
    async def test_unexpected_error_does_not_crash_loop(self):
        provider = _ExplodingProvider()
        sampler = SegmentSampler(provider, FakeSegmentMetrics(), interval=0.01)

        await sampler.start()
        await asyncio.sleep(0.05)

        assert not sampler._task.done()
        await sampler.stop()
        assert provider.attempts >= 2
