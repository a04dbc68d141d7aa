"""End-to-end tests for the discovery pipeline."""

import asyncio

import pytest

from src.models.token import now_ms
from src.parsers.aggregator import TokenAggregator
from src.parsers.metrics import PipelineMetrics
from src.parsers.pipeline import DiscoveryPipeline

MINUTE_MS = 60_000


def _pipeline(sources, notifier, thresholds, *, baseline=None, **kwargs) -> DiscoveryPipeline:
    metrics = PipelineMetrics()
    agg = TokenAggregator(sources, baseline, metrics=metrics)
    return DiscoveryPipeline(agg, notifier, thresholds, metrics=metrics, **kwargs)


@pytest.mark.asyncio
async def test_new_token_notified_once(fake_source, make_token, notifier, thresholds):
    source = fake_source("tracker", [])
    pipeline = _pipeline([source], notifier, thresholds)

    await pipeline.seed()
    source.tokens = [make_token(mint="X")]

    first = await pipeline.run_cycle()
    second = await pipeline.run_cycle()

    assert [t.mint for t in notifier.sent] == ["X"]
    assert first.notified == 1
    assert second.notified == 0
    assert pipeline.cycle_count == 2


@pytest.mark.asyncio
async def test_seeded_tokens_never_notified(fake_source, make_token, notifier, thresholds):
    source = fake_source("tracker", [make_token(mint="EXISTING")])
    pipeline = _pipeline([source], notifier, thresholds)

    added = await pipeline.seed()
    report = await pipeline.run_cycle()

    assert added == 1
    assert "EXISTING" in pipeline.known
    assert notifier.sent == []
    assert report.candidates == 1
    assert report.novel == 0


@pytest.mark.asyncio
async def test_unqualified_tokens_are_remembered(fake_source, make_token, notifier, thresholds):
    risky = make_token(mint="RISKY", risky=True)
    thin = make_token(mint="THIN", liquidity_usd=10)
    good = make_token(mint="GOOD")
    source = fake_source("tracker", [risky, thin, good])
    pipeline = _pipeline([source], notifier, thresholds)

    report = await pipeline.run_cycle()

    assert [t.mint for t in notifier.sent] == ["GOOD"]
    assert report.novel == 3
    assert report.qualified == 1
    assert {"RISKY", "THIN", "GOOD"} <= set(pipeline.known)

    # Liquidity arriving later does not resurrect a known token
    source.tokens = [make_token(mint="THIN")]
    await pipeline.run_cycle()
    assert len(notifier.sent) == 1


@pytest.mark.asyncio
async def test_stale_token_skipped(fake_source, make_token, notifier, thresholds):
    old = make_token(mint="OLD", created_time=now_ms() - 10 * MINUTE_MS)
    pipeline = _pipeline([fake_source("tracker", [old])], notifier, thresholds)

    report = await pipeline.run_cycle()

    assert notifier.sent == []
    assert report.stale == 1
    assert "OLD" in pipeline.known


@pytest.mark.asyncio
async def test_notification_failure_does_not_stop_cycle(
    fake_source, make_token, failing_notifier_factory, thresholds,
):
    notifier = failing_notifier_factory("A")
    tokens = [make_token(mint="A"), make_token(mint="B")]
    pipeline = _pipeline([fake_source("tracker", tokens)], notifier, thresholds)

    report = await pipeline.run_cycle()

    assert [t.mint for t in notifier.sent] == ["B"]
    assert report.notified == 1
    assert report.failed == 1
    assert pipeline.metrics.notify_failures == 1
    # Failed delivery is not retried
    await pipeline.run_cycle()
    assert [t.mint for t in notifier.sent] == ["B"]


@pytest.mark.asyncio
async def test_slow_notifier_times_out(fake_source, make_token, thresholds):
    class SlowNotifier:
        async def send_token_alert(self, token):
            await asyncio.sleep(1)

    pipeline = _pipeline(
        [fake_source("tracker", [make_token(mint="A")])],
        SlowNotifier(),
        thresholds,
        notify_timeout=0.05,
    )

    report = await pipeline.run_cycle()

    assert report.failed == 1
    assert report.notified == 0


@pytest.mark.asyncio
async def test_first_source_wins_on_duplicate(fake_source, make_token, notifier, thresholds):
    tracker = fake_source("tracker", [make_token(mint="DUP", symbol="TRK", source="solana_tracker")])
    helius = fake_source("helius", [make_token(mint="DUP", symbol="HEL", source="helius")])
    pipeline = _pipeline([tracker, helius], notifier, thresholds)

    await pipeline.run_cycle()

    assert len(notifier.sent) == 1
    assert notifier.sent[0].source == "solana_tracker"


@pytest.mark.asyncio
async def test_baseline_tokens_never_qualify(fake_source, make_token, notifier, thresholds):
    baseline = fake_source("rpc", [make_token(mint="R", liquidity_usd=0, market_cap_usd=0)])
    pipeline = _pipeline(
        [fake_source("tracker", error=RuntimeError("down"))], notifier, thresholds,
        baseline=baseline,
    )

    report = await pipeline.run_cycle()

    assert report.candidates == 1
    assert notifier.sent == []
    assert "R" in pipeline.known
    assert pipeline.metrics.fallbacks == 1


@pytest.mark.asyncio
async def test_seed_failure_starts_empty(fake_source, notifier, thresholds):
    class BrokenAggregator:
        async def collect(self):
            raise RuntimeError("boom")

    pipeline = DiscoveryPipeline(BrokenAggregator(), notifier, thresholds)

    assert await pipeline.seed() == 0
    assert len(pipeline.known) == 0


@pytest.mark.asyncio
async def test_overlapping_trigger_is_dropped(fake_source, make_token, notifier, thresholds):
    source = fake_source("tracker", [make_token(mint="A")], delay=0.2)
    pipeline = _pipeline([source], notifier, thresholds)

    running = asyncio.create_task(pipeline.try_run_cycle())
    await asyncio.sleep(0.05)
    assert pipeline.is_running is True

    assert await pipeline.try_run_cycle() is None
    report = await running

    assert report is not None
    assert report.notified == 1
    assert pipeline.metrics.skipped_cycles == 1
    assert source.max_active == 1
