"""Discovery pipeline — aggregate, filter, qualify, notify.

One pipeline owns one known-token set for the process lifetime:
1. seed(): mark everything currently observable as known, no alerts
2. run_cycle(): aggregation completes, then novelty filtering, then
   qualification and one notification attempt per qualifying token

Only one cycle runs at a time; try_run_cycle() drops a trigger that
arrives while a cycle is still in flight.
"""

import asyncio
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from src.models.token import TokenRecord, now_ms
from src.parsers.aggregator import TokenAggregator
from src.parsers.known_set import KnownTokenSet
from src.parsers.metrics import PipelineMetrics
from src.parsers.novelty import NoveltyFilter
from src.parsers.qualification import QualificationThresholds, rejection_reasons

DEFAULT_NOTIFY_TIMEOUT = 10.0


class TokenNotifier(Protocol):
    async def send_token_alert(self, token: TokenRecord) -> None: ...


@dataclass
class CycleReport:
    """Funnel counts for one discovery cycle."""

    cycle: int
    candidates: int = 0
    novel: int = 0
    stale: int = 0
    qualified: int = 0
    notified: int = 0
    failed: int = 0


class DiscoveryPipeline:
    """Runs discovery cycles against a single known-token set."""

    def __init__(
        self,
        aggregator: TokenAggregator,
        notifier: TokenNotifier,
        thresholds: QualificationThresholds,
        *,
        known: KnownTokenSet | None = None,
        metrics: PipelineMetrics | None = None,
        notify_timeout: float = DEFAULT_NOTIFY_TIMEOUT,
    ) -> None:
        self._aggregator = aggregator
        self._notifier = notifier
        self._thresholds = thresholds
        self._novelty = NoveltyFilter(thresholds, known)
        self._metrics = metrics or PipelineMetrics()
        self._notify_timeout = notify_timeout
        self._cycle_count = 0
        self._running = False

    @property
    def known(self) -> KnownTokenSet:
        return self._novelty.known

    @property
    def metrics(self) -> PipelineMetrics:
        return self._metrics

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    async def seed(self) -> int:
        """Populate the known set from currently observable tokens. Never raises."""
        try:
            tokens = await self._aggregator.collect()
        except Exception as e:
            logger.error(f"[PIPELINE] Seeding failed: {e}")
            return 0

        added = self._novelty.seed(tokens)
        logger.info(f"[PIPELINE] Seeded {len(self.known)} known tokens ({added} new)")
        return added

    async def try_run_cycle(self) -> CycleReport | None:
        """Run a cycle unless one is already in flight."""
        if self._running:
            self._metrics.record_skip()
            logger.warning("[PIPELINE] Previous cycle still running, skipping trigger")
            return None
        return await self.run_cycle()

    async def run_cycle(self) -> CycleReport:
        self._running = True
        self._cycle_count += 1
        report = CycleReport(cycle=self._cycle_count)
        try:
            await self._run(report)
        except Exception as e:
            logger.error(f"[PIPELINE] Cycle #{report.cycle} error: {e}")
        finally:
            self._running = False

        self._metrics.record_cycle(
            candidates=report.candidates,
            novel=report.novel,
            stale=report.stale,
            qualified=report.qualified,
            notified=report.notified,
            failed=report.failed,
        )
        logger.info(f"[STATS] {self._metrics.format_stats_line()}")
        return report

    async def _run(self, report: CycleReport) -> None:
        logger.info(f"[PIPELINE] Cycle #{report.cycle}: checking for new tokens...")

        candidates = await self._aggregator.collect()
        report.candidates = len(candidates)

        at_ms = now_ms()
        novelty = self._novelty.filter(candidates, at_ms)
        report.novel = len(novelty.accepted)
        report.stale = novelty.stale

        qualifying: list[TokenRecord] = []
        for token in novelty.accepted:
            reasons = rejection_reasons(token, self._thresholds)
            if reasons:
                logger.debug(f"[PIPELINE] Skip {token.label}: {', '.join(reasons)}")
                continue
            qualifying.append(token)
        report.qualified = len(qualifying)

        for token in qualifying:
            if await self._notify(token):
                report.notified += 1
            else:
                report.failed += 1

        logger.info(
            f"[PIPELINE] Cycle #{report.cycle}: {report.candidates} candidates, "
            f"{report.novel} new, {report.stale} stale, "
            f"{report.qualified} qualified, {report.notified} sent"
        )

    async def _notify(self, token: TokenRecord) -> bool:
        """Single best-effort delivery attempt."""
        try:
            await asyncio.wait_for(
                self._notifier.send_token_alert(token), timeout=self._notify_timeout,
            )
        except Exception as e:
            logger.error(f"[PIPELINE] Failed to notify {token.mint}: {e or type(e).__name__}")
            return False

        logger.info(f"[PIPELINE] Sent new token: {token.symbol} ({token.mint})")
        return True
