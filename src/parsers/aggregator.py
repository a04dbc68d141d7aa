"""Multi-source candidate aggregation.

Enabled sources run concurrently (settle-all); a failure or timeout in
one source contributes nothing and never suppresses the others. Output
keeps source order, duplicates included; dedup happens downstream.

When no API source yields anything (none configured, all failed, all
empty) the baseline RPC scan runs as a last resort.
"""

import asyncio
from collections.abc import Sequence

from loguru import logger

from src.models.token import TokenRecord
from src.parsers.base import TokenSource
from src.parsers.metrics import PipelineMetrics


class TokenAggregator:
    """Fan out to discovery sources, fan in their candidates."""

    def __init__(
        self,
        sources: Sequence[TokenSource],
        baseline: TokenSource | None,
        *,
        metrics: PipelineMetrics | None = None,
    ) -> None:
        self._all_sources = list(sources)
        self._sources = [s for s in sources if s.enabled]
        self._baseline = baseline
        self._metrics = metrics or PipelineMetrics()

        skipped = [s.name for s in sources if not s.enabled]
        if skipped:
            logger.info(f"[AGG] Sources disabled (no credentials): {', '.join(skipped)}")

    @property
    def sources(self) -> list[TokenSource]:
        return list(self._sources)

    @property
    def baseline(self) -> TokenSource | None:
        return self._baseline

    async def collect(self) -> list[TokenRecord]:
        """Combined candidates from all sources. Never raises."""
        candidates: list[TokenRecord] = []
        if self._sources:
            results = await asyncio.gather(
                *(self._run_source(s) for s in self._sources),
            )
            for tokens in results:
                candidates.extend(tokens)

        if candidates:
            return candidates

        if self._baseline is None:
            logger.warning("[AGG] No candidates and no baseline source configured")
            return []

        self._metrics.record_fallback()
        logger.info(f"[AGG] No API candidates, falling back to {self._baseline.name}")
        return await self._run_source(self._baseline)

    async def _run_source(self, source: TokenSource) -> list[TokenRecord]:
        """Run one source under its own timeout; any failure becomes []."""
        try:
            tokens = await asyncio.wait_for(source.fetch_tokens(), timeout=source.timeout)
        except TimeoutError:
            logger.warning(f"[AGG] {source.name} timed out after {source.timeout}s")
            self._metrics.record_source_error(source.name)
            return []
        except Exception as e:
            logger.warning(f"[AGG] {source.name} failed: {e}")
            self._metrics.record_source_error(source.name)
            return []

        if source.last_error:
            self._metrics.record_source_error(source.name)
        return tokens

    async def close(self) -> None:
        for source in [*self._all_sources, self._baseline]:
            if source is None:
                continue
            try:
                await source.close()
            except Exception as e:
                logger.debug(f"[AGG] Close failed for {source.name}: {e}")
