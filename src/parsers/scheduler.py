"""Fixed-interval trigger for discovery cycles.

Every tick starts a cycle as a background task without waiting for it.
If the previous cycle is still running the tick is dropped, never queued.
"""

import asyncio

from loguru import logger

from src.parsers.pipeline import DiscoveryPipeline

SECONDS_PER_MINUTE = 60


async def run_scheduler(
    pipeline: DiscoveryPipeline,
    interval_minutes: int,
    stop_event: asyncio.Event,
    *,
    interval_sec: float | None = None,
) -> None:
    """Trigger cycles until stop_event is set, then wait for the in-flight cycle.

    interval_sec overrides the minute interval (tests only).
    """
    if interval_minutes < 1:
        raise ValueError(f"interval_minutes must be >= 1, got {interval_minutes}")

    period = interval_sec if interval_sec is not None else interval_minutes * SECONDS_PER_MINUTE
    in_flight: asyncio.Task | None = None
    logger.info(f"[SCHED] Monitoring started, checking every {interval_minutes} minute(s)")

    while not stop_event.is_set():
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=period)
            break
        except TimeoutError:
            pass

        if pipeline.is_running:
            await pipeline.try_run_cycle()  # records and logs the skip
            continue
        in_flight = asyncio.create_task(pipeline.try_run_cycle(), name="discovery_cycle")

    if in_flight is not None and not in_flight.done():
        logger.info("[SCHED] Waiting for the running cycle to finish")
        await in_flight
    logger.info("[SCHED] Monitoring stopped")
