"""Entry point for the Solana new-token radar."""

import asyncio
import signal
import sys

from loguru import logger

from config.settings import ConfigError, Settings, settings
from src.bot.bot import NotifierError, TelegramNotifier
from src.parsers.aggregator import TokenAggregator
from src.parsers.base import TokenSource
from src.parsers.birdeye.client import BirdeyeSource
from src.parsers.helius.client import HeliusSource
from src.parsers.metrics import PipelineMetrics
from src.parsers.pipeline import DiscoveryPipeline
from src.parsers.rpc.client import RpcTokenSource
from src.parsers.scheduler import run_scheduler
from src.parsers.solana_tracker import SolanaTrackerSource
from src.utils.logger import setup_logger


def build_aggregator(cfg: Settings, metrics: PipelineMetrics) -> TokenAggregator:
    """API sources in priority order (first-seen wins on duplicate mints) + RPC baseline."""
    sources: list[TokenSource] = [
        SolanaTrackerSource(cfg.solana_tracker_api_key, timeout=cfg.source_timeout_sec),
        HeliusSource(cfg.helius_api_key, timeout=cfg.source_timeout_sec),
        BirdeyeSource(cfg.birdeye_api_key, timeout=cfg.source_timeout_sec),
    ]
    for source in sources:
        if source.enabled:
            logger.info(f"Discovery source enabled: {source.name}")

    baseline = RpcTokenSource(
        cfg.solana_rpc_url,
        timeout=cfg.source_timeout_sec,
        scan_limit=cfg.rpc_scan_limit,
    )
    return TokenAggregator(sources, baseline, metrics=metrics)


async def run(cfg: Settings) -> None:
    cfg.require_notification_channel()

    notifier = TelegramNotifier(
        cfg.telegram_bot_token,
        cfg.telegram_channel_id,
        timeout=cfg.notify_timeout_sec,
    )
    await notifier.initialize()

    metrics = PipelineMetrics()
    aggregator = build_aggregator(cfg, metrics)
    pipeline = DiscoveryPipeline(
        aggregator,
        notifier,
        cfg.thresholds(),
        metrics=metrics,
        notify_timeout=cfg.notify_timeout_sec,
    )

    # Graceful shutdown on SIGINT/SIGTERM
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    try:
        await pipeline.seed()
        try:
            await notifier.send_message("🚀 Solana Token Monitor Bot is now active!")
        except Exception as e:
            logger.warning(f"[TG] Startup message failed: {e}")

        await run_scheduler(pipeline, cfg.check_interval_minutes, stop_event)
    finally:
        await aggregator.close()
        await notifier.close()
        logger.info(f"[STATS] Final: {metrics.format_stats_line()}")


async def main() -> int:
    setup_logger(json_logs=settings.json_logs, level=settings.log_level)
    logger.info("Starting Solana token radar...")

    try:
        await run(settings)
    except (ConfigError, NotifierError) as e:
        logger.critical(f"Failed to start: {e}")
        return 1

    logger.info("Shutdown complete")
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
