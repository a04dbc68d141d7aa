"""Configuration check — run before starting the radar.

Checks:
- Required environment variables
- Telegram bot token and channel (sends a test message)
- Solana RPC connectivity
- Optional discovery source keys (Solana Tracker, Helius, Birdeye)

Usage:
    python scripts/check_config.py
"""

import asyncio
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import Settings, settings  # noqa: E402
from src.bot.bot import TelegramNotifier  # noqa: E402
from src.parsers.base import TokenSource  # noqa: E402
from src.parsers.birdeye.client import BirdeyeSource  # noqa: E402
from src.parsers.helius.client import HeliusSource  # noqa: E402
from src.parsers.rpc.client import RpcTokenSource  # noqa: E402
from src.parsers.solana_tracker import SolanaTrackerSource  # noqa: E402

STATUS_OK = "OK"
STATUS_WARN = "WARN"
STATUS_ERROR = "ERROR"
STATUS_SKIPPED = "SKIPPED"


async def check_config(cfg: Settings) -> dict:
    """Run all checks and return a structured report."""
    report: dict = {"checks": {}}
    checks = report["checks"]

    # 1. Required env
    missing = cfg.missing_required()
    if missing:
        checks["env"] = {"status": STATUS_ERROR, "missing": missing}
        report["ok"] = False
        return report
    checks["env"] = {"status": STATUS_OK}

    # 2. Telegram
    notifier = TelegramNotifier(cfg.telegram_bot_token, cfg.telegram_channel_id, timeout=5)
    try:
        username = await notifier.initialize()
        await notifier.send_message("🧪 Test message from Solana Token Monitor Bot")
        checks["telegram"] = {"status": STATUS_OK, "bot": f"@{username}"}
    except Exception as e:
        checks["telegram"] = {"status": STATUS_ERROR, "error": str(e)}
    finally:
        await notifier.close()

    # 3. Solana RPC
    rpc = RpcTokenSource(cfg.solana_rpc_url, timeout=5)
    try:
        version = await rpc.get_version()
        checks["rpc"] = {"status": STATUS_OK, "version": version.get("solana-core")}
    except Exception as e:
        checks["rpc"] = {"status": STATUS_ERROR, "error": str(e)}
    finally:
        await rpc.close()

    # 4. Optional sources
    optional: list[TokenSource] = [
        SolanaTrackerSource(cfg.solana_tracker_api_key, timeout=5),
        HeliusSource(cfg.helius_api_key, timeout=5),
        BirdeyeSource(cfg.birdeye_api_key, timeout=5),
    ]
    for source in optional:
        checks[source.name] = await _check_source(source)

    report["ok"] = all(
        c["status"] != STATUS_ERROR for c in checks.values()
    )
    return report


async def _check_source(source: TokenSource) -> dict:
    try:
        if not source.enabled:
            return {"status": STATUS_SKIPPED, "reason": "API key not set (optional)"}
        tokens = await source.fetch_tokens()
        if source.last_error:
            return {"status": STATUS_WARN, "error": source.last_error}
        return {"status": STATUS_OK, "tokens": len(tokens)}
    finally:
        await source.close()


def main() -> None:
    report = asyncio.run(check_config(settings))
    print(json.dumps(report, indent=2))
    if not report["ok"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
