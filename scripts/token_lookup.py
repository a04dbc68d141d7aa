"""Market data lookup for a single mint, or the current trending lists.

Queries Jupiter, Raydium, Orca, Birdeye and CoinGecko in parallel and
prints whatever answered. Birdeye is only useful with BIRDEYE_API_KEY set.

Usage:
    python scripts/token_lookup.py <mint>
    python scripts/token_lookup.py --trending --limit 5
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import settings  # noqa: E402
from src.parsers.market_data import MarketDataClient  # noqa: E402


async def main() -> None:
    parser = argparse.ArgumentParser(description="Look up market data for a Solana token")
    parser.add_argument("mint", nargs="?", help="Token mint address")
    parser.add_argument("--trending", action="store_true", help="List trending tokens instead")
    parser.add_argument("--limit", type=int, default=10, help="Trending list size")
    args = parser.parse_args()

    if not args.mint and not args.trending:
        parser.error("a mint address or --trending is required")

    client = MarketDataClient(settings.birdeye_api_key, timeout=settings.source_timeout_sec)
    try:
        if args.trending:
            result = await client.get_trending_tokens(limit=args.limit)
        else:
            result = await client.get_comprehensive_token_data(args.mint)
    finally:
        await client.close()

    print(json.dumps(result, indent=2, ensure_ascii=False, default=str))


if __name__ == "__main__":
    asyncio.run(main())
