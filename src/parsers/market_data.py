"""On-demand market data lookups for a single mint.

Queries public price / DEX / market APIs independently; each lookup
returns None on any failure. get_comprehensive_token_data() settles all
lookups and keeps only the sources that answered.

Sources:
- Jupiter price API v2 (free)
- Raydium mainnet token list (free)
- Orca token API (free)
- Birdeye token overview (X-API-KEY)
- CoinGecko contract lookup (free, heavily rate limited)
"""

import asyncio
from typing import Any

import httpx
from loguru import logger

JUPITER_PRICE_URL = "https://api.jup.ag/price/v2"
JUPITER_TOKENS_URL = "https://quote-api.jup.ag/v6/tokens"
RAYDIUM_TOKENS_URL = "https://api.raydium.io/v2/sdk/token/raydium.mainnet.json"
ORCA_TOKEN_URL = "https://api.mainnet.orca.so/v1/token"
BIRDEYE_URL = "https://public-api.birdeye.so"
COINGECKO_URL = "https://api.coingecko.com/api/v3"

SOURCE_NAMES = ("jupiter", "raydium", "orca", "birdeye", "coingecko")


class MarketDataClient:
    """Async client over several public market data APIs."""

    def __init__(self, birdeye_api_key: str = "", timeout: float = 10.0) -> None:
        self._birdeye_api_key = birdeye_api_key
        self._client = httpx.AsyncClient(
            timeout=timeout, headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _get_json(
        self, source: str, url: str, **kwargs: Any,
    ) -> Any | None:
        try:
            resp = await self._client.get(url, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"[MARKET] {source} HTTP {e.response.status_code}")
        except Exception as e:
            logger.warning(f"[MARKET] {source} error: {e or type(e).__name__}")
        return None

    def _birdeye_headers(self) -> dict[str, str]:
        return {"X-API-KEY": self._birdeye_api_key, "x-chain": "solana"}

    async def get_jupiter_price(self, mint: str) -> dict[str, Any] | None:
        data = await self._get_json("jupiter", JUPITER_PRICE_URL, params={"ids": mint})
        entry = ((data or {}).get("data") or {}).get(mint)
        if not entry or entry.get("price") is None:
            return None
        try:
            price = float(entry["price"])
        except (TypeError, ValueError):
            return None
        return {"price": price, "type": entry.get("type"), "source": "jupiter"}

    async def get_raydium_token(self, mint: str) -> dict[str, Any] | None:
        data = await self._get_json("raydium", RAYDIUM_TOKENS_URL)
        if isinstance(data, dict):
            # sdk token list groups tokens as {"official": [...], "unOfficial": [...]}
            tokens = [t for group in data.values() if isinstance(group, list) for t in group]
        elif isinstance(data, list):
            tokens = data
        else:
            return None
        for token in tokens:
            if isinstance(token, dict) and token.get("mint") == mint:
                return {**token, "source": "raydium"}
        return None

    async def get_orca_token(self, mint: str) -> dict[str, Any] | None:
        data = await self._get_json("orca", f"{ORCA_TOKEN_URL}/{mint}")
        if not isinstance(data, dict):
            return None
        return {**data, "source": "orca"}

    async def get_birdeye_token(self, mint: str) -> dict[str, Any] | None:
        data = await self._get_json(
            "birdeye",
            f"{BIRDEYE_URL}/defi/token_overview",
            params={"address": mint},
            headers=self._birdeye_headers(),
        )
        if not isinstance(data, dict) or not data.get("success", True):
            return None
        payload = data.get("data")
        if not isinstance(payload, dict):
            return None
        return {**payload, "source": "birdeye"}

    async def get_coingecko_token(self, mint: str) -> dict[str, Any] | None:
        data = await self._get_json(
            "coingecko", f"{COINGECKO_URL}/coins/solana/contract/{mint}",
        )
        if not isinstance(data, dict) or "error" in data:
            return None
        return {**data, "source": "coingecko"}

    async def get_comprehensive_token_data(self, mint: str) -> dict[str, Any]:
        """All sources in parallel; only the ones that answered are kept."""
        results = await asyncio.gather(
            self.get_jupiter_price(mint),
            self.get_raydium_token(mint),
            self.get_orca_token(mint),
            self.get_birdeye_token(mint),
            self.get_coingecko_token(mint),
            return_exceptions=True,
        )
        sources: dict[str, Any] = {}
        for name, result in zip(SOURCE_NAMES, results):
            if isinstance(result, BaseException):
                logger.debug(f"[MARKET] {name} raised: {result}")
                continue
            if result:
                sources[name] = result
        return {"mint": mint, "sources": sources}

    async def get_trending_tokens(self, limit: int = 10) -> list[dict[str, Any]]:
        """Trending groups from Jupiter and Birdeye; failed sources are skipped."""
        trending: list[dict[str, Any]] = []

        jupiter = await self._get_json("jupiter", JUPITER_TOKENS_URL)
        if isinstance(jupiter, list) and jupiter:
            trending.append({"source": "jupiter", "tokens": jupiter[:limit]})

        birdeye = await self._get_json(
            "birdeye",
            f"{BIRDEYE_URL}/defi/tokenlist",
            params={"sort_by": "v24hUSD", "sort_type": "desc", "offset": 0, "limit": limit},
            headers=self._birdeye_headers(),
        )
        payload = (birdeye or {}).get("data") if isinstance(birdeye, dict) else None
        if isinstance(payload, dict):
            tokens = payload.get("tokens") or payload.get("items") or []
            if tokens:
                trending.append({"source": "birdeye", "tokens": tokens[:limit]})

        return trending
