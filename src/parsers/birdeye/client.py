"""Birdeye Data Services — newly listed Solana tokens.

Official API, X-API-KEY header, x-chain: solana. Responses are wrapped
as {"success": bool, "data": {...}}. Listing time comes from
liquidityAddedAt; market cap is not part of this feed.
"""

from datetime import UTC
from typing import Any

from src.models.token import TokenRecord, now_ms
from src.parsers.base import DEFAULT_TIMEOUT, TokenSource, parse_items
from src.parsers.birdeye.models import BirdeyeNewListing

BASE_URL = "https://public-api.birdeye.so"
NEW_LISTING_LIMIT = 20


class BirdeyeApiError(Exception):
    pass


def parse_birdeye_listing(data: dict, at_ms: int | None = None) -> TokenRecord | None:
    """Map one new-listing item into a TokenRecord."""
    listing = BirdeyeNewListing.model_validate(data)
    if not listing.address:
        return None

    added_at = listing.liquidityAddedAt
    if added_at is not None:
        if added_at.tzinfo is None:
            added_at = added_at.replace(tzinfo=UTC)
        created_time = int(added_at.timestamp() * 1000)
    else:
        created_time = at_ms if at_ms is not None else now_ms()

    return TokenRecord(
        mint=listing.address,
        name=listing.name,
        symbol=listing.symbol,
        decimals=listing.decimals,
        image=listing.logoURI,
        created_time=created_time,
        liquidity_usd=listing.liquidity,
        market=listing.source,
        source=BirdeyeSource.name,
    )


class BirdeyeSource(TokenSource):
    """New-listing feed from Birdeye."""

    name = "birdeye"
    tag = "BIRDEYE"

    def __init__(
        self, api_key: str, *, timeout: float = DEFAULT_TIMEOUT, limit: int = NEW_LISTING_LIMIT,
    ) -> None:
        super().__init__(
            timeout=timeout,
            base_url=BASE_URL,
            headers={
                "X-API-KEY": api_key,
                "Accept": "application/json",
                "x-chain": "solana",
            },
        )
        self._api_key = api_key
        self._limit = limit

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def _request(self, path: str, **params: Any) -> dict[str, Any]:
        resp = await self._client.get(path, params=params)
        if resp.status_code == 401:
            raise BirdeyeApiError("Invalid API key (401)")
        resp.raise_for_status()
        data = resp.json()
        if not data.get("success", True):
            raise BirdeyeApiError(f"API error: {data.get('message', 'unknown')}")
        return data.get("data", data)

    async def _fetch(self) -> list[TokenRecord]:
        data = await self._request(
            "/defi/v2/tokens/new_listing", limit=self._limit, meme_platform_enabled="true",
        )
        items = data.get("items", []) if isinstance(data, dict) else []
        at_ms = now_ms()
        return parse_items(items, lambda d: parse_birdeye_listing(d, at_ms), self.tag)
