"""Helius token-metadata source.

Helius reports token metadata only: no creation time and no market data.
Records get the current time as created_time and zero liquidity / market
cap, so they pass the freshness gate but rarely the market thresholds.
"""

from src.models.token import TokenRecord, now_ms
from src.parsers.base import DEFAULT_TIMEOUT, TokenSource, parse_items
from src.parsers.helius.models import HeliusTokenMetadata

API_URL = "https://api.helius.xyz/v0"


def parse_helius_token(data: dict, at_ms: int | None = None) -> TokenRecord | None:
    """Map one token-metadata entry into a TokenRecord."""
    meta = HeliusTokenMetadata.model_validate(data)
    if not meta.address:
        return None

    on_chain = meta.on_chain
    legacy = meta.legacyMetadata
    name = meta.name or (on_chain.name if on_chain else None) or (legacy.name if legacy else None)
    symbol = meta.symbol or (on_chain.symbol if on_chain else None) or (legacy.symbol if legacy else None)
    decimals = meta.decimals if meta.decimals is not None else (legacy.decimals if legacy else None)
    image = meta.image or (legacy.logoURI if legacy else None)

    return TokenRecord(
        mint=meta.address,
        name=_strip(name),
        symbol=_strip(symbol),
        decimals=decimals,
        description=meta.description,
        image=image,
        created_time=at_ms if at_ms is not None else now_ms(),
        source=HeliusSource.name,
    )


def _strip(value: str | None) -> str | None:
    """On-chain strings are NUL padded."""
    if value is None:
        return None
    return value.replace("\x00", "").strip() or None


class HeliusSource(TokenSource):
    """Token metadata feed from the Helius REST API."""

    name = "helius"
    tag = "HELIUS"

    def __init__(self, api_key: str, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__(timeout=timeout, base_url=API_URL)
        self._api_key = api_key

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def _fetch(self) -> list[TokenRecord]:
        resp = await self._client.get("/token-metadata", params={"api-key": self._api_key})
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, list):
            return []
        at_ms = now_ms()
        return parse_items(data, lambda d: parse_helius_token(d, at_ms), self.tag)
