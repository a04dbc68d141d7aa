"""Solana Tracker — latest token launches with pool and risk data.

Endpoint: https://data.solanatracker.io/tokens/latest
Auth: x-api-key header (source is enabled only when a key is configured).

Each item carries the token metadata, creation time (unix seconds), the
first pool's liquidity / market cap / price and a risk block with
rug flag, score and sniper / insider counts.
"""

from pydantic import BaseModel

from src.models.token import TokenRecord, now_ms
from src.parsers.base import DEFAULT_TIMEOUT, TokenSource, parse_items

BASE_URL = "https://data.solanatracker.io"

# Risk score above this marks the token risky
RISK_SCORE_LIMIT = 50


class _UsdValue(BaseModel):
    usd: float | None = None

    model_config = {"extra": "ignore"}


class TrackerPool(BaseModel):
    poolId: str | None = None
    market: str | None = None
    liquidity: _UsdValue | None = None
    marketCap: _UsdValue | None = None
    price: _UsdValue | None = None

    model_config = {"extra": "ignore"}


class TrackerCreation(BaseModel):
    creator: str | None = None
    created_time: float | None = None  # unix seconds

    model_config = {"extra": "ignore"}


class TrackerTokenInfo(BaseModel):
    mint: str = ""
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    description: str | None = None
    image: str | None = None
    creation: TrackerCreation | None = None

    model_config = {"extra": "ignore"}


class _Count(BaseModel):
    count: int = 0

    model_config = {"extra": "ignore"}


class TrackerRisk(BaseModel):
    rugged: bool | None = False
    score: float | None = None
    snipers: _Count | None = None
    insiders: _Count | None = None

    model_config = {"extra": "ignore"}


class TrackerTokenItem(BaseModel):
    token: TrackerTokenInfo
    pools: list[TrackerPool] = []
    holders: int | None = None
    risk: TrackerRisk | None = None

    model_config = {"extra": "ignore"}


def assess_risk(risk: TrackerRisk | None) -> bool:
    """Risk verdict from a Solana Tracker risk block.

    Risky when the token is flagged rugged, the risk score exceeds 50,
    or any snipers or insiders were detected. No block means not risky.
    """
    if risk is None:
        return False
    return (
        bool(risk.rugged)
        or (risk.score is not None and risk.score > RISK_SCORE_LIMIT)
        or (risk.snipers is not None and risk.snipers.count > 0)
        or (risk.insiders is not None and risk.insiders.count > 0)
    )


def parse_tracker_token(data: dict, at_ms: int | None = None) -> TokenRecord | None:
    """Map one /tokens/latest item into a TokenRecord (None if it has no mint)."""
    item = TrackerTokenItem.model_validate(data)
    token = item.token
    if not token.mint:
        return None

    pool = item.pools[0] if item.pools else None
    creation = token.creation
    if creation is not None and creation.created_time:
        created_time = int(creation.created_time * 1000)
    else:
        created_time = at_ms if at_ms is not None else now_ms()

    return TokenRecord(
        mint=token.mint,
        name=token.name,
        symbol=token.symbol,
        decimals=token.decimals,
        description=token.description,
        image=token.image,
        created_time=created_time,
        creator=creation.creator if creation else None,
        liquidity_usd=_usd(pool.liquidity) if pool else 0.0,
        market_cap_usd=_usd(pool.marketCap) if pool else 0.0,
        price_usd=_usd(pool.price) if pool else 0.0,
        holders=item.holders or 0,
        risky=assess_risk(item.risk),
        pool_address=pool.poolId if pool else None,
        market=pool.market if pool else None,
        source=SolanaTrackerSource.name,
    )


def _usd(value: _UsdValue | None) -> float:
    if value is None or value.usd is None:
        return 0.0
    return value.usd


class SolanaTrackerSource(TokenSource):
    """Latest-token feed from Solana Tracker Data API."""

    name = "solana_tracker"
    tag = "TRACKER"

    def __init__(self, api_key: str, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__(
            timeout=timeout,
            base_url=BASE_URL,
            headers={"x-api-key": api_key, "Accept": "application/json"},
        )
        self._api_key = api_key

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def _fetch(self) -> list[TokenRecord]:
        resp = await self._client.get("/tokens/latest")
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, list):
            data = data.get("data", []) if isinstance(data, dict) else []
        at_ms = now_ms()
        return parse_items(data, lambda d: parse_tracker_token(d, at_ms), self.tag)
