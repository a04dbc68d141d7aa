"""Pydantic models for Birdeye Data Services new-listing responses."""

from datetime import datetime

from pydantic import BaseModel


class BirdeyeNewListing(BaseModel):
    """One token from /defi/v2/tokens/new_listing."""

    address: str = ""
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    source: str | None = None  # DEX the liquidity was added on
    liquidity: float | None = None
    liquidityAddedAt: datetime | None = None
    logoURI: str | None = None

    model_config = {"extra": "ignore"}
