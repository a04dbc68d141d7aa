"""Canonical token record shared by every discovery source.

Each source adapter maps its own payload into this one shape, so the
novelty filter, qualification rules and formatter never see raw schemas.
"""

import time

from pydantic import BaseModel, Field, field_validator

MS_PER_MINUTE = 60_000


def now_ms() -> int:
    """Current wall-clock time in milliseconds since epoch."""
    return int(time.time() * 1000)


class TokenRecord(BaseModel):
    """A newly observed SPL token, normalized from one source."""

    model_config = {"frozen": True}

    mint: str = Field(min_length=1)
    name: str | None = None
    symbol: str | None = None
    decimals: int = 0
    created_time: int = Field(default_factory=now_ms)  # ms; "now" when the source doesn't report it
    liquidity_usd: float = 0.0
    market_cap_usd: float = 0.0
    price_usd: float = 0.0
    holders: int = 0
    risky: bool = False
    description: str | None = None
    image: str | None = None
    source: str = ""

    # Solana Tracker extras
    creator: str | None = None
    pool_address: str | None = None
    market: str | None = None

    @field_validator("liquidity_usd", "market_cap_usd", "price_usd", mode="before")
    @classmethod
    def _non_negative_float(cls, v: object) -> float:
        try:
            value = float(v) if v is not None else 0.0
        except (TypeError, ValueError):
            return 0.0
        return value if value > 0 else 0.0

    @field_validator("decimals", "holders", mode="before")
    @classmethod
    def _non_negative_int(cls, v: object) -> int:
        try:
            value = int(v) if v is not None else 0
        except (TypeError, ValueError):
            return 0
        return value if value > 0 else 0

    def age_ms(self, at_ms: int | None = None) -> int:
        return (at_ms if at_ms is not None else now_ms()) - self.created_time

    def age_minutes(self, at_ms: int | None = None) -> int:
        """Age in whole minutes (floored)."""
        return self.age_ms(at_ms) // MS_PER_MINUTE

    @property
    def label(self) -> str:
        """Short name for log lines."""
        return self.symbol or self.mint[:12]
