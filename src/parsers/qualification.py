"""Qualification rules — decide whether a novel token is worth an alert.

All rules are conjunctive: any failing rule disqualifies the token.
Age is evaluated at call time, never cached.
"""

from dataclasses import dataclass

from src.models.token import MS_PER_MINUTE, TokenRecord, now_ms


@dataclass(frozen=True)
class QualificationThresholds:
    """Per-run thresholds, immutable for the process lifetime."""

    max_age_minutes: int = 5
    min_liquidity_usd: float = 1000.0
    min_market_cap_usd: float = 10000.0

    @property
    def max_age_ms(self) -> int:
        return self.max_age_minutes * MS_PER_MINUTE


def is_fresh(
    token: TokenRecord, thresholds: QualificationThresholds, at_ms: int | None = None,
) -> bool:
    return token.age_ms(at_ms) <= thresholds.max_age_ms


def rejection_reasons(
    token: TokenRecord,
    thresholds: QualificationThresholds,
    at_ms: int | None = None,
) -> list[str]:
    """Names of the rules the token fails (empty list = qualifies)."""
    at_ms = at_ms if at_ms is not None else now_ms()
    reasons: list[str] = []
    if not is_fresh(token, thresholds, at_ms):
        reasons.append("too_old")
    if token.liquidity_usd < thresholds.min_liquidity_usd:
        reasons.append("low_liquidity")
    if token.market_cap_usd < thresholds.min_market_cap_usd:
        reasons.append("low_market_cap")
    if token.risky:
        reasons.append("risky")
    return reasons


def qualifies(
    token: TokenRecord,
    thresholds: QualificationThresholds,
    at_ms: int | None = None,
) -> bool:
    return not rejection_reasons(token, thresholds, at_ms)
