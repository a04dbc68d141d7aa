"""Novelty filter — drop already-seen and stale candidates.

Every observed mint ends up in the known set, including stale ones,
so a token too old to alert on is never reconsidered.
"""

from dataclasses import dataclass, field

from loguru import logger

from src.models.token import TokenRecord, now_ms
from src.parsers.known_set import KnownTokenSet
from src.parsers.qualification import QualificationThresholds, is_fresh


@dataclass
class NoveltyResult:
    """Outcome of filtering one candidate batch."""

    accepted: list[TokenRecord] = field(default_factory=list)
    already_known: int = 0
    stale: int = 0


class NoveltyFilter:
    """Owns the known set and filters candidate batches against it."""

    def __init__(
        self,
        thresholds: QualificationThresholds,
        known: KnownTokenSet | None = None,
    ) -> None:
        self._thresholds = thresholds
        self._known = known if known is not None else KnownTokenSet()

    @property
    def known(self) -> KnownTokenSet:
        return self._known

    def seed(self, tokens: list[TokenRecord]) -> int:
        """Mark tokens as known without emitting anything. Returns newly added count."""
        return sum(1 for t in tokens if self._known.add(t.mint))

    def filter(
        self, candidates: list[TokenRecord], at_ms: int | None = None,
    ) -> NoveltyResult:
        """Filter candidates in order; first occurrence of a mint wins."""
        at_ms = at_ms if at_ms is not None else now_ms()
        result = NoveltyResult()

        for token in candidates:
            if token.mint in self._known:
                result.already_known += 1
                continue

            self._known.add(token.mint)
            if not is_fresh(token, self._thresholds, at_ms):
                result.stale += 1
                logger.debug(
                    f"[NOVELTY] Stale {token.label} "
                    f"age={token.age_minutes(at_ms)}m source={token.source}"
                )
                continue

            result.accepted.append(token)

        return result
