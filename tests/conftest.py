"""Shared test fixtures."""

import asyncio
from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio

from src.models.token import TokenRecord, now_ms
from src.parsers.base import TokenSource
from src.parsers.qualification import QualificationThresholds

MINUTE_MS = 60_000


class FakeSource(TokenSource):
    """In-memory discovery source with optional failure and delay."""

    def __init__(
        self,
        name: str,
        tokens: list[TokenRecord] | None = None,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
        enabled: bool = True,
        timeout: float = 1.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self.name = name
        self.tag = name.upper()
        self.tokens = list(tokens or [])
        self._error = error
        self._delay = delay
        self._enabled = enabled
        self.calls = 0
        self.active = 0
        self.max_active = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def _fetch(self) -> list[TokenRecord]:
        self.calls += 1
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self._delay:
                await asyncio.sleep(self._delay)
            if self._error is not None:
                raise self._error
            return list(self.tokens)
        finally:
            self.active -= 1


class FakeNotifier:
    """Records alerts; raises for mints listed in fail_for."""

    def __init__(self, fail_for: tuple[str, ...] = ()) -> None:
        self.sent: list[TokenRecord] = []
        self.fail_for = set(fail_for)

    async def send_token_alert(self, token: TokenRecord) -> None:
        if token.mint in self.fail_for:
            raise RuntimeError("telegram unavailable")
        self.sent.append(token)


@pytest.fixture
def make_token() -> Callable[..., TokenRecord]:
    """Factory for a token that passes the default thresholds."""

    def _make(**kwargs) -> TokenRecord:
        defaults = {
            "mint": "MintAddr1111111111111111111111111111111111",
            "name": "Test Token",
            "symbol": "TEST",
            "decimals": 6,
            "created_time": now_ms() - 2 * MINUTE_MS,
            "liquidity_usd": 5000.0,
            "market_cap_usd": 50000.0,
            "price_usd": 0.00012345,
            "holders": 42,
            "risky": False,
            "source": "test",
        }
        defaults.update(kwargs)
        return TokenRecord(**defaults)

    return _make


@pytest.fixture
def thresholds() -> QualificationThresholds:
    return QualificationThresholds(
        max_age_minutes=5, min_liquidity_usd=1000.0, min_market_cap_usd=10000.0,
    )


@pytest_asyncio.fixture
async def fake_source() -> AsyncGenerator[Callable[..., FakeSource], None]:
    """Factory for FakeSource; every created source is closed afterwards."""
    created: list[FakeSource] = []

    def _make(name: str, tokens: list[TokenRecord] | None = None, **kwargs) -> FakeSource:
        source = FakeSource(name, tokens, **kwargs)
        created.append(source)
        return source

    yield _make

    for source in created:
        await source.close()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def failing_notifier_factory() -> Callable[..., FakeNotifier]:
    return lambda *mints: FakeNotifier(fail_for=mints)
