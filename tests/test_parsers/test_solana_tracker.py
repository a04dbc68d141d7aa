"""Tests for the Solana Tracker discovery source."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from src.parsers.solana_tracker import (
    SolanaTrackerSource,
    TrackerRisk,
    assess_risk,
    parse_tracker_token,
)


def _item(**overrides) -> dict:
    item = {
        "token": {
            "mint": "TrackerMint11111111111111111111111111111111",
            "name": "Tracker Token",
            "symbol": "TRK",
            "decimals": 9,
            "description": "A token",
            "image": "https://img.example/trk.png",
            "creation": {"creator": "Creator111", "created_time": 1_700_000_000},
        },
        "pools": [
            {
                "poolId": "Pool111",
                "market": "pumpfun",
                "liquidity": {"usd": 12500.5},
                "marketCap": {"usd": 80000},
                "price": {"usd": 0.00008},
            }
        ],
        "holders": 321,
        "risk": {"rugged": False, "score": 10, "snipers": {"count": 0}, "insiders": {"count": 0}},
    }
    item.update(overrides)
    return item


class TestAssessRisk:
    def test_no_risk_block_is_safe(self) -> None:
        assert assess_risk(None) is False

    def test_clean_risk_block_is_safe(self) -> None:
        assert assess_risk(TrackerRisk(rugged=False, score=50)) is False

    def test_rugged(self) -> None:
        assert assess_risk(TrackerRisk(rugged=True)) is True

    def test_score_above_limit(self) -> None:
        assert assess_risk(TrackerRisk(score=51)) is True

    def test_snipers_detected(self) -> None:
        risk = TrackerRisk.model_validate({"snipers": {"count": 2}})
        assert assess_risk(risk) is True

    def test_insiders_detected(self) -> None:
        risk = TrackerRisk.model_validate({"insiders": {"count": 1}})
        assert assess_risk(risk) is True


class TestParseTrackerToken:
    def test_full_item(self) -> None:
        token = parse_tracker_token(_item())
        assert token is not None
        assert token.mint == "TrackerMint11111111111111111111111111111111"
        assert token.symbol == "TRK"
        assert token.decimals == 9
        assert token.created_time == 1_700_000_000_000
        assert token.creator == "Creator111"
        assert token.liquidity_usd == 12500.5
        assert token.market_cap_usd == 80000
        assert token.price_usd == 0.00008
        assert token.holders == 321
        assert token.pool_address == "Pool111"
        assert token.market == "pumpfun"
        assert token.risky is False
        assert token.source == "solana_tracker"

    def test_missing_pool_and_creation_use_defaults(self) -> None:
        data = {"token": {"mint": "NoPoolMint"}}
        token = parse_tracker_token(data, at_ms=1_234)
        assert token is not None
        assert token.created_time == 1_234
        assert token.liquidity_usd == 0.0
        assert token.market_cap_usd == 0.0
        assert token.price_usd == 0.0
        assert token.holders == 0
        assert token.risky is False

    def test_risky_item(self) -> None:
        token = parse_tracker_token(_item(risk={"rugged": True}))
        assert token is not None
        assert token.risky is True

    def test_item_without_mint_skipped(self) -> None:
        assert parse_tracker_token({"token": {"name": "ghost"}}) is None


class TestSolanaTrackerSource:
    def test_disabled_without_key(self) -> None:
        assert SolanaTrackerSource("").enabled is False
        assert SolanaTrackerSource("key").enabled is True

    @pytest.mark.asyncio
    async def test_fetch_parses_list(self) -> None:
        source = SolanaTrackerSource("key")
        resp = httpx.Response(
            200,
            json=[_item(), {"token": {}}, _item(token={"mint": "Second"})],
            request=httpx.Request("GET", "https://data.solanatracker.io/tokens/latest"),
        )
        with patch.object(source, "_client") as mock_http:
            mock_http.get = AsyncMock(return_value=resp)
            tokens = await source.fetch_tokens()

        assert [t.mint for t in tokens] == [
            "TrackerMint11111111111111111111111111111111",
            "Second",
        ]
        assert source.last_error is None
        mock_http.get.assert_awaited_once_with("/tokens/latest")

    @pytest.mark.asyncio
    async def test_http_error_returns_empty(self) -> None:
        source = SolanaTrackerSource("key")
        resp = httpx.Response(
            401, request=httpx.Request("GET", "https://data.solanatracker.io/tokens/latest"),
        )
        with patch.object(source, "_client") as mock_http:
            mock_http.get = AsyncMock(return_value=resp)
            tokens = await source.fetch_tokens()

        assert tokens == []
        assert source.last_error == "HTTP 401"

    @pytest.mark.asyncio
    async def test_timeout_returns_empty(self) -> None:
        source = SolanaTrackerSource("key", timeout=3)
        with patch.object(source, "_client") as mock_http:
            mock_http.get = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
            tokens = await source.fetch_tokens()

        assert tokens == []
        assert source.last_error is not None
        assert "timeout" in source.last_error
