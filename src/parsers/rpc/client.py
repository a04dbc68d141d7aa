"""Direct Solana RPC scan — baseline discovery source.

Used only when no API source produced candidates. Scans SPL Token
program accounts (165-byte token accounts), takes the mint from the
first 32 bytes of each, then resolves decimals and Metaplex metadata
with one getMultipleAccounts call.

The RPC exposes no creation time, so created_time is the scan time.
"""

import base64
from typing import Any

import base58
from loguru import logger

from src.models.token import TokenRecord, now_ms
from src.parsers.base import DEFAULT_TIMEOUT, SourceError, TokenSource
from src.parsers.rpc.metadata import (
    TokenMetadata,
    decode_metadata,
    decode_mint_decimals,
    metadata_address,
)

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_ACCOUNT_SIZE = 165
DEFAULT_SCAN_LIMIT = 10

DEFAULT_NAME = "Unknown"
DEFAULT_SYMBOL = "UNK"
DEFAULT_DECIMALS = 6


class RpcTokenSource(TokenSource):
    """Programmatic scan of the SPL Token program via JSON-RPC."""

    name = "rpc"
    tag = "RPC"

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        scan_limit: int = DEFAULT_SCAN_LIMIT,
    ) -> None:
        super().__init__(timeout=timeout)
        self._rpc_url = rpc_url
        self._scan_limit = scan_limit

    async def _rpc(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        resp = await self._client.post(self._rpc_url, json=payload)
        resp.raise_for_status()
        data = resp.json()
        if "error" in data:
            raise SourceError(f"{method} RPC error: {data['error']}")
        return data.get("result")

    async def get_version(self) -> dict[str, Any]:
        return await self._rpc("getVersion", []) or {}

    async def scan_mints(self) -> list[str]:
        """Mints of the first scan_limit token accounts, deduplicated in order."""
        accounts = await self._rpc(
            "getProgramAccounts",
            [
                TOKEN_PROGRAM_ID,
                {
                    "encoding": "base64",
                    "filters": [{"dataSize": TOKEN_ACCOUNT_SIZE}],
                    "dataSlice": {"offset": 0, "length": 32},
                },
            ],
        ) or []

        mints: list[str] = []
        for account in accounts[: self._scan_limit]:
            raw = _account_bytes(account.get("account"))
            if raw is None or len(raw) < 32:
                continue
            mint = base58.b58encode(raw[:32]).decode()
            if mint not in mints:
                mints.append(mint)
        return mints

    async def _fetch(self) -> list[TokenRecord]:
        mints = await self.scan_mints()
        if not mints:
            return []

        details = await self._fetch_details(mints)
        scanned_at = now_ms()
        tokens = []
        for mint in mints:
            meta, decimals = details.get(mint, (TokenMetadata(), None))
            tokens.append(TokenRecord(
                mint=mint,
                name=meta.name or DEFAULT_NAME,
                symbol=meta.symbol or DEFAULT_SYMBOL,
                decimals=decimals if decimals is not None else DEFAULT_DECIMALS,
                created_time=scanned_at,
                source=self.name,
            ))
        return tokens

    async def _fetch_details(
        self, mints: list[str],
    ) -> dict[str, tuple[TokenMetadata, int | None]]:
        """Metadata and decimals per mint; best-effort, empty on failure."""
        try:
            pdas = [metadata_address(m) for m in mints]
            result = await self._rpc(
                "getMultipleAccounts", [pdas + mints, {"encoding": "base64"}],
            ) or {}
        except Exception as e:
            logger.debug(f"[RPC] Metadata lookup failed: {e}")
            return {}

        values = result.get("value", []) if isinstance(result, dict) else []
        meta_values = values[: len(mints)]
        mint_values = values[len(mints):]

        details: dict[str, tuple[TokenMetadata, int | None]] = {}
        for i, mint in enumerate(mints):
            meta_raw = _account_bytes(meta_values[i]) if i < len(meta_values) else None
            mint_raw = _account_bytes(mint_values[i]) if i < len(mint_values) else None
            meta = decode_metadata(meta_raw) if meta_raw else TokenMetadata()
            decimals = decode_mint_decimals(mint_raw) if mint_raw else None
            details[mint] = (meta, decimals)
        return details


def _account_bytes(account: dict | None) -> bytes | None:
    """Decode base64 account data ([b64, "base64"]) or None."""
    if not account:
        return None
    data = account.get("data")
    if not data or not isinstance(data, list):
        return None
    try:
        return base64.b64decode(data[0])
    except (ValueError, TypeError):
        return None
