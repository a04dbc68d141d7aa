"""Metaplex token-metadata account decoding.

Metadata account layout (borsh):
  [0:1]    key (u8)
  [1:33]   update authority (pubkey)
  [33:65]  mint (pubkey)
  [65:..]  name, symbol, uri, each a u32 length prefix + NUL padded utf-8

SPL mint layout: decimals is the u8 at offset 44.
"""

import struct
from dataclasses import dataclass

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")

_STRINGS_OFFSET = 65
_MINT_DECIMALS_OFFSET = 44
SPL_MINT_SIZE = 82


@dataclass
class TokenMetadata:
    """Display fields decoded from a Metaplex metadata account."""

    name: str | None = None
    symbol: str | None = None
    uri: str | None = None


def metadata_address(mint: str) -> str:
    """Derive the Metaplex metadata PDA for a mint."""
    pda, _bump = Pubkey.find_program_address(
        [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(Pubkey.from_string(mint))],
        METADATA_PROGRAM_ID,
    )
    return str(pda)


def decode_metadata(raw: bytes) -> TokenMetadata:
    """Decode name / symbol / uri. Truncated data yields the fields read so far."""
    result = TokenMetadata()
    offset = _STRINGS_OFFSET
    values: list[str | None] = []
    for _ in range(3):
        value, offset = _read_string(raw, offset)
        if value is None:
            break
        values.append(value or None)

    if len(values) > 0:
        result.name = values[0]
    if len(values) > 1:
        result.symbol = values[1]
    if len(values) > 2:
        result.uri = values[2]
    return result


def decode_mint_decimals(raw: bytes) -> int | None:
    if len(raw) < SPL_MINT_SIZE:
        return None
    return raw[_MINT_DECIMALS_OFFSET]


def _read_string(raw: bytes, offset: int) -> tuple[str | None, int]:
    if offset + 4 > len(raw):
        return None, offset
    (length,) = struct.unpack_from("<I", raw, offset)
    start = offset + 4
    end = start + length
    if end > len(raw):
        return None, offset
    text = raw[start:end].decode("utf-8", errors="ignore").replace("\x00", "").strip()
    return text, end
