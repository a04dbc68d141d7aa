"""Pydantic models for Helius token-metadata API responses.

Helius returns either flat records or the nested on-chain / legacy
metadata layout; both are accepted.
"""

from pydantic import BaseModel


class HeliusMetadataData(BaseModel):
    name: str | None = None
    symbol: str | None = None
    uri: str | None = None

    model_config = {"extra": "ignore"}


class HeliusOnChainMetadataInner(BaseModel):
    data: HeliusMetadataData | None = None

    model_config = {"extra": "ignore"}


class HeliusOnChainMetadata(BaseModel):
    metadata: HeliusOnChainMetadataInner | None = None

    model_config = {"extra": "ignore"}


class HeliusLegacyMetadata(BaseModel):
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    logoURI: str | None = None

    model_config = {"extra": "ignore"}


class HeliusTokenMetadata(BaseModel):
    """One entry of the /v0/token-metadata response."""

    mint: str | None = None
    account: str | None = None
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    description: str | None = None
    image: str | None = None
    onChainMetadata: HeliusOnChainMetadata | None = None
    legacyMetadata: HeliusLegacyMetadata | None = None

    model_config = {"extra": "ignore"}

    @property
    def address(self) -> str:
        return self.mint or self.account or ""

    @property
    def on_chain(self) -> HeliusMetadataData | None:
        if self.onChainMetadata and self.onChainMetadata.metadata:
            return self.onChainMetadata.metadata.data
        return None
