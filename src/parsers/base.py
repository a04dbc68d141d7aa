"""Common contract for discovery sources.

A source issues one remote request per call and normalizes the payload
into TokenRecord objects. Any failure is contained here and surfaces as
an empty list, so one broken source never aborts a discovery cycle.
"""

from abc import ABC, abstractmethod

import httpx
from loguru import logger

from src.models.token import TokenRecord

DEFAULT_TIMEOUT = 10.0


class SourceError(Exception):
    pass


class TokenSource(ABC):
    """Base class for discovery source adapters."""

    name: str = "source"
    tag: str = "SOURCE"

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT, **client_kwargs) -> None:
        self._timeout = timeout
        self.last_error: str | None = None
        self._client = httpx.AsyncClient(timeout=timeout, **client_kwargs)

    @property
    def enabled(self) -> bool:
        return True

    @property
    def timeout(self) -> float:
        return self._timeout

    async def fetch_tokens(self) -> list[TokenRecord]:
        """Fetch and normalize the latest tokens. Never raises.

        On failure last_error describes what went wrong.
        """
        self.last_error = None
        try:
            tokens = await self._fetch()
        except httpx.TimeoutException as e:
            self.last_error = f"timeout after {self._timeout}s ({type(e).__name__})"
        except httpx.HTTPStatusError as e:
            self.last_error = f"HTTP {e.response.status_code}"
        except Exception as e:
            self.last_error = str(e) or type(e).__name__
        else:
            logger.debug(f"[{self.tag}] Fetched {len(tokens)} tokens")
            return tokens

        logger.warning(f"[{self.tag}] Fetch failed: {self.last_error}")
        return []

    @abstractmethod
    async def _fetch(self) -> list[TokenRecord]:
        """Issue the request and parse the response. May raise."""

    async def close(self) -> None:
        await self._client.aclose()


def parse_items(items: list, parse_one, tag: str) -> list[TokenRecord]:
    """Apply a per-item parser, skipping items that fail to normalize."""
    tokens: list[TokenRecord] = []
    for item in items:
        try:
            token = parse_one(item)
        except Exception as e:
            logger.debug(f"[{tag}] Skipping malformed item: {e}")
            continue
        if token is not None:
            tokens.append(token)
    return tokens
