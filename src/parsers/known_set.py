"""In-memory registry of mints the radar has already observed.

Grows monotonically for the lifetime of the process and is never
persisted. Only the novelty filter mutates it.
"""

from collections.abc import Iterable, Iterator


class KnownTokenSet:
    """Set of observed mint addresses."""

    def __init__(self, mints: Iterable[str] = ()) -> None:
        self._mints: set[str] = set(mints)

    def __contains__(self, mint: object) -> bool:
        return mint in self._mints

    def __len__(self) -> int:
        return len(self._mints)

    def __iter__(self) -> Iterator[str]:
        return iter(self._mints)

    def add(self, mint: str) -> bool:
        """Mark a mint as known. Returns True if it was not known before."""
        if mint in self._mints:
            return False
        self._mints.add(mint)
        return True
