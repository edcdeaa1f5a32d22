"""Remote source contract consumed by the refresh coordinator."""

from __future__ import annotations

from typing import Any, List, Protocol


class RemoteSource(Protocol):
    """One-shot fetch of the complete current record set.

    Implementations raise on transport or availability failures; the
    coordinator treats any exception as a failed fetch.
    """

    async def fetch_all(self) -> List[Any]:
        ...


__all__ = ["RemoteSource"]
