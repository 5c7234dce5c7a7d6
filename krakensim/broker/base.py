"""Market-access protocol.

The paper exchange implements it; a live exchange client would be an
alternate provider behind the same interface.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class MarketAccess(Protocol):
    """Interface every market provider must satisfy."""

    async def get_balances(self) -> dict[str, float]:
        """Return asset → quantity."""
        ...

    async def get_price(self, pair: str) -> float:
        """Return the current price of *pair*."""
        ...

    async def get_ohlc(self, pair: str) -> list[tuple[int, float]]:
        """Return ``(unix_seconds, price)`` points, oldest first."""
        ...

    async def buy(self, pair: str, quantity: float) -> str:
        """Buy *quantity* of the pair's asset; return a confirmation line.

        Raises ``InsufficientFunds`` or ``UnsupportedPair``.
        """
        ...

    async def sell(self, pair: str, quantity: float) -> str:
        """Sell *quantity* of the pair's asset; return a confirmation line.

        Raises ``InsufficientFunds`` or ``UnsupportedPair``.
        """
        ...
