"""Broker errors — typed failures surfaced by market-access providers.

Every failure is local to the single order that raised it: the ledger is
left exactly as it was before the call.
"""


class KrakenSimError(Exception):
    """Base class for all errors raised by the trading core."""


class InsufficientFunds(KrakenSimError):
    """An order needs more of *asset* than the ledger holds."""

    def __init__(self, asset: str, required: float, available: float) -> None:
        self.asset = asset
        self.required = required
        self.available = available
        if asset == "GBP":
            detail = f"Need £{required:.2f}, have £{available:.2f}"
        else:
            detail = f"Need {required:.6f}, have {available:.6f}"
        super().__init__(f"Insufficient {asset}: {detail}")


class UnsupportedPair(KrakenSimError):
    """The instrument is not one the provider can trade."""

    def __init__(self, pair: str) -> None:
        self.pair = pair
        super().__init__(f"Unsupported trading pair: {pair}")
