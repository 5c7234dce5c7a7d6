"""Broker data models — balances, trades and ledger snapshots."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class OrderSide(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


# ── Instrument metadata ──────────────────────────────────────────────────

# Pair → (asset leg, quote leg)
SUPPORTED_PAIRS: dict[str, tuple[str, str]] = {
    "BTC/GBP": ("BTC", "GBP"),
    "ETH/GBP": ("ETH", "GBP"),
}

# Reference prices used to seed the generator and to value the ledger.
REFERENCE_PRICES: dict[str, float] = {
    "BTC": 31_500.0,
    "ETH": 2_100.0,
    "GBP": 1.0,
}

INITIAL_BALANCES: dict[str, float] = {
    "BTC": 1.2,
    "ETH": 3.5,
    "GBP": 12_000.0,
}


@dataclass(frozen=True)
class TradeRecord:
    """A single executed paper order.  Created once, never mutated."""

    side: OrderSide
    asset: str
    quantity: float
    price: float
    timestamp: datetime
    profit: float = 0.0

    @property
    def notional(self) -> float:
        return self.quantity * self.price


@dataclass(frozen=True)
class LedgerSnapshot:
    """Point-in-time copy of the ledger handed to the analytics.

    Built inside the ledger so a reader never sees a half-applied order.
    """

    balances: dict[str, float]
    initial_equity: float
    pnl_history: tuple[float, ...]
    trade_timestamps: tuple[datetime, ...]
    total_trades: int
    winning_trades: int
    total_wins: float
    total_losses: float
    current_streak: int
    max_win_streak: int
    daily_trades: int
    daily_pnl: float
    volatility: float
