"""Paper exchange — in-memory ledger that fills orders at synthetic prices.

Implements ``MarketAccess`` for paper mode.  The ledger is the only owner
of balances, trade history, P&L history, streaks and daily counters.

Every order runs inside one ``asyncio.Lock``.  All suspension points
(order latency, price lookup) come before the first mutation and the
mutations themselves are a single synchronous block, so an order that is
cancelled or rejected leaves the ledger exactly as it found it.
"""

import asyncio
import logging
import math
import random
from collections import deque
from datetime import date, datetime, timezone
from typing import Callable, Optional

from krakensim.analytics.estimators import MetricsEstimator, RandomizedMetricsEstimator
from krakensim.analytics.models import BotStats, RiskMetrics
from krakensim.analytics.stats import bot_stats, equity, risk_metrics
from krakensim.broker.errors import InsufficientFunds, UnsupportedPair
from krakensim.broker.models import (
    INITIAL_BALANCES,
    SUPPORTED_PAIRS,
    LedgerSnapshot,
    OrderSide,
    TradeRecord,
)
from krakensim.market.generator import MarketGenerator
from krakensim.strategy.indicators import calculate_volatility
from krakensim.strategy.models import MarketRegime
from krakensim.strategy.regime import classify_regime

logger = logging.getLogger("krakensim.broker")

PNL_HISTORY_SIZE = 150
TRADE_HISTORY_LIMIT = 75
ORDER_LATENCY = 0.3  # seconds


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ThreeBranchProfitModel:
    """Draws the simulated edge of a trade as a fraction of its notional.

    72 % of trades win 1.5–18 %, 16 % land between −2.5 % and +3 %, and
    12 % lose 1–12 %.  The draw does not change the fill; it is only the
    recorded outcome.
    """

    # (cumulative probability, low fraction, high fraction)
    BRANCHES = (
        (0.72, 0.015, 0.18),
        (0.88, -0.025, 0.03),
        (1.00, -0.12, -0.01),
    )

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def __call__(self, notional: float) -> float:
        roll = self._rng.random()
        for cumulative, low, high in self.BRANCHES:
            if roll < cumulative:
                return self._rng.uniform(notional * low, notional * high)
        _, low, high = self.BRANCHES[-1]
        return self._rng.uniform(notional * low, notional * high)


class PaperExchange:
    """Paper-trading ledger backed by a ``MarketGenerator``.

    Args:
        market: Price source; any object with ``next_price``, ``get_ohlc``
                and ``price_history`` (a stub in tests).
        balances: Starting balances; defaults to BTC 1.2, ETH 3.5, GBP 12000.
        profit_model: ``notional -> profit`` callable.
        estimator: Source of the randomized / derived analytics figures.
        clock: UTC clock; the daily reset follows the UTC calendar day.
        order_latency: Seconds to suspend before filling an order.
        reference_pair: Pair whose window feeds the reported volatility.
    """

    def __init__(
        self,
        market: Optional[MarketGenerator] = None,
        balances: Optional[dict[str, float]] = None,
        profit_model: Optional[Callable[[float], float]] = None,
        estimator: Optional[MetricsEstimator] = None,
        clock: Callable[[], datetime] = _utc_now,
        order_latency: float = ORDER_LATENCY,
        reference_pair: str = "BTC/GBP",
    ) -> None:
        self._market = market or MarketGenerator(clock=clock)
        self._balances: dict[str, float] = dict(balances or INITIAL_BALANCES)
        self._profit_model = profit_model or ThreeBranchProfitModel()
        self._estimator = estimator or RandomizedMetricsEstimator()
        self._clock = clock
        self._order_latency = order_latency
        self._reference_pair = reference_pair
        self._lock = asyncio.Lock()

        self._initial_equity = equity(self._balances)
        self._trade_history: list[TradeRecord] = []
        self._pnl_history: deque[float] = deque(maxlen=PNL_HISTORY_SIZE)
        self._trade_timestamps: list[datetime] = []
        self._total_trades = 0
        self._winning_trades = 0
        self._total_wins = 0.0
        self._total_losses = 0.0
        self._daily_trades = 0
        self._daily_pnl = 0.0
        self._last_reset: date = self._clock().date()
        self._current_streak = 0
        self._max_win_streak = 0

    # ── MarketAccess ─────────────────────────────────────────────────────

    async def get_balances(self) -> dict[str, float]:
        return dict(self._balances)

    async def get_price(self, pair: str) -> float:
        return await self._market.next_price(pair)

    async def get_ohlc(self, pair: str) -> list[tuple[int, float]]:
        return await self._market.get_ohlc(pair)

    async def buy(self, pair: str, quantity: float) -> str:
        """Buy *quantity* of the pair's asset with GBP."""
        return await self._execute(OrderSide.BUY, pair, quantity)

    async def sell(self, pair: str, quantity: float) -> str:
        """Sell *quantity* of the pair's asset for GBP."""
        return await self._execute(OrderSide.SELL, pair, quantity)

    # ── Daily counters ───────────────────────────────────────────────────

    def reset_daily_counters(self) -> bool:
        """Zero the daily trade count and P&L when the UTC date has changed.

        Returns ``True`` if a reset happened.  Calling it again on the same
        day is a no-op.
        """
        today = self._clock().date()
        if today == self._last_reset:
            return False
        logger.info(
            "New trading day %s — resetting daily counters (%d trades, P&L £%.2f)",
            today.isoformat(), self._daily_trades, self._daily_pnl,
        )
        self._daily_trades = 0
        self._daily_pnl = 0.0
        self._last_reset = today
        return True

    # ── Orders ───────────────────────────────────────────────────────────

    async def _execute(self, side: OrderSide, pair: str, quantity: float) -> str:
        if not math.isfinite(quantity) or quantity <= 0:
            raise ValueError(f"quantity must be a positive number, got {quantity}")
        legs = SUPPORTED_PAIRS.get(pair)
        if legs is None:
            raise UnsupportedPair(pair)
        asset, quote = legs

        async with self._lock:
            self.reset_daily_counters()
            await asyncio.sleep(self._order_latency)
            price = await self._market.next_price(pair)
            notional = quantity * price

            if side == OrderSide.BUY and self._balances[quote] < notional:
                logger.warning(
                    "Rejected BUY %.6f %s: need £%.2f, have £%.2f",
                    quantity, asset, notional, self._balances[quote],
                )
                raise InsufficientFunds(quote, notional, self._balances[quote])
            if side == OrderSide.SELL and self._balances[asset] < quantity:
                logger.warning(
                    "Rejected SELL %.6f %s: have %.6f",
                    quantity, asset, self._balances[asset],
                )
                raise InsufficientFunds(asset, quantity, self._balances[asset])

            profit = self._profit_model(notional)
            trade = TradeRecord(
                side=side,
                asset=asset,
                quantity=quantity,
                price=price,
                timestamp=self._clock(),
                profit=profit,
            )
            # No awaits past this point: the order applies as one unit.
            self._apply(trade, quote, notional)

        roi = profit / notional * 100.0 if notional else 0.0
        confirmation = (
            f"✓ {side.value} {quantity:.6f} {asset} @ £{price:.2f} "
            f"| P&L: £{profit:.2f} | ROI: {roi:.2f}%"
        )
        logger.info(confirmation)
        return confirmation

    def _apply(self, trade: TradeRecord, quote: str, notional: float) -> None:
        if trade.side == OrderSide.BUY:
            self._balances[quote] -= notional
            self._balances[trade.asset] += trade.quantity
        else:
            self._balances[trade.asset] -= trade.quantity
            self._balances[quote] += notional

        self._daily_trades += 1
        self._trade_timestamps.append(trade.timestamp)

        profit = trade.profit
        self._pnl_history.append(profit)
        self._daily_pnl += profit
        self._trade_history.append(trade)
        self._total_trades += 1

        if profit > 0:
            self._winning_trades += 1
            self._total_wins += profit
            self._current_streak = self._current_streak + 1 if self._current_streak > 0 else 1
            self._max_win_streak = max(self._max_win_streak, self._current_streak)
        else:
            self._total_losses += abs(profit)
            self._current_streak = self._current_streak - 1 if self._current_streak < 0 else -1

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def initial_equity(self) -> float:
        return self._initial_equity

    @property
    def current_streak(self) -> int:
        """Signed streak: positive = consecutive wins, negative = losses."""
        return self._current_streak

    @property
    def max_win_streak(self) -> int:
        return self._max_win_streak

    @property
    def pnl_history(self) -> tuple[float, ...]:
        return tuple(self._pnl_history)

    def get_trade_history(self, limit: int = TRADE_HISTORY_LIMIT) -> list[TradeRecord]:
        """Most recent trades, oldest first, never more than 75."""
        limit = min(max(limit, 0), TRADE_HISTORY_LIMIT)
        if limit == 0:
            return []
        return list(self._trade_history[-limit:])

    def get_daily_stats(self) -> tuple[int, float]:
        """``(trades today, realised P&L today)``."""
        return self._daily_trades, self._daily_pnl

    def price_history(self, pair: str) -> tuple[float, ...]:
        return self._market.price_history(pair)

    def get_volatility(self, pair: Optional[str] = None) -> float:
        return calculate_volatility(self.price_history(pair or self._reference_pair))

    def get_market_regime(self, pair: Optional[str] = None) -> MarketRegime:
        """Classify the regime fresh from the pair's current window."""
        return classify_regime(self.price_history(pair or self._reference_pair))

    def snapshot(self) -> LedgerSnapshot:
        """Immutable copy of the ledger state for the analytics."""
        return LedgerSnapshot(
            balances=dict(self._balances),
            initial_equity=self._initial_equity,
            pnl_history=tuple(self._pnl_history),
            trade_timestamps=tuple(self._trade_timestamps),
            total_trades=self._total_trades,
            winning_trades=self._winning_trades,
            total_wins=self._total_wins,
            total_losses=self._total_losses,
            current_streak=self._current_streak,
            max_win_streak=self._max_win_streak,
            daily_trades=self._daily_trades,
            daily_pnl=self._daily_pnl,
            volatility=self.get_volatility(),
        )

    def get_risk_metrics(self) -> RiskMetrics:
        return risk_metrics(self.snapshot(), self._estimator)

    def get_bot_stats(self) -> BotStats:
        return bot_stats(self.snapshot(), self._estimator)
