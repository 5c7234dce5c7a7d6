"""Arbitrage strategy — samples a synthetic cross-exchange spread.

Ignores price history.  The spread is widened during the low-liquidity
window and a BUY is raised only when it clears 2 %.
"""

import random
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from krakensim.market.sessions import is_low_liquidity
from krakensim.strategy.base import make_signal
from krakensim.strategy.models import Action, MarketRegime, StrategyName, TradingSignal

MAX_SPREAD = 0.028
LOW_LIQUIDITY_SPREAD_MULTIPLIER = 1.8
OPPORTUNITY_THRESHOLD = 0.020


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ArbitrageStrategy:
    """Implements ``StrategyProtocol``."""

    name = StrategyName.ARBITRAGE

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock

    def evaluate(
        self,
        current: float,
        history: Sequence[float],
        regime: MarketRegime,
        volatility: float,
    ) -> TradingSignal:
        hour = self._clock().hour
        low_liquidity = is_low_liquidity(hour)
        spread = self._rng.uniform(0.0, MAX_SPREAD)
        if low_liquidity:
            spread *= LOW_LIQUIDITY_SPREAD_MULTIPLIER

        if spread > OPPORTUNITY_THRESHOLD:
            confidence = int((spread - OPPORTUNITY_THRESHOLD) / 0.008 * 35 + 88)
            confidence = min(max(confidence, 88), 95)
            return make_signal(
                Action.BUY, confidence, self.name,
                f"Cross-exchange arbitrage opportunity | Spread: {spread * 100:.3f}% "
                f"| Time: {hour}:00 | Liquidity: {'LOW' if low_liquidity else 'NORMAL'}",
                min(spread * 35, 1.0),
            )
        return make_signal(
            Action.HOLD, 48, self.name,
            f"No significant arbitrage opportunities | Current spread: {spread * 100:.3f}%",
            0.35,
        )
