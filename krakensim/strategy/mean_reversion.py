"""Mean Reversion strategy — buys oversold / sells overbought extremes.

Combines the deviation from SMA(20), the SMA(20)/SMA(50) bias, RSI and the
Bollinger position.  Needs 40 prices.
"""

from typing import Sequence

from krakensim.strategy.base import insufficient_data, make_signal
from krakensim.strategy.indicators import (
    calculate_bollinger_position,
    calculate_rsi,
    mean,
)
from krakensim.strategy.models import Action, MarketRegime, StrategyName, TradingSignal

MIN_HISTORY = 40


class MeanReversionStrategy:
    """Implements ``StrategyProtocol``."""

    name = StrategyName.MEAN_REVERSION

    def evaluate(
        self,
        current: float,
        history: Sequence[float],
        regime: MarketRegime,
        volatility: float,
    ) -> TradingSignal:
        if len(history) < MIN_HISTORY:
            return insufficient_data(self.name, 35)

        sma20 = mean(history[-20:])
        sma50 = mean(history[-50:]) if len(history) >= 50 else sma20
        deviation = (current - sma20) / sma20
        long_term_trend = (sma20 - sma50) / sma50

        rsi = calculate_rsi(history)
        bb_pos = calculate_bollinger_position(current, history)

        if deviation < -0.10 and long_term_trend > -0.025 and rsi < 25:
            return make_signal(
                Action.BUY, 94, self.name,
                f"Extreme oversold with bullish bias | RSI: {rsi:.1f} | BB: {bb_pos:.1f}%",
                0.92,
            )
        if deviation > 0.10 and long_term_trend < 0.025 and rsi > 75:
            return make_signal(
                Action.SELL, 92, self.name,
                f"Extreme overbought with bearish bias | RSI: {rsi:.1f} | BB: {bb_pos:.1f}%",
                0.90,
            )
        if deviation < -0.06 and bb_pos < 15:
            return make_signal(
                Action.BUY, 85, self.name,
                f"Strong oversold condition | Bollinger: {bb_pos:.1f}%",
                0.83,
            )
        if deviation > 0.06 and bb_pos > 85:
            return make_signal(
                Action.SELL, 83, self.name,
                f"Strong overbought condition | Bollinger: {bb_pos:.1f}%",
                0.81,
            )
        return make_signal(
            Action.HOLD, 68, self.name,
            f"Price near equilibrium | Dev: {deviation * 100:.2f}%",
            0.50,
        )
