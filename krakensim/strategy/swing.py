"""Swing strategy — trend continuation and pullback entries.

Uses the SMA(20)/SMA(50) trend, EMA(12)/EMA(26) alignment and RSI, gated
by the current regime for continuation setups.
"""

from typing import Sequence

from krakensim.strategy.base import insufficient_data, make_signal
from krakensim.strategy.indicators import calculate_ema, calculate_rsi, mean
from krakensim.strategy.models import (
    Action,
    MarketRegime,
    RegimeType,
    StrategyName,
    TradingSignal,
)

MIN_HISTORY = 60

_BULL_REGIMES = (RegimeType.TRENDING_UP, RegimeType.BREAKOUT)


class SwingTradingStrategy:
    """Implements ``StrategyProtocol``."""

    name = StrategyName.SWING_TRADING

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
        sma50 = mean(history[-50:])
        ema12 = calculate_ema(history, 12)
        ema26 = calculate_ema(history, 26)

        trend_strength = (sma20 - sma50) / sma50
        ema_alignment = (ema12 - ema26) / ema26
        price_position = (current - sma20) / sma20
        rsi = calculate_rsi(history)

        if (
            regime.type in _BULL_REGIMES
            and ema_alignment > 0.015
            and price_position > -0.025
            and rsi < 65
        ):
            return make_signal(
                Action.BUY, 86, self.name,
                f"Strong uptrend continuation setup | EMA alignment: "
                f"{ema_alignment * 100:.3f}% | RSI: {rsi:.1f}",
                0.84,
            )
        if (
            regime.type == RegimeType.TRENDING_DOWN
            and ema_alignment < -0.015
            and price_position < 0.025
            and rsi > 35
        ):
            return make_signal(
                Action.SELL, 84, self.name,
                f"Strong downtrend continuation setup | EMA alignment: "
                f"{ema_alignment * 100:.3f}% | RSI: {rsi:.1f}",
                0.82,
            )
        if trend_strength > 0.035 and price_position < -0.035:
            return make_signal(Action.BUY, 78, self.name, "Trend pullback buy opportunity", 0.75)
        if trend_strength < -0.035 and price_position > 0.035:
            return make_signal(Action.SELL, 76, self.name, "Trend pullback sell opportunity", 0.73)
        return make_signal(Action.HOLD, 62, self.name, "No clear swing setup", 0.50)
