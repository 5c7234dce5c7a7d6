"""Scalping strategy — micro-trend over the last three ticks vs. volatility."""

from typing import Sequence

from krakensim.strategy.base import insufficient_data, make_signal
from krakensim.strategy.indicators import mean, returns
from krakensim.strategy.models import Action, MarketRegime, StrategyName, TradingSignal

MIN_HISTORY = 12


class ScalpingStrategy:
    """Implements ``StrategyProtocol``."""

    name = StrategyName.SCALPING

    def evaluate(
        self,
        current: float,
        history: Sequence[float],
        regime: MarketRegime,
        volatility: float,
    ) -> TradingSignal:
        if len(history) < MIN_HISTORY:
            return insufficient_data(self.name, 35)

        micro_trend = mean(returns(history[-3:]))
        short_ma = mean(history[-6:])
        very_short_ma = mean(history[-3:])

        opportunity = abs(micro_trend) > volatility * 0.4
        alignment = (very_short_ma - short_ma) / short_ma
        # A flat market has no volatility to scale against: strength is 0, so
        # only the moderate tier can fire.
        strength = abs(micro_trend) / volatility if volatility > 0 else 0.0

        if opportunity and micro_trend > 0 and alignment > 0.0015 and strength > 1.2:
            return make_signal(
                Action.BUY, 82, self.name,
                f"Strong short-term bullish scalping opportunity | Micro-trend: "
                f"{micro_trend * 100:.4f}% | Strength: {strength:.2f}",
                0.78,
            )
        if opportunity and micro_trend < 0 and alignment < -0.0015 and strength > 1.2:
            return make_signal(
                Action.SELL, 80, self.name,
                f"Strong short-term bearish scalping opportunity | Micro-trend: "
                f"{micro_trend * 100:.4f}% | Strength: {strength:.2f}",
                0.76,
            )
        if opportunity and abs(alignment) > 0.0008:
            action = Action.BUY if micro_trend > 0 else Action.SELL
            return make_signal(action, 68, self.name, "Moderate scalping setup", 0.62)
        return make_signal(Action.HOLD, 55, self.name, "No clear scalping setup", 0.45)
