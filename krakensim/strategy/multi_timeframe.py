"""Multi-Timeframe strategy — agreement of four nested moving-average trends."""

from typing import Sequence

from krakensim.strategy.base import insufficient_data, make_signal
from krakensim.strategy.indicators import mean
from krakensim.strategy.models import Action, MarketRegime, StrategyName, TradingSignal

MIN_HISTORY = 100
TREND_DEADBAND = 0.005


def timeframe_trends(current: float, history: Sequence[float]) -> list[float]:
    """Return the short, medium, long and very-long trend ratios."""
    short_term = mean(history[-5:])
    medium_term = mean(history[-20:])
    long_term = mean(history[-50:])
    very_long_term = mean(history[-100:])
    return [
        (current - short_term) / short_term,
        (short_term - medium_term) / medium_term,
        (medium_term - long_term) / long_term,
        (long_term - very_long_term) / very_long_term,
    ]


class MultiTimeframeStrategy:
    """Implements ``StrategyProtocol``."""

    name = StrategyName.MULTI_TIMEFRAME

    def evaluate(
        self,
        current: float,
        history: Sequence[float],
        regime: MarketRegime,
        volatility: float,
    ) -> TradingSignal:
        if len(history) < MIN_HISTORY:
            return insufficient_data(self.name, 40)

        trends = timeframe_trends(current, history)
        bullish = sum(1 for t in trends if t > TREND_DEADBAND)
        bearish = sum(1 for t in trends if t < -TREND_DEADBAND)

        avg_trend = mean(trends)
        dispersion = mean([abs(t - avg_trend) for t in trends])
        consistency = 1.0 - min(max(dispersion / 0.02, 0.0), 1.0)

        if bullish >= 3 and avg_trend > 0.015 and consistency > 0.7:
            return make_signal(
                Action.BUY, 89, self.name,
                f"Strong multi-timeframe bullish alignment | Bullish: {bullish}/4 "
                f"| Consistency: {consistency:.2f}",
                0.86,
            )
        if bearish >= 3 and avg_trend < -0.015 and consistency > 0.7:
            return make_signal(
                Action.SELL, 87, self.name,
                f"Strong multi-timeframe bearish alignment | Bearish: {bearish}/4 "
                f"| Consistency: {consistency:.2f}",
                0.84,
            )
        if bullish > bearish and avg_trend > 0.008:
            return make_signal(
                Action.BUY, 72, self.name, "Moderate bullish timeframe alignment", 0.68,
            )
        if bearish > bullish and avg_trend < -0.008:
            return make_signal(
                Action.SELL, 70, self.name, "Moderate bearish timeframe alignment", 0.66,
            )
        return make_signal(Action.HOLD, 58, self.name, "Mixed timeframe signals", 0.50)
