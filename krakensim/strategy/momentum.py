"""Momentum strategy — weighted short/medium/long momentum confirmed by MACD."""

from typing import Sequence

from krakensim.strategy.base import insufficient_data, make_signal
from krakensim.strategy.indicators import calculate_macd, mean
from krakensim.strategy.models import Action, MarketRegime, StrategyName, TradingSignal

MIN_HISTORY = 40


class MomentumStrategy:
    """Implements ``StrategyProtocol``."""

    name = StrategyName.MOMENTUM

    def evaluate(
        self,
        current: float,
        history: Sequence[float],
        regime: MarketRegime,
        volatility: float,
    ) -> TradingSignal:
        if len(history) < MIN_HISTORY:
            return insufficient_data(self.name, 35)

        short_term = mean(history[-5:])
        medium_term = mean(history[-15:])
        long_term = mean(history[-40:])

        short_mom = (current - short_term) / short_term
        medium_mom = (short_term - medium_term) / medium_term
        long_mom = (medium_term - long_term) / long_term

        weighted = short_mom * 0.5 + medium_mom * 0.35 + long_mom * 0.15
        macd = calculate_macd(history)

        if weighted > 0.05 and medium_mom > 0.03 and macd > 0:
            return make_signal(
                Action.BUY, 90, self.name,
                f"Strong multi-timeframe bullish momentum | MACD: {macd:.3f} "
                f"| WM: {weighted * 100:.3f}%",
                0.88,
            )
        if weighted < -0.05 and medium_mom < -0.03 and macd < 0:
            return make_signal(
                Action.SELL, 88, self.name,
                f"Strong multi-timeframe bearish momentum | MACD: {macd:.3f} "
                f"| WM: {weighted * 100:.3f}%",
                0.86,
            )
        if weighted > 0.025:
            return make_signal(Action.BUY, 75, self.name, "Moderate bullish momentum", 0.72)
        if weighted < -0.025:
            return make_signal(Action.SELL, 73, self.name, "Moderate bearish momentum", 0.70)
        return make_signal(Action.HOLD, 62, self.name, "Weak momentum signals", 0.50)
