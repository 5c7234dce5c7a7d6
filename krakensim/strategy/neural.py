"""Neural-style strategy — a fixed linear feature blend squashed by tanh.

Not a trained network: seven normalised features (RSI, MACD, Bollinger
position, 12-tick momentum, volatility and two synthetic volume/ADX
readings) are combined with hand-set weights.  Volume and ADX are drawn
from the injected random source because paper mode has no order book.
"""

import math
import random
from typing import Optional, Sequence

from krakensim.strategy.base import insufficient_data, make_signal
from krakensim.strategy.indicators import (
    calculate_bollinger_position,
    calculate_macd,
    calculate_rsi,
    mean,
    returns,
)
from krakensim.strategy.models import Action, MarketRegime, StrategyName, TradingSignal

MIN_HISTORY = 25

FEATURE_WEIGHTS = (0.22, 0.20, 0.18, 0.15, 0.12, 0.08, 0.05)
OUTPUT_GAIN = 1.2
ACTION_THRESHOLD = 0.45


class NeuralNetworkStrategy:
    """Implements ``StrategyProtocol``."""

    name = StrategyName.NEURAL_NETWORK

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def features(
        self, current: float, history: Sequence[float], volatility: float,
    ) -> tuple[list[float], dict]:
        """Return the normalised feature vector and the raw readings."""
        rsi = calculate_rsi(history)
        macd = calculate_macd(history)
        bollinger = calculate_bollinger_position(current, history)
        momentum = mean(returns(history[-12:]))
        volume = self._rng.uniform(0.4, 2.2)
        adx = self._rng.uniform(15.0, 85.0)

        vector = [
            (rsi - 50) / 50,
            macd * 1200,
            (bollinger - 50) / 50,
            momentum * 120,
            volatility * 120,
            (volume - 1) / 0.6,
            (adx - 50) / 35,
        ]
        raw = {"rsi": rsi, "macd": macd, "adx": adx}
        return vector, raw

    def evaluate(
        self,
        current: float,
        history: Sequence[float],
        regime: MarketRegime,
        volatility: float,
    ) -> TradingSignal:
        if len(history) < MIN_HISTORY:
            return insufficient_data(self.name, 45)

        vector, raw = self.features(current, history, volatility)
        hidden = sum(f * w for f, w in zip(vector, FEATURE_WEIGHTS))
        output = math.tanh(hidden * OUTPUT_GAIN)
        confidence = min(max(int(abs(output) * 100), 60), 95)

        if output > ACTION_THRESHOLD:
            action = Action.BUY
        elif output < -ACTION_THRESHOLD:
            action = Action.SELL
        else:
            action = Action.HOLD

        return make_signal(
            action, confidence, self.name,
            f"Deep learning prediction | Output: {output:.3f} | RSI: {raw['rsi']:.1f} "
            f"| MACD: {raw['macd']:.3f} | ADX: {raw['adx']:.1f}",
            abs(output),
        )
