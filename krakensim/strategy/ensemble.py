"""AI Ensemble meta-strategy — regime-weighted vote over five base strategies.

Each member's confidence is credited to the action it chose, weighted by a
preset picked from the current regime.  An action wins only if it beats the
other two outright *and* clears 65 % of the total weight (i.e. an average
confidence of 65 across the panel); otherwise the ensemble holds.
"""

import random
from typing import Optional, Sequence

from krakensim.strategy.base import StrategyProtocol, make_signal
from krakensim.strategy.mean_reversion import MeanReversionStrategy
from krakensim.strategy.models import (
    Action,
    MarketRegime,
    RegimeType,
    StrategyName,
    TradingSignal,
)
from krakensim.strategy.momentum import MomentumStrategy
from krakensim.strategy.neural import NeuralNetworkStrategy
from krakensim.strategy.scalping import ScalpingStrategy
from krakensim.strategy.swing import SwingTradingStrategy

WINNING_SCORE_PER_WEIGHT = 65
MIN_CONFIDENCE = 55
MAX_CONFIDENCE = 95

_TREND_WEIGHTS = {
    StrategyName.MOMENTUM: 0.35,
    StrategyName.NEURAL_NETWORK: 0.25,
    StrategyName.SWING_TRADING: 0.20,
    StrategyName.MEAN_REVERSION: 0.15,
    StrategyName.SCALPING: 0.05,
}

REGIME_WEIGHTS: dict[RegimeType, dict[StrategyName, float]] = {
    RegimeType.TRENDING_UP: _TREND_WEIGHTS,
    RegimeType.TRENDING_DOWN: _TREND_WEIGHTS,
    RegimeType.SIDEWAYS: {
        StrategyName.MEAN_REVERSION: 0.35,
        StrategyName.SCALPING: 0.25,
        StrategyName.NEURAL_NETWORK: 0.20,
        StrategyName.MOMENTUM: 0.15,
        StrategyName.SWING_TRADING: 0.05,
    },
    RegimeType.HIGH_VOLATILITY: {
        StrategyName.SCALPING: 0.35,
        StrategyName.NEURAL_NETWORK: 0.30,
        StrategyName.MOMENTUM: 0.20,
        StrategyName.MEAN_REVERSION: 0.10,
        StrategyName.SWING_TRADING: 0.05,
    },
    RegimeType.BREAKOUT: {
        StrategyName.MOMENTUM: 0.40,
        StrategyName.NEURAL_NETWORK: 0.25,
        StrategyName.SWING_TRADING: 0.20,
        StrategyName.SCALPING: 0.10,
        StrategyName.MEAN_REVERSION: 0.05,
    },
}

DEFAULT_WEIGHTS: dict[StrategyName, float] = {
    StrategyName.NEURAL_NETWORK: 0.30,
    StrategyName.MOMENTUM: 0.25,
    StrategyName.MEAN_REVERSION: 0.20,
    StrategyName.SWING_TRADING: 0.15,
    StrategyName.SCALPING: 0.10,
}


def weights_for(regime_type: RegimeType) -> dict[StrategyName, float]:
    return REGIME_WEIGHTS.get(regime_type, DEFAULT_WEIGHTS)


def combine(
    signals: Sequence[TradingSignal],
    weights: dict[StrategyName, float],
) -> tuple[Action, dict[Action, float], float]:
    """Score member signals and pick the winning action.

    Returns ``(action, scores_by_action, total_weight)``.
    """
    scores = {Action.BUY: 0.0, Action.SELL: 0.0, Action.HOLD: 0.0}
    total_weight = 0.0
    for signal in signals:
        weight = weights[signal.strategy]
        scores[signal.action] += signal.confidence * weight
        total_weight += weight

    threshold = total_weight * WINNING_SCORE_PER_WEIGHT
    buy, sell, hold = scores[Action.BUY], scores[Action.SELL], scores[Action.HOLD]
    if buy > sell and buy > hold and buy > threshold:
        action = Action.BUY
    elif sell > buy and sell > hold and sell > threshold:
        action = Action.SELL
    else:
        action = Action.HOLD
    return action, scores, total_weight


class EnsembleStrategy:
    """Implements ``StrategyProtocol``.

    Args:
        rng: Random source shared with the neural member.
        members: Override the five member strategies (tests).
    """

    name = StrategyName.ENSEMBLE

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        members: Optional[Sequence[StrategyProtocol]] = None,
    ) -> None:
        if members is None:
            members = (
                MeanReversionStrategy(),
                MomentumStrategy(),
                NeuralNetworkStrategy(rng),
                ScalpingStrategy(),
                SwingTradingStrategy(),
            )
        self._members = tuple(members)

    def evaluate(
        self,
        current: float,
        history: Sequence[float],
        regime: MarketRegime,
        volatility: float,
    ) -> TradingSignal:
        # Members see the regime's own volatility estimate, not the caller's.
        signals = [
            member.evaluate(current, history, regime, regime.volatility)
            for member in self._members
        ]
        weights = weights_for(regime.type)
        action, scores, total_weight = combine(signals, weights)

        buy, sell = scores[Action.BUY], scores[Action.SELL]
        confidence = int(sum(scores.values()) / total_weight)
        confidence = min(max(confidence, MIN_CONFIDENCE), MAX_CONFIDENCE)

        return make_signal(
            action, confidence, self.name,
            f"Multi-strategy consensus | Buy: {buy:.1f} Sell: {sell:.1f} "
            f"| Regime: {regime.type.value} | Quality: {regime.trend_quality}",
            (buy + sell) / (total_weight * 100),
        )
