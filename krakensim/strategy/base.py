"""Strategy protocol and shared helpers.

Defines the interface that all strategies must implement.  Strategies are
synchronous and pure apart from their injected random source / clock: they
receive the current price, the price window, the regime and the volatility,
and return a base ``TradingSignal``.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from krakensim.strategy.models import Action, MarketRegime, StrategyName, TradingSignal


@runtime_checkable
class StrategyProtocol(Protocol):
    """Interface that all signal strategies must satisfy."""

    name: StrategyName

    def evaluate(
        self,
        current: float,
        history: Sequence[float],
        regime: MarketRegime,
        volatility: float,
    ) -> TradingSignal:
        """Turn price history + regime into a base signal."""
        ...


def make_signal(
    action: Action,
    confidence: int,
    strategy: StrategyName,
    reasoning: str,
    technical_score: float = 0.0,
) -> TradingSignal:
    """Build a base signal; risk/return fields are filled by the signal engine."""
    return TradingSignal(
        action=action,
        confidence=confidence,
        strategy=strategy,
        reasoning=reasoning,
        technical_score=technical_score,
    )


def insufficient_data(strategy: StrategyName, confidence: int) -> TradingSignal:
    """Conservative HOLD returned while the window is shorter than required."""
    return make_signal(Action.HOLD, confidence, strategy, "Insufficient data")
