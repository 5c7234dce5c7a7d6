"""Signal engine — evaluates a strategy and post-processes its signal.

Flow:
    1. Resolve the strategy from the registry and evaluate a base signal.
    2. Adjust confidence with the strategy × regime table.
    3. Estimate the expected return, classify risk, place stop/target.
    4. Return a new, fully populated ``TradingSignal``.

Also exposes position sizing so callers reach the whole decision model
through one object.
"""

import dataclasses
import logging
import random
from datetime import datetime
from typing import Callable, Optional, Sequence

from krakensim.models.trading_config import TradingConfig
from krakensim.risk.position_sizer import calculate_position_size
from krakensim.risk.risk_level import determine_risk_level, expected_return
from krakensim.risk.sl_tp import calculate_stop_loss, calculate_take_profit
from krakensim.strategy.base import StrategyProtocol
from krakensim.strategy.models import (
    MarketRegime,
    RegimeType,
    StrategyName,
    TradingSignal,
)
from krakensim.strategy.registry import build_registry, resolve_name

logger = logging.getLogger("krakensim.signals")

MIN_CONFIDENCE = 30
MAX_CONFIDENCE = 95

S = StrategyName

# regime → {strategy: delta}, with "*" as the fallback for unlisted strategies
CONFIDENCE_ADJUSTMENTS: dict[RegimeType, dict[StrategyName | str, int]] = {
    RegimeType.TRENDING_UP: {
        S.MOMENTUM: 22,
        S.NEURAL_NETWORK: 18,
        S.SWING_TRADING: 20,
        S.MULTI_TIMEFRAME: 15,
        S.MEAN_REVERSION: -18,
        "*": 10,
    },
    RegimeType.TRENDING_DOWN: {
        S.MOMENTUM: 18,
        S.MEAN_REVERSION: 22,
        S.SWING_TRADING: 15,
        S.MULTI_TIMEFRAME: 12,
        "*": 8,
    },
    RegimeType.HIGH_VOLATILITY: {
        S.ARBITRAGE: 28,
        S.SCALPING: 25,
        S.ENSEMBLE: 18,
        S.NEURAL_NETWORK: 15,
        "*": -25,
    },
    RegimeType.BREAKOUT: {
        S.MOMENTUM: 28,
        S.NEURAL_NETWORK: 25,
        S.MULTI_TIMEFRAME: 20,
        "*": 12,
    },
    RegimeType.SIDEWAYS: {
        S.MEAN_REVERSION: 28,
        S.ARBITRAGE: 22,
        S.SCALPING: 18,
        "*": -18,
    },
}


def regime_delta(regime_type: RegimeType, strategy: StrategyName) -> int:
    table = CONFIDENCE_ADJUSTMENTS.get(regime_type, {})
    return table.get(strategy, table.get("*", 0))


def adjust_confidence(
    base_confidence: int,
    regime: MarketRegime,
    strategy: StrategyName,
) -> int:
    """Add the regime-scaled table delta and clamp to [30, 95]."""
    delta = int(regime.confidence * regime_delta(regime.type, strategy))
    return min(max(base_confidence + delta, MIN_CONFIDENCE), MAX_CONFIDENCE)


class SignalEngine:
    """Generates post-processed trading signals and position sizes.

    Args:
        rng: Random source shared by the stochastic strategies and the
             expected-return damping.
        clock: UTC clock for time-of-day strategies.
        strategies: Pre-built registry (tests); built from *rng*/*clock*
                    when omitted.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        strategies: Optional[dict[StrategyName, StrategyProtocol]] = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._strategies = strategies or build_registry(self._rng, clock)

    def get_strategy(self, name: StrategyName | str) -> StrategyProtocol:
        """Look up a strategy.  Raises ``KeyError`` for unknown names."""
        return self._strategies[resolve_name(name)]

    def generate_signal(
        self,
        strategy: StrategyName | str,
        current_price: float,
        history: Sequence[float],
        regime: MarketRegime,
        volatility: float,
        config: TradingConfig,
    ) -> TradingSignal:
        """Evaluate *strategy* and fill in confidence, risk and exit levels."""
        evaluator = self.get_strategy(strategy)
        base = evaluator.evaluate(current_price, history, regime, volatility)

        confidence = adjust_confidence(base.confidence, regime, evaluator.name)
        risk_level = determine_risk_level(volatility, regime, config.risk_level)

        signal = dataclasses.replace(
            base,
            confidence=confidence,
            expected_return=expected_return(base.action, volatility, regime, self._rng),
            risk_level=risk_level,
            stop_loss=calculate_stop_loss(
                current_price, base.action, volatility, config.stop_loss,
            ),
            take_profit=calculate_take_profit(
                current_price, base.action, volatility, config.profit_target,
            ),
            market_regime=regime.type.value,
            reasoning=(
                f"{base.reasoning} | Market: {regime.type.value} "
                f"| Trend: {regime.trend_quality} | Risk: {risk_level.value}"
            ),
        )
        logger.debug(
            "%s → %s @ %d%% (base %d%%, regime %s)",
            evaluator.name.value, signal.action.value, confidence,
            base.confidence, regime.type.value,
        )
        return signal

    def size_position(
        self,
        base_size: float,
        volatility: float,
        confidence: int,
        max_allocation: float,
        config: TradingConfig,
        balance: float,
    ) -> float:
        """GBP allocation for a signal; see ``calculate_position_size``."""
        return calculate_position_size(
            base_size, volatility, confidence, max_allocation, config, balance,
        )
