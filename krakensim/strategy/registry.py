"""Strategy registry — maps strategy names to their evaluators.

Used by the signal engine to resolve a ``StrategyName`` (or its display
string, e.g. ``"Mean Reversion"``) to a strategy instance.
"""

import random
from datetime import datetime
from typing import Callable, Optional

from krakensim.strategy.arbitrage import ArbitrageStrategy
from krakensim.strategy.base import StrategyProtocol
from krakensim.strategy.ensemble import EnsembleStrategy
from krakensim.strategy.mean_reversion import MeanReversionStrategy
from krakensim.strategy.models import StrategyName
from krakensim.strategy.momentum import MomentumStrategy
from krakensim.strategy.multi_timeframe import MultiTimeframeStrategy
from krakensim.strategy.neural import NeuralNetworkStrategy
from krakensim.strategy.scalping import ScalpingStrategy
from krakensim.strategy.swing import SwingTradingStrategy


def build_registry(
    rng: Optional[random.Random] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> dict[StrategyName, StrategyProtocol]:
    """Instantiate one evaluator per ``StrategyName``.

    *rng* and *clock* are shared by the strategies that sample randomness
    or read the time of day.
    """
    rng = rng or random.Random()
    arbitrage = ArbitrageStrategy(rng, clock) if clock else ArbitrageStrategy(rng)
    registry: dict[StrategyName, StrategyProtocol] = {
        StrategyName.MEAN_REVERSION: MeanReversionStrategy(),
        StrategyName.MOMENTUM: MomentumStrategy(),
        StrategyName.ENSEMBLE: EnsembleStrategy(rng),
        StrategyName.NEURAL_NETWORK: NeuralNetworkStrategy(rng),
        StrategyName.ARBITRAGE: arbitrage,
        StrategyName.SCALPING: ScalpingStrategy(),
        StrategyName.SWING_TRADING: SwingTradingStrategy(),
        StrategyName.MULTI_TIMEFRAME: MultiTimeframeStrategy(),
    }
    missing = set(StrategyName) - set(registry)
    if missing:  # pragma: no cover
        raise RuntimeError(f"Strategies without an evaluator: {sorted(missing)}")
    return registry


def resolve_name(name: StrategyName | str) -> StrategyName:
    """Parse a strategy display name.

    Raises ``KeyError`` if the name is not a registered strategy.
    """
    if isinstance(name, StrategyName):
        return name
    try:
        return StrategyName(name)
    except ValueError:
        raise KeyError(
            f"Unknown strategy '{name}'. "
            f"Available: {', '.join(s.value for s in StrategyName)}"
        ) from None
