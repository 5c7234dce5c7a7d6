"""Market regime classification — trend/volatility state from the price window.

Derives momentum, volatility and a short/long trend ratio from recent prices
and maps them to one of five regimes.  The per-regime confidence, duration
and trend-quality values are design constants, not estimates.
"""

from typing import Sequence

from krakensim.strategy.indicators import calculate_volatility, mean
from krakensim.strategy.models import MarketRegime, RegimeType

MIN_REGIME_SAMPLES = 40

HIGH_VOLATILITY_THRESHOLD = 0.08
TREND_MOMENTUM_THRESHOLD = 0.04
TREND_RATIO_THRESHOLD = 0.025
BREAKOUT_MOMENTUM_THRESHOLD = 0.06


def default_regime() -> MarketRegime:
    """Regime returned while the window is still filling."""
    return MarketRegime(
        type=RegimeType.SIDEWAYS,
        confidence=0.5,
        volatility=0.06,
        momentum=0.0,
    )


def regime_inputs(prices: Sequence[float]) -> tuple[float, float, float]:
    """Return ``(momentum, volatility, trend)`` for a window of ≥ 40 prices.

    momentum   = (mean of last 15 − mean of the 15 before them in the
                  last 40) / the latter
    volatility = σ of consecutive returns over the whole window
    trend      = (mean of last 8 − mean of last 25) / mean of last 25
    """
    prices = list(prices)
    recent = mean(prices[-15:])
    older = mean(prices[-40:][:15])
    momentum = (recent - older) / older

    volatility = calculate_volatility(prices)

    short_ma = mean(prices[-8:])
    long_ma = mean(prices[-25:])
    trend = (short_ma - long_ma) / long_ma
    return momentum, volatility, trend


def classify_regime(prices: Sequence[float]) -> MarketRegime:
    """Classify the market from a price window (oldest first).

    First match wins:
        1. volatility > 8 %                          → HIGH_VOLATILITY
        2. momentum > 4 % and trend > 2.5 %           → TRENDING_UP
        3. momentum < −4 % and trend < −2.5 %         → TRENDING_DOWN
        4. |momentum| > 6 %                          → BREAKOUT
        5. otherwise                                 → SIDEWAYS
    """
    if len(prices) < MIN_REGIME_SAMPLES:
        return default_regime()

    momentum, volatility, trend = regime_inputs(prices)

    if volatility > HIGH_VOLATILITY_THRESHOLD:
        return MarketRegime(
            RegimeType.HIGH_VOLATILITY, 0.88, volatility, momentum,
            abs(momentum), 6, "VOLATILE",
        )
    if momentum > TREND_MOMENTUM_THRESHOLD and trend > TREND_RATIO_THRESHOLD:
        return MarketRegime(
            RegimeType.TRENDING_UP, 0.92, volatility, momentum,
            momentum, 12, "STRONG_BULL",
        )
    if momentum < -TREND_MOMENTUM_THRESHOLD and trend < -TREND_RATIO_THRESHOLD:
        return MarketRegime(
            RegimeType.TRENDING_DOWN, 0.92, volatility, momentum,
            abs(momentum), 12, "STRONG_BEAR",
        )
    if abs(momentum) > BREAKOUT_MOMENTUM_THRESHOLD:
        return MarketRegime(
            RegimeType.BREAKOUT, 0.78, volatility, momentum,
            abs(momentum), 4, "MOMENTUM",
        )
    return MarketRegime(
        RegimeType.SIDEWAYS, 0.72, volatility, momentum,
        abs(trend), 15, "RANGE_BOUND",
    )
