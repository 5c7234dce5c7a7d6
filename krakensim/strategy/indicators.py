"""Technical indicators — RSI, EMA, MACD, Bollinger position, volatility.

Pure functions over a price sequence (oldest first), no I/O.  Unlike a
charting library these return the *latest* value only and fall back to a
neutral reading when the series is too short, so strategies never have to
guard against ``nan``.
"""

import math
from typing import Sequence


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def returns(prices: Sequence[float]) -> list[float]:
    """Simple returns between consecutive prices."""
    return [(prices[i] - prices[i - 1]) / prices[i - 1] for i in range(1, len(prices))]


# ── RSI ──────────────────────────────────────────────────────────────────


def calculate_rsi(prices: Sequence[float], period: int = 14) -> float:
    """Relative Strength Index over the last *period* price changes.

    Uses simple (not Wilder-smoothed) averages of gains and losses:

        RS  = avg_gain / avg_loss
        RSI = 100 - 100 / (1 + RS)

    Returns 50.0 when fewer than ``period + 1`` prices are available and
    100.0 when there were no losses in the window.
    """
    if len(prices) < period + 1:
        return 50.0

    changes = [prices[i] - prices[i - 1] for i in range(1, len(prices))][-period:]
    avg_gain = sum(max(c, 0.0) for c in changes) / period
    avg_loss = sum(abs(min(c, 0.0)) for c in changes) / period

    if avg_loss == 0:
        return 100.0
    return 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)


# ── EMA / MACD ───────────────────────────────────────────────────────────


def calculate_ema(prices: Sequence[float], period: int) -> float:
    """Exponential Moving Average of the last *period* prices.

    ``EMA = price × k + EMA_prev × (1 - k)`` with ``k = 2 / (period + 1)``,
    seeded with the first price of the window.  Returns 0.0 for an empty
    series.
    """
    if not prices:
        return 0.0
    k = 2.0 / (period + 1)
    window = list(prices)[-period:]
    ema = window[0]
    for price in window[1:]:
        ema = price * k + ema * (1 - k)
    return ema


def calculate_macd(prices: Sequence[float]) -> float:
    """MACD line: EMA(12) − EMA(26).  0.0 below 26 prices."""
    if len(prices) < 26:
        return 0.0
    return calculate_ema(prices, 12) - calculate_ema(prices, 26)


# ── Bollinger Bands ──────────────────────────────────────────────────────


def calculate_bollinger_position(
    current: float,
    prices: Sequence[float],
    period: int = 20,
    std_dev: float = 2.0,
) -> float:
    """Where *current* sits inside the Bollinger Bands, as 0–100.

    Middle = SMA(*period*), bands = middle ± *std_dev* × σ (population).
    0 is the lower band, 100 the upper; values outside are clamped.
    Returns 50.0 with fewer than *period* prices or a flat window.
    """
    if len(prices) < period:
        return 50.0

    window = list(prices)[-period:]
    sma = sum(window) / period
    sigma = math.sqrt(sum((x - sma) ** 2 for x in window) / period)

    upper = sma + std_dev * sigma
    lower = sma - std_dev * sigma
    if upper == lower:
        return 50.0

    position = (current - lower) / (upper - lower) * 100.0
    return min(max(position, 0.0), 100.0)


# ── Volatility ───────────────────────────────────────────────────────────


def calculate_volatility(
    prices: Sequence[float],
    min_samples: int = 30,
    default: float = 0.06,
) -> float:
    """Population standard deviation of consecutive returns.

    Returns *default* when fewer than *min_samples* prices are available.
    """
    if len(prices) < min_samples:
        return default
    rets = returns(prices)
    avg = mean(rets)
    variance = sum((r - avg) ** 2 for r in rets) / len(rets)
    return math.sqrt(variance)
