"""Position sizing — pure math, no I/O.

Converts a signal's confidence and the market volatility into a GBP
allocation using a Kelly-style fraction with several dampeners.
"""

import math

from krakensim.models.trading_config import TradingConfig

ASSUMED_AVG_WIN = 0.08
ASSUMED_AVG_LOSS = 0.035
CONFIDENCE_EXPONENT = 1.3
REFERENCE_BALANCE = 12_000.0
BALANCE_SCALE_BOUNDS = (0.25, 2.5)
FRACTION_BOUNDS = (0.008, 0.35)
MIN_POSITION = 15.0

RISK_MULTIPLIERS: dict[str, float] = {
    "AGGRESSIVE": 1.8,
    "HIGH": 1.4,
    "MEDIUM": 1.0,
    "LOW": 0.6,
}


def kelly_fraction(
    confidence: int,
    avg_win: float = ASSUMED_AVG_WIN,
    avg_loss: float = ASSUMED_AVG_LOSS,
) -> float:
    """Kelly fraction ``(p × W − (1 − p) × L) / W`` with ``p = confidence / 100``.

    May be negative when the edge is negative; the caller's clamp turns that
    into the minimum position.
    """
    p = confidence / 100.0
    return (p * avg_win - (1 - p) * avg_loss) / avg_win


def calculate_position_size(
    base_size: float,
    volatility: float,
    confidence: int,
    max_allocation: float,
    config: TradingConfig,
    balance: float,
) -> float:
    """Return the GBP amount to commit to a trade.

    Formula::

        fraction = kelly(confidence)  (or base_size when Kelly is off)
                 × 1 / (1 + 10 × volatility)
                 × (confidence / 100) ** 1.3
                 × clamp(sqrt(balance / 12000), 0.25, 2.5)
                 × risk multiplier (LOW 0.6 … AGGRESSIVE 1.8)
        amount   = max(max_allocation × clamp(fraction, 0.8 %, 35 %), 15)

    Args:
        base_size: Fallback fraction when ``config.use_kelly_formula`` is off.
        volatility: Current return volatility (e.g. 0.03).
        confidence: Signal confidence, 0–100.
        max_allocation: GBP cap for a single position.
        config: Trading configuration (Kelly toggle, risk appetite).
        balance: Available GBP balance.

    Raises:
        ValueError: If *max_allocation* is non-positive or *balance* negative.
    """
    if max_allocation <= 0:
        raise ValueError(f"max_allocation must be positive, got {max_allocation}")
    if balance < 0:
        raise ValueError(f"balance must be non-negative, got {balance}")

    fraction = kelly_fraction(confidence) if config.use_kelly_formula else base_size

    volatility_adj = 1.0 / (1.0 + volatility * 10)
    confidence_adj = (confidence / 100.0) ** CONFIDENCE_EXPONENT
    low, high = BALANCE_SCALE_BOUNDS
    balance_adj = min(max(math.sqrt(balance / REFERENCE_BALANCE), low), high)

    risk_adjusted = fraction * volatility_adj * confidence_adj * balance_adj
    sized = risk_adjusted * RISK_MULTIPLIERS.get(config.risk_level, 1.0)

    low, high = FRACTION_BOUNDS
    return max(max_allocation * min(max(sized, low), high), MIN_POSITION)
