"""Stop-loss and take-profit calculation — pure math, no I/O.

Both distances start from the configured fraction, widen with volatility
and are clamped to a fixed band before being applied on the correct side
of the current price.
"""

from krakensim.strategy.models import Action

STOP_LOSS_VOL_FACTOR = 2.5
STOP_LOSS_BOUNDS = (0.015, 0.12)

TAKE_PROFIT_VOL_FACTOR = 2.0
TAKE_PROFIT_BOUNDS = (0.025, 0.20)


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return min(max(value, low), high)


def stop_loss_fraction(base: float, volatility: float) -> float:
    """Stop distance as a fraction of price, within [1.5 %, 12 %]."""
    return _clamp(base + volatility * STOP_LOSS_VOL_FACTOR, STOP_LOSS_BOUNDS)


def take_profit_fraction(base: float, volatility: float) -> float:
    """Target distance as a fraction of price, within [2.5 %, 20 %]."""
    return _clamp(base + volatility * TAKE_PROFIT_VOL_FACTOR, TAKE_PROFIT_BOUNDS)


def calculate_stop_loss(
    current_price: float,
    action: Action,
    volatility: float,
    base_fraction: float,
) -> float:
    """Return the stop price: below entry for BUY, above for SELL.

    HOLD has no position to protect and returns *current_price*.
    """
    distance = stop_loss_fraction(base_fraction, volatility)
    if action == Action.BUY:
        return current_price * (1 - distance)
    if action == Action.SELL:
        return current_price * (1 + distance)
    return current_price


def calculate_take_profit(
    current_price: float,
    action: Action,
    volatility: float,
    base_fraction: float,
) -> float:
    """Return the target price: above entry for BUY, below for SELL."""
    distance = take_profit_fraction(base_fraction, volatility)
    if action == Action.BUY:
        return current_price * (1 + distance)
    if action == Action.SELL:
        return current_price * (1 - distance)
    return current_price
