"""Session tables — pure functions over an injected UTC time.

All hour-of-day behaviour (volatility multiplier, trading session label,
low-liquidity window) lives here as explicit range → value tables so the
boundaries can be tested without touching the wall clock.
"""

from dataclasses import dataclass
from datetime import datetime


# (start_hour, end_hour) inclusive on both ends → value
VOLATILITY_BANDS: list[tuple[int, int, float]] = [
    (8, 10, 1.8),   # European open
    (14, 16, 1.8),  # US open
    (20, 22, 1.4),  # Asian band
]
DEFAULT_VOLATILITY_MULTIPLIER = 0.9

SESSION_BANDS: list[tuple[int, int, str]] = [
    (5, 11, "EUROPEAN_ACTIVE"),
    (13, 18, "US_PEAK_OVERLAP"),
    (20, 23, "ASIAN_PRIME"),
    (0, 4, "ASIAN_EXTENDED"),
]
CLOSED_SESSION = "MINIMAL_LIQUIDITY"

SESSION_HINTS: dict[str, str] = {
    "EUROPEAN_ACTIVE": "High volume trending markets with breakout potential",
    "US_PEAK_OVERLAP": "Maximum volatility with premium arbitrage opportunities",
    "ASIAN_PRIME": "Momentum continuation with scalping setups",
    "ASIAN_EXTENDED": "Range-bound trading with mean reversion focus",
    CLOSED_SESSION: "Reduced activity - conservative positioning recommended",
}

# Thin books widen cross-exchange spreads.
LOW_LIQUIDITY_HOURS = (2, 6)


@dataclass(frozen=True)
class SessionInfo:
    """Advisor output for one point in time."""

    is_open: bool
    session: str
    hint: str


def _lookup(hour: int, bands, default):
    for start, end, value in bands:
        if start <= hour <= end:
            return value
    return default


def volatility_multiplier(utc_hour: int) -> float:
    """Return the noise multiplier for *utc_hour* (0–23)."""
    return _lookup(utc_hour, VOLATILITY_BANDS, DEFAULT_VOLATILITY_MULTIPLIER)


def market_session(utc_hour: int) -> str:
    """Return the session label for *utc_hour*."""
    return _lookup(utc_hour, SESSION_BANDS, CLOSED_SESSION)


def is_low_liquidity(utc_hour: int) -> bool:
    start, end = LOW_LIQUIDITY_HOURS
    return start <= utc_hour <= end


def session_info(now: datetime) -> SessionInfo:
    """Map a UTC timestamp to market-open flag, session label and hint.

    Weekends are closed regardless of hour.  Weekdays are open in every
    labelled session; the unlabelled gaps (12:00 and 19:00 UTC) are closed.
    """
    session = market_session(now.hour)
    weekend = now.weekday() >= 5
    is_open = not weekend and session != CLOSED_SESSION
    return SessionInfo(
        is_open=is_open,
        session=session,
        hint=SESSION_HINTS[session],
    )
