"""Synthetic market generator — price ticks and OHLC series for paper mode.

Prices are drawn around a fixed base per pair with bounded uniform noise
scaled by the hour-of-day volatility table.  Every tick on a supported pair
is appended to that pair's rolling window, which feeds the regime classifier
and strategies.
"""

import asyncio
import logging
import random
from collections import deque
from datetime import datetime, timezone
from typing import Callable, Optional

from krakensim.broker.models import REFERENCE_PRICES, SUPPORTED_PAIRS
from krakensim.market.sessions import volatility_multiplier

logger = logging.getLogger("krakensim.market")

PRICE_WINDOW_SIZE = 250
PRICE_NOISE = 0.035
OHLC_NOISE = 0.12
OHLC_BARS = 121
OHLC_SPACING_SECONDS = 600
UNKNOWN_PAIR_BASE_PRICE = 1000.0

# Simulated network latency, seconds
PRICE_LATENCY = 0.1
OHLC_LATENCY = 0.2


def base_price(pair: str) -> float:
    """Return the anchor price for *pair* (1000 for unknown pairs)."""
    legs = SUPPORTED_PAIRS.get(pair)
    if legs is None:
        return UNKNOWN_PAIR_BASE_PRICE
    return REFERENCE_PRICES[legs[0]]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MarketGenerator:
    """Produces synthetic prices and keeps a bounded window per pair.

    Args:
        rng: Random source; pass a seeded ``random.Random`` for repeatable runs.
        clock: Returns the current UTC time (drives the volatility table).
        price_latency: Seconds to suspend before returning a price.
        ohlc_latency: Seconds to suspend before returning an OHLC series.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utc_now,
        price_latency: float = PRICE_LATENCY,
        ohlc_latency: float = OHLC_LATENCY,
    ) -> None:
        self._rng = rng or random.Random()
        self._clock = clock
        self._price_latency = price_latency
        self._ohlc_latency = ohlc_latency
        self._windows: dict[str, deque[float]] = {}

    # ── Prices ───────────────────────────────────────────────────────────

    def sample_price(self, pair: str) -> float:
        """Draw one price (no latency).

        Supported pairs append the price to their window. Other pairs are
        quoted around the fallback base price but never tracked.
        """
        multiplier = volatility_multiplier(self._clock().hour)
        noise = self._rng.uniform(-PRICE_NOISE, PRICE_NOISE) * multiplier
        price = base_price(pair) * (1 + noise)
        if pair in SUPPORTED_PAIRS:
            self.record(pair, price)
        return price

    async def next_price(self, pair: str) -> float:
        """Return a fresh synthetic price for *pair* after simulated latency."""
        await asyncio.sleep(self._price_latency)
        return self.sample_price(pair)

    async def get_ohlc(self, pair: str) -> list[tuple[int, float]]:
        """Return 121 ``(unix_seconds, price)`` points, 600 s apart, ending now.

        Each point is the current price jittered by up to ±12 %.  The series
        is synthetic and does not touch the rolling window.
        """
        await asyncio.sleep(self._ohlc_latency)
        multiplier = volatility_multiplier(self._clock().hour)
        current = base_price(pair) * (
            1 + self._rng.uniform(-PRICE_NOISE, PRICE_NOISE) * multiplier
        )
        now = int(self._clock().timestamp())
        last = OHLC_BARS - 1
        return [
            (
                now - (last - i) * OHLC_SPACING_SECONDS,
                current * (1 + self._rng.uniform(-OHLC_NOISE, OHLC_NOISE)),
            )
            for i in range(OHLC_BARS)
        ]

    # ── Window ───────────────────────────────────────────────────────────

    def record(self, pair: str, price: float) -> None:
        """Append *price* to the pair's window, evicting the oldest on overflow."""
        window = self._windows.get(pair)
        if window is None:
            window = deque(maxlen=PRICE_WINDOW_SIZE)
            self._windows[pair] = window
        window.append(price)

    def price_history(self, pair: str) -> tuple[float, ...]:
        """Immutable snapshot of the pair's window, oldest first."""
        return tuple(self._windows.get(pair, ()))

    def warm_up(self, pair: str, samples: int = 100) -> None:
        """Fill the window with *samples* synthetic ticks.

        Strategies need 12–100 samples before they stop returning HOLD; this
        seeds a fresh generator so the first cycles are meaningful.
        """
        for _ in range(samples):
            self.sample_price(pair)
        logger.debug("Warmed up %s window with %d samples", pair, samples)

