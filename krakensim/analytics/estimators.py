"""Metrics estimators — pluggable source of drawdown and ratio figures.

The paper bot has historically reported drawdown, Sharpe/Sortino and the
benchmark ratios as bounded random draws rather than values derived from
the P&L series.  ``RandomizedMetricsEstimator`` keeps that behaviour and is
the default; ``SeriesMetricsEstimator`` computes what it can from the P&L
history.  Analytics call sites only see ``MetricsEstimator``.
"""

import math
import random
from typing import Optional, Protocol, Sequence, runtime_checkable

from krakensim.analytics.models import MarketRatios, PerformanceEstimate

SORTINO_TO_SHARPE = 1.25


@runtime_checkable
class MetricsEstimator(Protocol):
    """Interface for drawdown / ratio estimation."""

    def performance(
        self, pnl_history: Sequence[float], initial_equity: float,
    ) -> PerformanceEstimate:
        ...

    def market_ratios(self, pnl_history: Sequence[float]) -> MarketRatios:
        ...


class RandomizedMetricsEstimator:
    """Placeholder figures drawn uniformly from fixed bands.

    Bands: drawdown 4–15 %, Sharpe 1.8–3.8 (Sortino = 1.25 × Sharpe),
    beta 0.75–1.45, correlation 0.25–0.85, information ratio 0.45–2.2,
    Treynor 0.12–0.28, Jensen alpha −0.02–0.08.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def performance(
        self, pnl_history: Sequence[float], initial_equity: float,
    ) -> PerformanceEstimate:
        sharpe = self._rng.uniform(1.8, 3.8)
        return PerformanceEstimate(
            max_drawdown=self._rng.uniform(4.0, 15.0),
            sharpe_ratio=sharpe,
            sortino_ratio=sharpe * SORTINO_TO_SHARPE,
        )

    def market_ratios(self, pnl_history: Sequence[float]) -> MarketRatios:
        return MarketRatios(
            beta=self._rng.uniform(0.75, 1.45),
            correlation=self._rng.uniform(0.25, 0.85),
            information_ratio=self._rng.uniform(0.45, 2.2),
            treynor_ratio=self._rng.uniform(0.12, 0.28),
            jensen_alpha=self._rng.uniform(-0.02, 0.08),
        )


class SeriesMetricsEstimator:
    """Derives drawdown, Sharpe and Sortino from the P&L history.

    Paper mode has no benchmark series, so the market ratios are zero.
    """

    def __init__(self, periods_per_year: int = 252) -> None:
        self._periods = periods_per_year

    def performance(
        self, pnl_history: Sequence[float], initial_equity: float,
    ) -> PerformanceEstimate:
        drawdown = max_drawdown(pnl_history)
        drawdown_pct = drawdown / initial_equity * 100.0 if initial_equity > 0 else 0.0
        return PerformanceEstimate(
            max_drawdown=drawdown_pct,
            sharpe_ratio=sharpe_ratio(pnl_history, self._periods),
            sortino_ratio=sortino_ratio(pnl_history, self._periods),
        )

    def market_ratios(self, pnl_history: Sequence[float]) -> MarketRatios:
        return MarketRatios()


# ── Helpers ──────────────────────────────────────────────────────────────


def sharpe_ratio(pnls: Sequence[float], periods_per_year: int = 252) -> float:
    """Annualised Sharpe ratio from a P&L series.

    Uses sample standard deviation (n − 1).  Returns 0.0 when the series
    has fewer than 2 observations or zero variance.
    """
    n = len(pnls)
    if n < 2:
        return 0.0
    avg = sum(pnls) / n
    variance = sum((p - avg) ** 2 for p in pnls) / (n - 1)
    std = math.sqrt(variance)
    if std == 0:
        return 0.0
    return (avg / std) * math.sqrt(periods_per_year)


def sortino_ratio(pnls: Sequence[float], periods_per_year: int = 252) -> float:
    """Like ``sharpe_ratio`` but penalising only downside deviation."""
    n = len(pnls)
    if n < 2:
        return 0.0
    avg = sum(pnls) / n
    downside = sum(min(p, 0.0) ** 2 for p in pnls) / n
    dd = math.sqrt(downside)
    if dd == 0:
        return 0.0
    return (avg / dd) * math.sqrt(periods_per_year)


def max_drawdown(pnls: Sequence[float]) -> float:
    """Maximum drawdown from the cumulative P&L curve.

    Returns the largest peak-to-trough decline as a positive number.
    """
    cumulative = 0.0
    peak = 0.0
    max_dd = 0.0
    for p in pnls:
        cumulative += p
        if cumulative > peak:
            peak = cumulative
        dd = peak - cumulative
        if dd > max_dd:
            max_dd = dd
    return max_dd
