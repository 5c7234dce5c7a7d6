"""Performance and risk analytics — pure functions over a ledger snapshot."""

from datetime import datetime
from typing import Sequence

from krakensim.analytics.estimators import MetricsEstimator
from krakensim.analytics.models import BotStats, RiskMetrics
from krakensim.broker.models import REFERENCE_PRICES, LedgerSnapshot

MIN_RISK_SAMPLES = 15
MIN_PERCENTILE_SAMPLES = 25
TAIL_FRACTION = 0.05
# Reported when there are wins but no losses to divide by.
NO_LOSS_PROFIT_FACTOR = 6.2


def equity(balances: dict[str, float]) -> float:
    """Value balances in GBP at the reference prices."""
    return sum(qty * REFERENCE_PRICES.get(asset, 0.0) for asset, qty in balances.items())


def value_at_risk(pnl_history: Sequence[float]) -> tuple[float, float]:
    """Return ``(VaR95, expected_shortfall)`` of a P&L sample.

    VaR95 is the 5th-percentile observation of the sorted sample (its
    minimum below 25 samples); expected shortfall is the mean of the worst
    5 % (at least one observation).
    """
    ordered = sorted(pnl_history)
    n = len(ordered)
    if n == 0:
        return 0.0, 0.0
    if n >= MIN_PERCENTILE_SAMPLES:
        var95 = ordered[int(n * TAIL_FRACTION)]
    else:
        var95 = ordered[0]
    tail = ordered[: max(int(n * TAIL_FRACTION), 1)]
    return var95, sum(tail) / len(tail)


def risk_metrics(snapshot: LedgerSnapshot, estimator: MetricsEstimator) -> RiskMetrics:
    """Tail-risk metrics; all zero until 15 trades have been recorded."""
    if len(snapshot.pnl_history) < MIN_RISK_SAMPLES:
        return RiskMetrics()

    var95, shortfall = value_at_risk(snapshot.pnl_history)
    ratios = estimator.market_ratios(snapshot.pnl_history)
    return RiskMetrics(
        var95=var95,
        expected_shortfall=shortfall,
        beta=ratios.beta,
        correlation=ratios.correlation,
        information_ratio=ratios.information_ratio,
        treynor_ratio=ratios.treynor_ratio,
        jensen_alpha=ratios.jensen_alpha,
    )


def average_trade_interval(timestamps: Sequence[datetime]) -> str:
    """Mean gap between consecutive orders, formatted as whole minutes."""
    if len(timestamps) < 2:
        return "0m"
    gaps = [
        (timestamps[i] - timestamps[i - 1]).total_seconds()
        for i in range(1, len(timestamps))
    ]
    minutes = int(sum(gaps) / len(gaps) / 60)
    return f"{minutes}m"


def bot_stats(snapshot: LedgerSnapshot, estimator: MetricsEstimator) -> BotStats:
    """Aggregate the ledger into a ``BotStats`` snapshot.

    Profit and return are measured against the starting balances valued at
    the reference prices, not against the starting GBP cash alone, so a
    fresh ledger reports zero profit.
    """
    initial = snapshot.initial_equity
    total_profit = equity(snapshot.balances) - initial
    return_pct = total_profit / initial * 100.0 if initial > 0 else 0.0

    wins, losses = snapshot.total_wins, snapshot.total_losses
    if losses > 0:
        profit_factor = wins / losses
    elif wins > 0:
        profit_factor = NO_LOSS_PROFIT_FACTOR
    else:
        profit_factor = 0.0

    losing_trades = max(snapshot.total_trades - snapshot.winning_trades, 1)
    if losses > 0 and snapshot.winning_trades > 0:
        avg_win_loss = (wins / snapshot.winning_trades) / (losses / losing_trades)
    else:
        avg_win_loss = 0.0

    win_rate = (
        snapshot.winning_trades / snapshot.total_trades * 100.0
        if snapshot.total_trades > 0 else 0.0
    )

    perf = estimator.performance(snapshot.pnl_history, initial)
    calmar = return_pct / perf.max_drawdown if perf.max_drawdown > 0 else 0.0

    return BotStats(
        total_trades=snapshot.total_trades,
        win_rate=win_rate,
        total_profit=total_profit,
        daily_return=return_pct,
        max_drawdown=perf.max_drawdown,
        sharpe_ratio=perf.sharpe_ratio,
        profit_factor=profit_factor,
        avg_win_loss_ratio=avg_win_loss,
        volatility=snapshot.volatility * 100.0,
        current_streak=snapshot.current_streak,
        max_consecutive_wins=snapshot.max_win_streak,
        avg_trade_time=average_trade_interval(snapshot.trade_timestamps),
        roi=return_pct,
        calmar_ratio=calmar,
        sortino_ratio=perf.sortino_ratio,
    )
