"""Analytics data models — derived snapshots, computed on demand."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BotStats:
    """Performance summary of the paper ledger."""

    total_trades: int = 0
    win_rate: float = 0.0  # percent
    total_profit: float = 0.0
    daily_return: float = 0.0  # percent
    max_drawdown: float = 0.0  # percent
    sharpe_ratio: float = 0.0
    profit_factor: float = 0.0
    avg_win_loss_ratio: float = 0.0
    volatility: float = 0.0  # percent
    current_streak: int = 0
    max_consecutive_wins: int = 0
    avg_trade_time: str = "0m"
    roi: float = 0.0  # percent
    calmar_ratio: float = 0.0
    sortino_ratio: float = 0.0


@dataclass(frozen=True)
class RiskMetrics:
    """Tail-risk figures from the P&L history plus market-relative ratios."""

    var95: float = 0.0
    expected_shortfall: float = 0.0
    beta: float = 0.0
    correlation: float = 0.0
    information_ratio: float = 0.0
    treynor_ratio: float = 0.0
    jensen_alpha: float = 0.0


@dataclass(frozen=True)
class PerformanceEstimate:
    """Drawdown and return ratios produced by a metrics estimator."""

    max_drawdown: float
    sharpe_ratio: float
    sortino_ratio: float


@dataclass(frozen=True)
class MarketRatios:
    """Benchmark-relative ratios produced by a metrics estimator."""

    beta: float = 0.0
    correlation: float = 0.0
    information_ratio: float = 0.0
    treynor_ratio: float = 0.0
    jensen_alpha: float = 0.0
