"""Trading configuration dataclass.

Parameter bundle supplied by the caller (settings store, env or API).  The
core reads it and never mutates it.
"""

from dataclasses import dataclass


RISK_APPETITES = ("LOW", "MEDIUM", "HIGH", "AGGRESSIVE")


@dataclass(frozen=True)
class TradingConfig:
    """Risk and sizing parameters for the signal engine and trading loop."""

    max_allocation: float = 3500.0  # GBP cap per position
    base_position_size: float = 0.08  # fraction used when Kelly is off
    confidence_threshold: int = 85
    max_daily_trades: int = 8
    max_daily_loss: float = 0.04  # fraction of initial equity
    max_daily_gain: float = 0.12  # fraction of initial equity
    stop_loss: float = 0.03
    profit_target: float = 0.06
    trailing_stop: bool = True
    risk_level: str = "AGGRESSIVE"  # one of RISK_APPETITES
    use_kelly_formula: bool = True
    max_correlated_trades: int = 3
    volatility_filter: bool = True
    use_time_filter: bool = True
    multi_timeframe: bool = True

    def __post_init__(self) -> None:
        if self.risk_level not in RISK_APPETITES:
            raise ValueError(
                f"risk_level must be one of {', '.join(RISK_APPETITES)}, "
                f"got '{self.risk_level}'"
            )
        if self.max_allocation <= 0:
            raise ValueError(
                f"max_allocation must be positive, got {self.max_allocation}"
            )
