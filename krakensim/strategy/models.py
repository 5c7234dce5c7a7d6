"""Strategy data models — regimes, signals and the strategy catalogue."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Action(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class RegimeType(str, Enum):
    TRENDING_UP = "TRENDING_UP"
    TRENDING_DOWN = "TRENDING_DOWN"
    SIDEWAYS = "SIDEWAYS"
    HIGH_VOLATILITY = "HIGH_VOLATILITY"
    BREAKOUT = "BREAKOUT"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    EXTREME = "EXTREME"


class StrategyName(str, Enum):
    """Closed set of strategies the signal engine can evaluate."""

    MEAN_REVERSION = "Mean Reversion"
    MOMENTUM = "Momentum"
    ENSEMBLE = "AI Ensemble"
    NEURAL_NETWORK = "Neural Network"
    ARBITRAGE = "Arbitrage"
    SCALPING = "Scalping"
    SWING_TRADING = "Swing Trading"
    MULTI_TIMEFRAME = "Multi-Timeframe"


@dataclass(frozen=True)
class MarketRegime:
    """Coarse classification of recent market behaviour."""

    type: RegimeType
    confidence: float  # 0..1
    volatility: float
    momentum: float
    strength: float = 0.0
    duration: int = 0  # sessions
    trend_quality: str = "UNKNOWN"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TradingSignal:
    """Output of a strategy evaluation.

    Base evaluators fill only action, confidence, strategy, reasoning and
    technical_score; the signal engine fills the risk/return fields.
    """

    action: Action
    confidence: int  # 0..100
    strategy: StrategyName
    reasoning: str
    expected_return: float = 0.0
    risk_level: RiskLevel = RiskLevel.MEDIUM
    stop_loss: float = 0.0
    take_profit: float = 0.0
    market_regime: str = "UNKNOWN"
    technical_score: float = 0.0
    timestamp: datetime = field(default_factory=_now_utc)
