"""Risk classification and expected-return estimate for a signal.

The risk level is the sum of three independent integer scores (volatility
bucket, regime bucket, configured appetite) mapped through fixed
thresholds.
"""

import random

from krakensim.strategy.models import Action, MarketRegime, RegimeType, RiskLevel

# (exclusive lower bound, score), checked top-down
VOLATILITY_RISK_BUCKETS: list[tuple[float, int]] = [
    (0.10, 4),
    (0.07, 3),
    (0.04, 2),
    (0.02, 1),
]

REGIME_RISK: dict[RegimeType, int] = {
    RegimeType.HIGH_VOLATILITY: 4,
    RegimeType.BREAKOUT: 3,
    RegimeType.TRENDING_UP: 1,
    RegimeType.TRENDING_DOWN: 1,
    RegimeType.SIDEWAYS: 0,
}

APPETITE_RISK: dict[str, int] = {
    "AGGRESSIVE": 2,
    "HIGH": 3,
    "MEDIUM": 1,
    "LOW": 0,
}

# (inclusive lower bound on total score, level), checked top-down
RISK_THRESHOLDS: list[tuple[int, RiskLevel]] = [
    (8, RiskLevel.EXTREME),
    (6, RiskLevel.HIGH),
    (3, RiskLevel.MEDIUM),
]

EXPECTED_RETURN_FACTORS: dict[Action, float] = {
    Action.BUY: 3.2,
    Action.SELL: 2.8,
    Action.HOLD: 0.0,
}

REGIME_RETURN_MULTIPLIERS: dict[RegimeType, float] = {
    RegimeType.TRENDING_UP: 1.6,
    RegimeType.TRENDING_DOWN: 1.6,
    RegimeType.BREAKOUT: 2.1,
    RegimeType.HIGH_VOLATILITY: 1.4,
    RegimeType.SIDEWAYS: 0.9,
}

RETURN_DAMPING = (0.6, 1.4)


def volatility_risk(volatility: float) -> int:
    for bound, score in VOLATILITY_RISK_BUCKETS:
        if volatility > bound:
            return score
    return 0


def risk_score(volatility: float, regime: MarketRegime, risk_appetite: str) -> int:
    """Total of the volatility (0–4), regime (0–4) and appetite (0–3) scores."""
    return (
        volatility_risk(volatility)
        + REGIME_RISK.get(regime.type, 2)
        + APPETITE_RISK.get(risk_appetite, 1)
    )


def determine_risk_level(
    volatility: float,
    regime: MarketRegime,
    risk_appetite: str,
) -> RiskLevel:
    """Map the combined score to LOW / MEDIUM / HIGH / EXTREME."""
    total = risk_score(volatility, regime, risk_appetite)
    for bound, level in RISK_THRESHOLDS:
        if total >= bound:
            return level
    return RiskLevel.LOW


def expected_return(
    action: Action,
    volatility: float,
    regime: MarketRegime,
    rng: random.Random,
) -> float:
    """Rough return estimate: vol × action factor × regime strength × regime
    multiplier, jittered by a random damping factor in [0.6, 1.4]."""
    base = volatility * EXPECTED_RETURN_FACTORS[action] * regime.strength
    multiplier = REGIME_RETURN_MULTIPLIERS.get(regime.type, 1.0)
    return base * multiplier * rng.uniform(*RETURN_DAMPING)
