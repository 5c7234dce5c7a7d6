"""KrakenSim — application configuration.

Loads .env variables into typed config objects.  Paper mode needs no
credentials; live mode validates the Kraken key pair on startup.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from krakensim.models.trading_config import TradingConfig


_LIVE_REQUIRED_VARS = [
    "KRAKEN_API_KEY",
    "KRAKEN_API_SECRET",
]

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    trading_mode: str  # "paper" or "live"
    kraken_api_key: str
    kraken_api_secret: str
    trade_pair: str
    strategy: str
    price_refresh_seconds: float
    activity_refresh_seconds: float
    auto_trading: bool
    log_level: str
    health_port: int

    @property
    def is_paper(self) -> bool:
        return self.trading_mode != "live"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` naming the missing variable(s) when live mode is
    requested without Kraken credentials, or when the mode is unknown.
    """
    load_dotenv(dotenv_path=env_path)

    mode = os.environ.get("TRADING_MODE", "paper").strip().lower()
    if mode not in ("paper", "live"):
        raise ValueError(f"TRADING_MODE must be 'paper' or 'live', got '{mode}'")

    if mode == "live":
        missing = [v for v in _LIVE_REQUIRED_VARS if not os.environ.get(v)]
        if missing:
            raise ValueError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )

    return Config(
        trading_mode=mode,
        kraken_api_key=os.environ.get("KRAKEN_API_KEY", ""),
        kraken_api_secret=os.environ.get("KRAKEN_API_SECRET", ""),
        trade_pair=os.environ.get("TRADE_PAIR", "BTC/GBP"),
        strategy=os.environ.get("STRATEGY", "AI Ensemble"),
        price_refresh_seconds=float(os.environ.get("PRICE_REFRESH_SECONDS", "5")),
        activity_refresh_seconds=float(os.environ.get("ACTIVITY_REFRESH_SECONDS", "10")),
        auto_trading=_env_bool("AUTO_TRADING", False),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        health_port=int(os.environ.get("HEALTH_PORT", "8080")),
    )


def load_trading_config(env_path: str | None = None) -> TradingConfig:
    """Build a ``TradingConfig`` from optional environment overrides.

    Unset variables keep the ``TradingConfig`` defaults.
    """
    load_dotenv(dotenv_path=env_path)
    defaults = TradingConfig()
    env = os.environ

    return TradingConfig(
        max_allocation=float(env.get("MAX_ALLOCATION", defaults.max_allocation)),
        base_position_size=float(env.get("BASE_POSITION_SIZE", defaults.base_position_size)),
        confidence_threshold=int(env.get("CONFIDENCE_THRESHOLD", defaults.confidence_threshold)),
        max_daily_trades=int(env.get("MAX_DAILY_TRADES", defaults.max_daily_trades)),
        max_daily_loss=float(env.get("MAX_DAILY_LOSS", defaults.max_daily_loss)),
        max_daily_gain=float(env.get("MAX_DAILY_GAIN", defaults.max_daily_gain)),
        stop_loss=float(env.get("STOP_LOSS", defaults.stop_loss)),
        profit_target=float(env.get("PROFIT_TARGET", defaults.profit_target)),
        trailing_stop=_env_bool("TRAILING_STOP", defaults.trailing_stop),
        risk_level=env.get("RISK_LEVEL", defaults.risk_level).strip().upper(),
        use_kelly_formula=_env_bool("USE_KELLY_FORMULA", defaults.use_kelly_formula),
        max_correlated_trades=int(
            env.get("MAX_CORRELATED_TRADES", defaults.max_correlated_trades)
        ),
        volatility_filter=_env_bool("VOLATILITY_FILTER", defaults.volatility_filter),
        use_time_filter=_env_bool("USE_TIME_FILTER", defaults.use_time_filter),
        multi_timeframe=_env_bool("MULTI_TIMEFRAME", defaults.multi_timeframe),
    )
