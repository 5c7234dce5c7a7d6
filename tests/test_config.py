"""Tests for krakensim.config — environment loading and validation."""

import pytest

from krakensim.config import load_config, load_trading_config
from krakensim.models.trading_config import TradingConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Ensure KrakenSim env vars are cleared between tests."""
    for var in [
        "TRADING_MODE",
        "KRAKEN_API_KEY",
        "KRAKEN_API_SECRET",
        "TRADE_PAIR",
        "STRATEGY",
        "PRICE_REFRESH_SECONDS",
        "ACTIVITY_REFRESH_SECONDS",
        "AUTO_TRADING",
        "LOG_LEVEL",
        "HEALTH_PORT",
        "MAX_ALLOCATION",
        "MAX_DAILY_TRADES",
        "RISK_LEVEL",
        "USE_KELLY_FORMULA",
    ]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def env_path(tmp_path):
    # Non-existent file so load_dotenv never reads a developer's real .env
    return str(tmp_path / "nonexistent.env")


class TestLoadConfig:
    def test_defaults(self, env_path):
        cfg = load_config(env_path=env_path)
        assert cfg.trading_mode == "paper"
        assert cfg.is_paper
        assert cfg.trade_pair == "BTC/GBP"
        assert cfg.strategy == "AI Ensemble"
        assert cfg.price_refresh_seconds == 5.0
        assert cfg.activity_refresh_seconds == 10.0
        assert cfg.auto_trading is False
        assert cfg.log_level == "INFO"
        assert cfg.health_port == 8080

    def test_paper_mode_needs_no_credentials(self, monkeypatch, env_path):
        monkeypatch.setenv("TRADING_MODE", "paper")
        cfg = load_config(env_path=env_path)
        assert cfg.kraken_api_key == ""

    def test_live_mode_requires_credentials(self, monkeypatch, env_path):
        monkeypatch.setenv("TRADING_MODE", "live")
        monkeypatch.setenv("KRAKEN_API_KEY", "key")
        with pytest.raises(ValueError, match="KRAKEN_API_SECRET"):
            load_config(env_path=env_path)

    def test_live_mode_with_credentials(self, monkeypatch, env_path):
        monkeypatch.setenv("TRADING_MODE", "LIVE")
        monkeypatch.setenv("KRAKEN_API_KEY", "key")
        monkeypatch.setenv("KRAKEN_API_SECRET", "secret")
        cfg = load_config(env_path=env_path)
        assert cfg.trading_mode == "live"
        assert not cfg.is_paper

    def test_unknown_mode_rejected(self, monkeypatch, env_path):
        monkeypatch.setenv("TRADING_MODE", "backtest")
        with pytest.raises(ValueError, match="TRADING_MODE"):
            load_config(env_path=env_path)

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("1", True), ("Yes", True), ("false", False), ("0", False),
    ])
    def test_auto_trading_flag(self, monkeypatch, env_path, raw, expected):
        monkeypatch.setenv("AUTO_TRADING", raw)
        assert load_config(env_path=env_path).auto_trading is expected

    def test_overrides(self, monkeypatch, env_path):
        monkeypatch.setenv("TRADE_PAIR", "ETH/GBP")
        monkeypatch.setenv("STRATEGY", "Momentum")
        monkeypatch.setenv("HEALTH_PORT", "9090")
        cfg = load_config(env_path=env_path)
        assert cfg.trade_pair == "ETH/GBP"
        assert cfg.strategy == "Momentum"
        assert cfg.health_port == 9090

    def test_dotenv_file_is_read(self, monkeypatch, tmp_path):
        # Register the vars so monkeypatch removes what load_dotenv writes
        for var in ("TRADE_PAIR", "AUTO_TRADING"):
            monkeypatch.setenv(var, "placeholder")
            monkeypatch.delenv(var)
        env_file = tmp_path / ".env"
        env_file.write_text("TRADE_PAIR=ETH/GBP\nAUTO_TRADING=true\n", encoding="utf-8")
        cfg = load_config(env_path=str(env_file))
        assert cfg.trade_pair == "ETH/GBP"
        assert cfg.auto_trading is True


class TestTradingConfig:
    def test_defaults(self):
        cfg = TradingConfig()
        assert cfg.max_allocation == 3500.0
        assert cfg.confidence_threshold == 85
        assert cfg.max_daily_trades == 8
        assert cfg.risk_level == "AGGRESSIVE"
        assert cfg.use_kelly_formula is True

    def test_invalid_risk_level(self):
        with pytest.raises(ValueError, match="risk_level"):
            TradingConfig(risk_level="YOLO")

    def test_non_positive_allocation(self):
        with pytest.raises(ValueError, match="max_allocation"):
            TradingConfig(max_allocation=0)

    def test_env_overrides(self, monkeypatch, env_path):
        monkeypatch.setenv("MAX_ALLOCATION", "1000")
        monkeypatch.setenv("MAX_DAILY_TRADES", "3")
        monkeypatch.setenv("RISK_LEVEL", "low")
        monkeypatch.setenv("USE_KELLY_FORMULA", "false")
        cfg = load_trading_config(env_path=env_path)
        assert cfg.max_allocation == 1000.0
        assert cfg.max_daily_trades == 3
        assert cfg.risk_level == "LOW"
        assert cfg.use_kelly_formula is False
        assert cfg.confidence_threshold == 85

    def test_env_invalid_risk_level(self, monkeypatch, env_path):
        monkeypatch.setenv("RISK_LEVEL", "reckless")
        with pytest.raises(ValueError):
            load_trading_config(env_path=env_path)
