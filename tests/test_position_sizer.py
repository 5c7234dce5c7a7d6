"""Tests for Kelly-based position sizing."""

import pytest

from krakensim.models.trading_config import TradingConfig
from krakensim.risk.position_sizer import calculate_position_size, kelly_fraction


class TestKellyFraction:
    def test_known_value(self):
        # (0.85 × 0.08 − 0.15 × 0.035) / 0.08
        assert kelly_fraction(85) == pytest.approx(0.784375)

    def test_certain_win(self):
        assert kelly_fraction(100) == pytest.approx(1.0)

    def test_negative_edge(self):
        assert kelly_fraction(30) < 0


class TestCalculatePositionSize:
    def test_capped_at_max_fraction(self):
        amount = calculate_position_size(0.08, 0.0, 100, 3500.0, TradingConfig(), 12_000.0)
        assert amount == pytest.approx(3500.0 * 0.35)

    def test_negative_kelly_uses_min_fraction(self):
        amount = calculate_position_size(0.08, 0.0, 30, 3500.0, TradingConfig(), 12_000.0)
        assert amount == pytest.approx(3500.0 * 0.008)

    def test_floor_of_fifteen(self):
        amount = calculate_position_size(0.08, 0.0, 30, 100.0, TradingConfig(), 12_000.0)
        assert amount == 15.0

    def test_base_size_when_kelly_disabled(self):
        config = TradingConfig(use_kelly_formula=False, risk_level="MEDIUM")
        amount = calculate_position_size(0.08, 0.0, 100, 3500.0, config, 12_000.0)
        assert amount == pytest.approx(280.0)

    def test_small_balance_scales_down(self):
        config = TradingConfig(risk_level="LOW")
        # sqrt(0 / 12000) clamps to 0.25 → 1.0 × 0.25 × 0.6 = 0.15
        amount = calculate_position_size(0.08, 0.0, 100, 3500.0, config, 0.0)
        assert amount == pytest.approx(525.0)

    def test_volatility_reduces_size(self):
        config = TradingConfig(risk_level="LOW")
        calm = calculate_position_size(0.08, 0.0, 90, 3500.0, config, 12_000.0)
        wild = calculate_position_size(0.08, 0.08, 90, 3500.0, config, 12_000.0)
        assert wild < calm

    def test_within_bounds_for_all_confidences(self):
        for confidence in range(0, 101, 5):
            amount = calculate_position_size(
                0.08, 0.03, confidence, 3500.0, TradingConfig(), 12_000.0,
            )
            assert 15.0 <= amount <= 3500.0 * 0.35

    def test_rejects_non_positive_allocation(self):
        with pytest.raises(ValueError, match="max_allocation"):
            calculate_position_size(0.08, 0.0, 90, 0.0, TradingConfig(), 12_000.0)

    def test_rejects_negative_balance(self):
        with pytest.raises(ValueError, match="balance"):
            calculate_position_size(0.08, 0.0, 90, 3500.0, TradingConfig(), -1.0)
