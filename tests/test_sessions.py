"""Tests for the hour-of-day session tables."""

from datetime import datetime, timezone

import pytest

from krakensim.market.sessions import (
    CLOSED_SESSION,
    is_low_liquidity,
    market_session,
    session_info,
    volatility_multiplier,
)


def _utc(year, month, day, hour):
    return datetime(year, month, day, hour, 0, tzinfo=timezone.utc)


class TestVolatilityMultiplier:
    @pytest.mark.parametrize("hour,expected", [
        (7, 0.9), (8, 1.8), (10, 1.8), (11, 0.9),
        (13, 0.9), (14, 1.8), (16, 1.8), (17, 0.9),
        (19, 0.9), (20, 1.4), (22, 1.4), (23, 0.9), (0, 0.9),
    ])
    def test_band_boundaries(self, hour, expected):
        assert volatility_multiplier(hour) == expected


class TestMarketSession:
    @pytest.mark.parametrize("hour,expected", [
        (0, "ASIAN_EXTENDED"),
        (4, "ASIAN_EXTENDED"),
        (5, "EUROPEAN_ACTIVE"),
        (11, "EUROPEAN_ACTIVE"),
        (12, CLOSED_SESSION),
        (13, "US_PEAK_OVERLAP"),
        (18, "US_PEAK_OVERLAP"),
        (19, CLOSED_SESSION),
        (20, "ASIAN_PRIME"),
        (23, "ASIAN_PRIME"),
    ])
    def test_labels(self, hour, expected):
        assert market_session(hour) == expected

    @pytest.mark.parametrize("hour,expected", [
        (1, False), (2, True), (4, True), (6, True), (7, False),
    ])
    def test_low_liquidity_window(self, hour, expected):
        assert is_low_liquidity(hour) is expected


class TestSessionInfo:
    def test_weekday_session_is_open(self):
        # 2025-01-06 is a Monday
        info = session_info(_utc(2025, 1, 6, 9))
        assert info.is_open
        assert info.session == "EUROPEAN_ACTIVE"
        assert "breakout" in info.hint

    def test_weekday_gap_is_closed(self):
        info = session_info(_utc(2025, 1, 6, 12))
        assert not info.is_open
        assert info.session == CLOSED_SESSION
        assert "conservative" in info.hint

    def test_weekend_is_closed(self):
        # 2025-01-04 is a Saturday
        info = session_info(_utc(2025, 1, 4, 9))
        assert not info.is_open
        assert info.session == "EUROPEAN_ACTIVE"

    def test_sunday_is_closed(self):
        assert not session_info(_utc(2025, 1, 5, 15)).is_open
