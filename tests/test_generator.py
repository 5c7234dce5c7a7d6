"""Tests for the synthetic market generator."""

import random
from datetime import datetime, timezone

import pytest

from krakensim.market.generator import (
    OHLC_BARS,
    OHLC_SPACING_SECONDS,
    PRICE_WINDOW_SIZE,
    MarketGenerator,
    base_price,
)

# 12:00 UTC → default 0.9 volatility multiplier
_NOON = datetime(2025, 1, 6, 12, 0, tzinfo=timezone.utc)


def _generator(seed: int = 42) -> MarketGenerator:
    return MarketGenerator(
        rng=random.Random(seed),
        clock=lambda: _NOON,
        price_latency=0,
        ohlc_latency=0,
    )


class TestBasePrice:
    def test_known_pairs(self):
        assert base_price("BTC/GBP") == 31_500.0
        assert base_price("ETH/GBP") == 2_100.0

    def test_unknown_pair_falls_back(self):
        assert base_price("DOGE/GBP") == 1_000.0


class TestPrices:
    def test_price_within_noise_band(self):
        gen = _generator()
        for _ in range(200):
            price = gen.sample_price("BTC/GBP")
            assert 31_500 * (1 - 0.035 * 0.9) <= price <= 31_500 * (1 + 0.035 * 0.9)

    def test_same_seed_same_prices(self):
        a = [_generator(7).sample_price("ETH/GBP") for _ in range(5)]
        b = [_generator(7).sample_price("ETH/GBP") for _ in range(5)]
        assert a == b

    @pytest.mark.asyncio
    async def test_next_price_records_in_window(self):
        gen = _generator()
        price = await gen.next_price("BTC/GBP")
        assert gen.price_history("BTC/GBP") == (price,)

    def test_windows_are_per_pair(self):
        gen = _generator()
        gen.sample_price("BTC/GBP")
        assert gen.price_history("ETH/GBP") == ()

    @pytest.mark.asyncio
    async def test_unknown_pairs_are_quoted_but_not_tracked(self):
        gen = _generator()
        for i in range(50):
            price = gen.sample_price(f"COIN{i}/GBP")
            assert 1_000 * (1 - 0.035 * 0.9) <= price <= 1_000 * (1 + 0.035 * 0.9)
        await gen.next_price("DOGE/GBP")
        assert gen.price_history("DOGE/GBP") == ()
        assert gen._windows == {}


class TestWindow:
    def test_window_is_capped_fifo(self):
        gen = _generator()
        prices = [gen.sample_price("BTC/GBP") for _ in range(PRICE_WINDOW_SIZE + 50)]
        history = gen.price_history("BTC/GBP")
        assert len(history) == PRICE_WINDOW_SIZE
        assert history[0] == prices[50]
        assert history[-1] == prices[-1]

    def test_history_is_immutable_snapshot(self):
        gen = _generator()
        gen.sample_price("BTC/GBP")
        snapshot = gen.price_history("BTC/GBP")
        gen.sample_price("BTC/GBP")
        assert len(snapshot) == 1

    def test_warm_up(self):
        gen = _generator()
        gen.warm_up("ETH/GBP", samples=60)
        assert len(gen.price_history("ETH/GBP")) == 60


class TestOhlc:
    @pytest.mark.asyncio
    async def test_series_shape(self):
        gen = _generator()
        points = await gen.get_ohlc("BTC/GBP")
        assert len(points) == OHLC_BARS == 121
        times = [t for t, _ in points]
        assert times[-1] == int(_NOON.timestamp())
        assert all(b - a == OHLC_SPACING_SECONDS for a, b in zip(times, times[1:]))

    @pytest.mark.asyncio
    async def test_series_does_not_touch_window(self):
        gen = _generator()
        gen.sample_price("BTC/GBP")
        before = gen.price_history("BTC/GBP")
        await gen.get_ohlc("BTC/GBP")
        assert gen.price_history("BTC/GBP") == before

    @pytest.mark.asyncio
    async def test_prices_positive_and_bounded(self):
        gen = _generator()
        points = await gen.get_ohlc("ETH/GBP")
        upper = 2_100 * (1 + 0.035 * 0.9) * 1.12
        assert all(0 < p <= upper for _, p in points)
