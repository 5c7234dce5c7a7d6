"""Tests for the trading engine orchestration.

Verifies the cycle flow: price → regime → signal → gates → size → order.
Uses a fixed-price market and canned strategies so every gate can be hit
deterministically.
"""

import asyncio
import random
from datetime import datetime, timezone

import pytest

from krakensim.broker.paper_client import PaperExchange
from krakensim.engine import TradingEngine
from krakensim.models.trading_config import TradingConfig
from krakensim.strategy.base import make_signal
from krakensim.strategy.models import Action, StrategyName
from krakensim.strategy.signals import SignalEngine

# 2025-01-06 is a Monday; 09:00 UTC is inside EUROPEAN_ACTIVE
MONDAY_9AM = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)
SATURDAY_9AM = datetime(2025, 1, 4, 9, 0, tzinfo=timezone.utc)


# ── Helpers ──────────────────────────────────────────────────────────────


class StubMarket:
    """Market that always quotes the same price."""

    def __init__(self, price: float = 31_500.0, history=None) -> None:
        self.price = price
        self._history: list[float] = list(history or [])

    async def next_price(self, pair: str) -> float:
        self._history.append(self.price)
        return self.price

    async def get_ohlc(self, pair: str):
        return [(0, self.price)]

    def price_history(self, pair: str) -> tuple[float, ...]:
        return tuple(self._history)


class StubStrategy:
    """Strategy that returns a canned action/confidence."""

    def __init__(self, name: StrategyName, action: Action, confidence: int) -> None:
        self.name = name
        self.action = action
        self.confidence = confidence

    def evaluate(self, current, history, regime, volatility):
        return make_signal(self.action, self.confidence, self.name, "stub")


class FailingStrategy:
    name = StrategyName.MOMENTUM

    def evaluate(self, current, history, regime, volatility):
        raise RuntimeError("indicator blew up")


def _build(
    action: Action = Action.BUY,
    confidence: int = 99,
    confirm: Action = Action.HOLD,
    config: TradingConfig | None = None,
    balances: dict | None = None,
    profit_model=lambda n: n * 0.01,
    history=None,
    auto_trade: bool = True,
    strategy=None,
):
    exchange = PaperExchange(
        market=StubMarket(history=history),
        balances=balances,
        profit_model=profit_model,
        clock=lambda: MONDAY_9AM,
        order_latency=0,
    )
    signals = SignalEngine(
        rng=random.Random(1),
        strategies={
            StrategyName.MOMENTUM: strategy or StubStrategy(StrategyName.MOMENTUM, action, confidence),
            StrategyName.MULTI_TIMEFRAME: StubStrategy(StrategyName.MULTI_TIMEFRAME, confirm, 80),
        },
    )
    engine = TradingEngine(
        exchange,
        signals,
        config or TradingConfig(),
        pair="BTC/GBP",
        strategy="Momentum",
        auto_trade=auto_trade,
        clock=lambda: MONDAY_9AM,
    )
    return engine, exchange


# ── Single cycle ─────────────────────────────────────────────────────────


class TestRunOnce:
    @pytest.mark.asyncio
    async def test_places_order_end_to_end(self):
        engine, exchange = _build()
        result = await engine.run_once(now=MONDAY_9AM)

        assert result["action"] == "order_placed"
        assert result["side"] == "BUY"
        assert result["amount"] == pytest.approx(1225.0)
        assert result["quantity"] == pytest.approx(1225.0 / 31_500.0)
        assert result["stop_loss"] < result["price"] < result["take_profit"]
        assert result["confirmation"].startswith("✓ BUY")
        assert len(exchange.get_trade_history()) == 1

    @pytest.mark.asyncio
    async def test_signal_only_without_auto_trade(self):
        engine, exchange = _build(auto_trade=False)
        result = await engine.run_once(now=MONDAY_9AM)
        assert result["action"] == "signal_only"
        assert result["signal"] == "BUY"
        assert exchange.get_trade_history() == []
        assert engine.last_signal is not None

    @pytest.mark.asyncio
    async def test_skips_hold(self):
        engine, _ = _build(action=Action.HOLD)
        result = await engine.run_once(now=MONDAY_9AM)
        assert result["action"] == "skipped"
        assert result["reason"] == "hold_signal"

    @pytest.mark.asyncio
    async def test_skips_low_confidence(self):
        # 80 − int(0.5 × 18) = 71 < 85
        engine, _ = _build(confidence=80)
        result = await engine.run_once(now=MONDAY_9AM)
        assert result["reason"] == "low_confidence"
        assert result["confidence"] == 71

    @pytest.mark.asyncio
    async def test_daily_trade_limit(self):
        engine, exchange = _build(config=TradingConfig(max_daily_trades=1))
        first = await engine.run_once(now=MONDAY_9AM)
        second = await engine.run_once(now=MONDAY_9AM)
        assert first["action"] == "order_placed"
        assert second["reason"] == "daily_trade_limit"
        assert len(exchange.get_trade_history()) == 1

    @pytest.mark.asyncio
    async def test_daily_loss_limit(self):
        engine, _ = _build(profit_model=lambda n: -5_000.0)
        await engine.run_once(now=MONDAY_9AM)
        result = await engine.run_once(now=MONDAY_9AM)
        assert result["reason"] == "daily_loss_limit"

    @pytest.mark.asyncio
    async def test_daily_gain_target(self):
        engine, _ = _build(profit_model=lambda n: 10_000.0)
        await engine.run_once(now=MONDAY_9AM)
        result = await engine.run_once(now=MONDAY_9AM)
        assert result["reason"] == "daily_gain_target"

    @pytest.mark.asyncio
    async def test_market_closed_on_weekend(self):
        engine, _ = _build()
        result = await engine.run_once(now=SATURDAY_9AM)
        assert result["reason"] == "market_closed"

    @pytest.mark.asyncio
    async def test_time_filter_disabled(self):
        engine, _ = _build(config=TradingConfig(use_time_filter=False))
        result = await engine.run_once(now=SATURDAY_9AM)
        assert result["action"] == "order_placed"

    @pytest.mark.asyncio
    async def test_extreme_risk_skipped(self):
        engine, _ = _build(
            config=TradingConfig(confidence_threshold=50),
            history=[100.0, 120.0] * 25,
        )
        result = await engine.run_once(now=MONDAY_9AM)
        assert result["regime"] == "HIGH_VOLATILITY"
        assert result["reason"] == "extreme_risk"

    @pytest.mark.asyncio
    async def test_timeframe_conflict(self):
        engine, _ = _build(confirm=Action.SELL)
        result = await engine.run_once(now=MONDAY_9AM)
        assert result["reason"] == "timeframe_conflict"

    @pytest.mark.asyncio
    async def test_timeframe_agreement_trades(self):
        engine, _ = _build(confirm=Action.BUY)
        result = await engine.run_once(now=MONDAY_9AM)
        assert result["action"] == "order_placed"

    @pytest.mark.asyncio
    async def test_sell_without_position(self):
        engine, _ = _build(
            action=Action.SELL,
            balances={"BTC": 0.0, "ETH": 0.0, "GBP": 12_000.0},
        )
        result = await engine.run_once(now=MONDAY_9AM)
        assert result["reason"] == "no_position"

    @pytest.mark.asyncio
    async def test_sell_capped_at_holding(self):
        engine, exchange = _build(
            action=Action.SELL,
            balances={"BTC": 0.01, "ETH": 0.0, "GBP": 12_000.0},
        )
        result = await engine.run_once(now=MONDAY_9AM)
        assert result["action"] == "order_placed"
        assert result["quantity"] == pytest.approx(0.01)
        assert (await exchange.get_balances())["BTC"] == pytest.approx(0.0)

    @pytest.mark.asyncio
    async def test_rejected_on_insufficient_funds(self):
        engine, exchange = _build(balances={"BTC": 0.0, "ETH": 0.0, "GBP": 10.0})
        result = await engine.run_once(now=MONDAY_9AM)
        assert result["action"] == "rejected"
        assert "Insufficient GBP" in result["reason"]
        assert exchange.get_trade_history() == []

    def test_unknown_strategy(self):
        exchange = PaperExchange(market=StubMarket(), order_latency=0)
        with pytest.raises(KeyError):
            TradingEngine(exchange, SignalEngine(), TradingConfig(), strategy="Martingale")


# ── Loop ─────────────────────────────────────────────────────────────────


class TestRun:
    @pytest.mark.asyncio
    async def test_max_cycles(self):
        engine, _ = _build(auto_trade=False)
        results = await engine.run(poll_interval=0, max_cycles=3)
        assert [r["action"] for r in results] == ["signal_only"] * 3
        assert engine.cycle_count == 3
        assert not engine.running

    @pytest.mark.asyncio
    async def test_cycle_errors_are_recorded(self):
        engine, _ = _build(strategy=FailingStrategy())
        results = await engine.run(poll_interval=0, max_cycles=2)
        assert [r["action"] for r in results] == ["error", "error"]
        assert "indicator blew up" in results[0]["reason"]

    @pytest.mark.asyncio
    async def test_stop(self):
        engine, _ = _build(auto_trade=False)
        task = asyncio.create_task(engine.run(poll_interval=0.01))
        await asyncio.sleep(0.05)
        engine.stop()
        results = await asyncio.wait_for(task, timeout=1)
        assert results
        assert not engine.running

    @pytest.mark.asyncio
    async def test_cancel_propagates(self):
        engine, _ = _build(auto_trade=False)
        task = asyncio.create_task(engine.run(poll_interval=10))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert not engine.running

    @pytest.mark.asyncio
    async def test_status(self):
        engine, _ = _build(auto_trade=False)
        await engine.run_once(now=MONDAY_9AM)
        status = engine.status()
        assert status["pair"] == "BTC/GBP"
        assert status["strategy"] == "Momentum"
        assert status["cycle_count"] == 1
        assert status["last_result"]["action"] == "signal_only"
