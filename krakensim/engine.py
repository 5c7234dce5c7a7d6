"""KrakenSim — Trading engine (orchestration loop).

Connects the market, signal engine, sizing model and paper ledger into a
single polling loop.  Each cycle: price → regime/volatility → signal →
gates → size → order.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from krakensim.broker.errors import InsufficientFunds, UnsupportedPair
from krakensim.broker.models import SUPPORTED_PAIRS
from krakensim.broker.paper_client import PaperExchange
from krakensim.market.sessions import session_info
from krakensim.models.trading_config import TradingConfig
from krakensim.strategy.models import (
    Action,
    MarketRegime,
    RiskLevel,
    StrategyName,
    TradingSignal,
)
from krakensim.strategy.registry import resolve_name
from krakensim.strategy.signals import SignalEngine

logger = logging.getLogger("krakensim.engine")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TradingEngine:
    """Orchestrates one evaluation-and-execution cycle per call.

    Args:
        broker: The paper ledger (owns prices, balances and history).
        signal_engine: Produces post-processed signals and sizes.
        trading_config: Risk/sizing parameters; never mutated.
        pair: Instrument to trade, e.g. ``"BTC/GBP"``.
        strategy: Strategy to evaluate each cycle.
        auto_trade: When False, cycles only generate signals.
        clock: UTC clock for the session filter.
    """

    def __init__(
        self,
        broker: PaperExchange,
        signal_engine: SignalEngine,
        trading_config: TradingConfig,
        pair: str = "BTC/GBP",
        strategy: StrategyName | str = StrategyName.ENSEMBLE,
        auto_trade: bool = False,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._broker = broker
        self._signals = signal_engine
        self._config = trading_config
        self._pair = pair
        self._strategy = resolve_name(strategy)
        self._auto_trade = auto_trade
        self._clock = clock
        self._running: bool = False
        self._cycle_count: int = 0
        self._last_signal: Optional[TradingSignal] = None
        self._last_result: Optional[dict] = None

    @property
    def pair(self) -> str:
        return self._pair

    @property
    def strategy(self) -> StrategyName:
        return self._strategy

    @property
    def last_signal(self) -> Optional[TradingSignal]:
        return self._last_signal

    @property
    def running(self) -> bool:
        return self._running

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    def status(self) -> dict:
        """Snapshot for the status endpoint."""
        return {
            "pair": self._pair,
            "strategy": self._strategy.value,
            "auto_trade": self._auto_trade,
            "running": self._running,
            "cycle_count": self._cycle_count,
            "last_result": self._last_result,
        }

    # ── Lifecycle ────────────────────────────────────────────────────────

    def stop(self) -> None:
        """Signal the engine to stop after the current cycle."""
        self._running = False

    async def run(
        self,
        poll_interval: float = 5.0,
        max_cycles: int = 0,
    ) -> list[dict]:
        """Run the trading loop until stopped.

        Args:
            poll_interval: Seconds between cycles.
            max_cycles: Stop after this many cycles (0 = unlimited).

        Returns:
            List of per-cycle result dicts.

        Cancelling the task mid-cycle is safe: an in-flight order either
        applied fully or not at all.
        """
        self._running = True
        results: list[dict] = []
        cycle = 0

        try:
            while self._running:
                cycle += 1
                try:
                    result = await self.run_once()
                except Exception as exc:
                    logger.error("Cycle %d failed: %s", cycle, exc)
                    result = {"action": "error", "reason": str(exc)}
                results.append(result)
                logger.info("Cycle %d: %s", cycle, result.get("action", "unknown"))

                if max_cycles and cycle >= max_cycles:
                    break
                await asyncio.sleep(poll_interval)
        except asyncio.CancelledError:
            logger.info("Trading loop cancelled after %d cycle(s).", cycle)
            raise
        finally:
            self._running = False

        return results

    # ── Single cycle ─────────────────────────────────────────────────────

    async def run_once(self, now: Optional[datetime] = None) -> dict:
        """Execute one evaluation cycle.

        Returns a dict with ``action`` in ``{"signal_only", "skipped",
        "rejected", "order_placed"}`` plus context.
        """
        now = now or self._clock()
        self._cycle_count += 1
        self._broker.reset_daily_counters()

        price = await self._broker.get_price(self._pair)
        history = self._broker.price_history(self._pair)
        regime = self._broker.get_market_regime(self._pair)
        volatility = self._broker.get_volatility(self._pair)

        signal = self._signals.generate_signal(
            self._strategy, price, history, regime, volatility, self._config,
        )
        self._last_signal = signal

        base = {
            "pair": self._pair,
            "price": price,
            "signal": signal.action.value,
            "confidence": signal.confidence,
            "regime": regime.type.value,
            "evaluated_at": now.isoformat(),
        }

        if not self._auto_trade:
            return self._finish({**base, "action": "signal_only"})

        reason = self._blocking_reason(signal, now, price, history, regime, volatility)
        if reason is not None:
            logger.debug("Skipping %s signal: %s", signal.action.value, reason)
            return self._finish({**base, "action": "skipped", "reason": reason})

        return self._finish(await self._place_order(signal, price, volatility, base))

    def _finish(self, result: dict) -> dict:
        self._last_result = result
        return result

    def _blocking_reason(
        self,
        signal: TradingSignal,
        now: datetime,
        price: float,
        history: tuple[float, ...],
        regime: MarketRegime,
        volatility: float,
    ) -> Optional[str]:
        """Return why *signal* must not be traded, or None to proceed."""
        cfg = self._config
        if signal.action == Action.HOLD:
            return "hold_signal"
        if signal.confidence < cfg.confidence_threshold:
            return "low_confidence"

        daily_trades, daily_pnl = self._broker.get_daily_stats()
        if daily_trades >= cfg.max_daily_trades:
            return "daily_trade_limit"
        initial = self._broker.initial_equity
        if daily_pnl <= -cfg.max_daily_loss * initial:
            return "daily_loss_limit"
        if daily_pnl >= cfg.max_daily_gain * initial:
            return "daily_gain_target"

        if cfg.use_time_filter and not session_info(now).is_open:
            return "market_closed"
        if cfg.volatility_filter and signal.risk_level == RiskLevel.EXTREME:
            return "extreme_risk"

        if cfg.multi_timeframe and self._strategy != StrategyName.MULTI_TIMEFRAME:
            confirm = self._signals.get_strategy(StrategyName.MULTI_TIMEFRAME).evaluate(
                price, history, regime, volatility,
            )
            if confirm.action not in (Action.HOLD, signal.action):
                return "timeframe_conflict"
        return None

    async def _place_order(
        self,
        signal: TradingSignal,
        price: float,
        volatility: float,
        base: dict,
    ) -> dict:
        cfg = self._config
        asset, quote = SUPPORTED_PAIRS.get(self._pair, (None, "GBP"))
        balances = await self._broker.get_balances()

        amount = self._signals.size_position(
            cfg.base_position_size,
            volatility,
            signal.confidence,
            cfg.max_allocation,
            cfg,
            balances.get(quote, 0.0),
        )
        quantity = amount / price
        if signal.action == Action.SELL:
            quantity = min(quantity, balances.get(asset, 0.0))
            if quantity <= 0:
                return {**base, "action": "skipped", "reason": "no_position"}

        try:
            if signal.action == Action.BUY:
                confirmation = await self._broker.buy(self._pair, quantity)
            else:
                confirmation = await self._broker.sell(self._pair, quantity)
        except (InsufficientFunds, UnsupportedPair) as exc:
            logger.warning("Order rejected: %s", exc)
            return {**base, "action": "rejected", "reason": str(exc)}

        return {
            **base,
            "action": "order_placed",
            "side": signal.action.value,
            "quantity": quantity,
            "amount": amount,
            "stop_loss": signal.stop_loss,
            "take_profit": signal.take_profit,
            "confirmation": confirmation,
        }
