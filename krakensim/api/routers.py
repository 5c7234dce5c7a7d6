"""Internal API routers — balances, prices, orders, signals and analytics.

No business logic. Delegates to the paper exchange, the signal engine and
the trading engine injected at startup.
"""

import dataclasses
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from krakensim.broker.errors import InsufficientFunds, UnsupportedPair
from krakensim.broker.models import OrderSide
from krakensim.market.sessions import session_info
from krakensim.models.trading_config import TradingConfig
from krakensim.strategy.models import StrategyName

logger = logging.getLogger("krakensim")
router = APIRouter()

# ── Shared state (set during app startup) ────────────────────────────────

_exchange = None        # Set via configure_routers()
_signal_engine = None   # Set via configure_routers()
_trading_config: TradingConfig = TradingConfig()
_engine = None          # Optional; set via configure_routers()


def configure_routers(
    exchange,
    signal_engine,
    trading_config: Optional[TradingConfig] = None,
    engine=None,
) -> None:
    """Inject dependencies from the application startup.

    Args:
        exchange: A ``PaperExchange`` instance (or duck-type for tests).
        signal_engine: A ``SignalEngine`` instance.
        trading_config: Parameters used when generating signals.
        engine: The running ``TradingEngine``, if any, for ``/status``.
    """
    global _exchange, _signal_engine, _trading_config, _engine  # noqa: PLW0603
    _exchange = exchange
    _signal_engine = signal_engine
    _trading_config = trading_config or TradingConfig()
    _engine = engine


class OrderRequest(BaseModel):
    side: OrderSide
    pair: str = "BTC/GBP"
    quantity: float = Field(gt=0)


# ── Market ───────────────────────────────────────────────────────────────


@router.get("/balances")
async def get_balances():
    return await _exchange.get_balances()


@router.get("/price")
async def get_price(pair: str = Query(default="BTC/GBP")):
    price = await _exchange.get_price(pair)
    return {"pair": pair, "price": price}


@router.get("/ohlc")
async def get_ohlc(pair: str = Query(default="BTC/GBP")):
    points = await _exchange.get_ohlc(pair)
    return {
        "pair": pair,
        "points": [{"time": t, "price": p} for t, p in points],
    }


@router.get("/session")
async def get_session():
    info = session_info(datetime.now(timezone.utc))
    return dataclasses.asdict(info)


# ── Orders ───────────────────────────────────────────────────────────────


@router.post("/orders")
async def place_order(order: OrderRequest):
    """Fill a paper order; 400 on insufficient funds, 404 on unknown pair."""
    try:
        if order.side == OrderSide.BUY:
            confirmation = await _exchange.buy(order.pair, order.quantity)
        else:
            confirmation = await _exchange.sell(order.pair, order.quantity)
    except InsufficientFunds as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except UnsupportedPair as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"status": "filled", "confirmation": confirmation}


@router.get("/trades")
async def get_trades(limit: int = Query(default=75, ge=1, le=75)):
    trades = _exchange.get_trade_history(limit)
    return [
        {**dataclasses.asdict(t), "notional": t.notional}
        for t in trades
    ]


# ── Signals & analytics ──────────────────────────────────────────────────


@router.get("/signal")
async def get_signal(
    strategy: str = Query(default=StrategyName.ENSEMBLE.value),
    pair: str = Query(default="BTC/GBP"),
):
    try:
        evaluator = _signal_engine.get_strategy(strategy)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=exc.args[0]) from exc

    price = await _exchange.get_price(pair)
    signal = _signal_engine.generate_signal(
        evaluator.name,
        price,
        _exchange.price_history(pair),
        _exchange.get_market_regime(pair),
        _exchange.get_volatility(pair),
        _trading_config,
    )
    return {"pair": pair, "price": price, **dataclasses.asdict(signal)}


@router.get("/regime")
async def get_regime(pair: str = Query(default="BTC/GBP")):
    return dataclasses.asdict(_exchange.get_market_regime(pair))


@router.get("/risk")
async def get_risk():
    return dataclasses.asdict(_exchange.get_risk_metrics())


@router.get("/stats")
async def get_stats():
    return dataclasses.asdict(_exchange.get_bot_stats())


@router.get("/status")
async def get_status():
    daily_trades, daily_pnl = _exchange.get_daily_stats()
    status = {
        "daily_trades": daily_trades,
        "daily_pnl": daily_pnl,
        "initial_equity": _exchange.initial_equity,
        "current_streak": _exchange.current_streak,
        "engine": None,
    }
    if _engine is not None:
        status["engine"] = _engine.status()
    return status
