"""KrakenSim — application entry point.

Boots the FastAPI internal server and provides the CLI entry point for
the paper-trading loop.
"""

import logging

from fastapi import FastAPI

from krakensim.api.routers import router

app = FastAPI(title="KrakenSim Internal API", version="0.1.0")
app.include_router(router)

logger = logging.getLogger("krakensim")


@app.get("/health")
async def health():
    """Liveness check."""
    return {"status": "ok"}


def refuse_live(mode: str) -> bool:
    """Log an error when live trading is requested.

    Returns ``True`` if *mode* is ``"live"``.  Only the paper exchange is
    wired up, so live mode never starts.
    """
    if mode == "live":
        logger.error(
            "LIVE TRADING MODE is not available — only the paper exchange is supported."
        )
        return True
    return False


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli() -> None:
    """Parse CLI arguments and start the API server and trading loop."""
    import argparse
    import asyncio
    import signal
    import sys

    from krakensim.api.routers import configure_routers
    from krakensim.broker.models import SUPPORTED_PAIRS
    from krakensim.broker.paper_client import PaperExchange
    from krakensim.config import load_config, load_trading_config
    from krakensim.engine import TradingEngine
    from krakensim.market.generator import MarketGenerator
    from krakensim.strategy.signals import SignalEngine

    config = load_config()

    parser = argparse.ArgumentParser(description="KrakenSim paper-trading bot")
    parser.add_argument(
        "--mode",
        choices=["paper", "live"],
        default=config.trading_mode,
        help="Trading mode (default: paper)",
    )
    parser.add_argument(
        "--strategy",
        default=config.strategy,
        help="Strategy display name, e.g. 'Momentum' (default: AI Ensemble)",
    )
    parser.add_argument(
        "--pair",
        choices=sorted(SUPPORTED_PAIRS),
        default=config.trade_pair,
        help="Trading pair (default: BTC/GBP)",
    )
    parser.add_argument(
        "--auto-trade",
        action="store_true",
        default=config.auto_trading,
        help="Place orders when a signal clears every gate",
    )
    parser.add_argument(
        "--engine-only",
        action="store_true",
        help="Run the trading loop without the API server",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if refuse_live(args.mode):
        sys.exit(1)

    market = MarketGenerator()
    for pair in SUPPORTED_PAIRS:
        market.warm_up(pair)
    exchange = PaperExchange(market=market, reference_pair=args.pair)
    signal_engine = SignalEngine()
    trading_config = load_trading_config()

    try:
        engine = TradingEngine(
            exchange,
            signal_engine,
            trading_config,
            pair=args.pair,
            strategy=args.strategy,
            auto_trade=args.auto_trade,
        )
    except KeyError as exc:
        parser.error(exc.args[0])

    configure_routers(
        exchange=exchange,
        signal_engine=signal_engine,
        trading_config=trading_config,
        engine=engine,
    )

    def handle_shutdown(signum, frame):
        logger.info("Shutdown signal received, stopping gracefully.")
        engine.stop()

    signal.signal(signal.SIGINT, handle_shutdown)

    if args.engine_only:
        asyncio.run(_run_engine_only(engine, config.price_refresh_seconds))
    else:
        asyncio.run(
            _run_server_and_engine(
                engine, config.price_refresh_seconds, config.health_port,
            )
        )


async def _run_server_and_engine(engine, poll_interval: float, port: int = 8080) -> None:
    """Start the API server and the trading loop concurrently."""
    import asyncio
    import uvicorn

    logger.info(
        "Starting KrakenSim on %s with strategy '%s' (auto-trade: %s).",
        engine.pair, engine.strategy.value, engine.status()["auto_trade"],
    )

    uvi_config = uvicorn.Config(
        app,
        host="0.0.0.0",
        port=port,
        log_level="info",
    )
    server = uvicorn.Server(uvi_config)

    async def _run_engine():
        await engine.run(poll_interval=poll_interval)
        server.should_exit = True

    logger.info("API available at http://localhost:%d", port)
    results = await asyncio.gather(
        server.serve(),
        _run_engine(),
        return_exceptions=True,
    )
    logger.info("KrakenSim stopped. Results: %s", [type(r).__name__ for r in results])


async def _run_engine_only(engine, poll_interval: float) -> None:
    """Run the trading loop without starting the API server."""
    logger.info(
        "Starting KrakenSim engine (no API) on %s with strategy '%s'.",
        engine.pair, engine.strategy.value,
    )
    results = await engine.run(poll_interval=poll_interval)
    logger.info("KrakenSim engine stopped after %d cycle(s).", len(results))


if __name__ == "__main__":
    _run_cli()
