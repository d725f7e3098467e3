import logging
from functools import partial

from src.trader.iteration import run_iteration
from src.trader.scheduler import DEFAULT_INTERVAL_SECONDS, LoopScheduler
from src.trader.session import create_session
from src.utils.config_loader import load_config

logger = logging.getLogger(__name__)

_NOISY_LOGGERS = ("urllib3", "web3", "requests")


def configure_logging(level: int = logging.INFO) -> None:
    # Idempotent; safe if configured elsewhere.
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def main(max_iterations: int | None = None):
    configure_logging()
    logger.info("STARTING IT UP")

    # Startup failures (config, env, RPC, subgraph) propagate and stop the process.
    config = load_config()
    session = create_session(config)

    interval = float((config.get("scheduler") or {}).get("interval_seconds", DEFAULT_INTERVAL_SECONDS))
    scheduler = LoopScheduler(interval)

    logger.info(
        f"Trading vault {session.vault_address} on {session.network} every {interval:.0f}s "
        f"(primary {session.pair.primary}, secondary {session.pair.secondary}, size {session.trade_size_bps} bps)"
    )

    try:
        scheduler.run(partial(run_iteration, session), max_iterations=max_iterations)
    except KeyboardInterrupt:
        logger.info("Stopping Enzyme Moon Bot...")


if __name__ == "__main__":
    main()
