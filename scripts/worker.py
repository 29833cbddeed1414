"""Background worker that keeps the recent actions store up to date.

Every cooldown period it asks Codeforces for the latest recent actions and
appends the ones newer than the last stored timestamp. It resumes from the
store on restart and stops cleanly on SIGINT/SIGTERM.

Usage:
    python scripts/worker.py [--environment prod] [--cooldown-minutes 5]
                             [--cf-batch-size 100]
                             [--store-addr sqlite:///data] [--database-name cfrss-local]

Environment Variables:
    DATABASE_URL: full store URL, used when no store flag is given
    CFRSS_*: any setting from src/config/settings.py
"""

import os
import sys
import asyncio
import argparse
import signal
from datetime import timedelta

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import structlog
from pydantic import ValidationError

from src.config.settings import Settings
from src.config.logging_setup import configure_logging
from src.ingestion.codeforces import CodeforcesClient
from src.scheduler.scheduler import CodeforcesScheduler
from src.storage.factory import get_database_url, get_recent_action_store
from src.storage.interfaces import StoreError

logger = structlog.get_logger()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="cfrss-worker",
        description="Persist Codeforces recent actions at a fixed cadence",
    )
    parser.add_argument("--environment", choices=["dev", "prod"],
                        help="The current environment: dev/prod")
    parser.add_argument("--store-addr", help="Store address, e.g. sqlite:///data or postgresql://host")
    parser.add_argument("--database-name", help="The name of the database")
    parser.add_argument("--cooldown-minutes", type=float,
                        help="The cooldown (in minutes) for contacting Codeforces API")
    parser.add_argument("--cf-batch-size", type=int, dest="batch_size",
                        help="The number of recent actions to query on each API call")
    return parser.parse_args(argv)


def build_settings(args) -> Settings:
    """Settings from env/.env, with command line flags taking precedence."""
    overrides = {
        "environment": args.environment,
        "store_addr": args.store_addr,
        "database_name": args.database_name,
        "cooldown_minutes": args.cooldown_minutes,
        "batch_size": args.batch_size,
    }
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


async def run(cfg: Settings, database_url: str):
    """Open the client and store, then run the scheduler until a signal arrives."""
    stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, stop_event.set)

    store = get_recent_action_store(database_url)
    try:
        async with CodeforcesClient(
            timeout=timedelta(minutes=cfg.codeforces_timeout_minutes),
            base_url=cfg.codeforces_base_url,
            max_attempts=cfg.fetch_max_attempts,
        ) as client:
            scheduler = CodeforcesScheduler.from_store(
                client,
                store,
                batch_size=cfg.batch_size,
                cooldown=timedelta(minutes=cfg.cooldown_minutes),
                logger=structlog.get_logger(component="scheduler"),
            )
            await scheduler.start(stop_event)
    finally:
        store.close()


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        cfg = build_settings(args)
    except ValidationError as e:
        configure_logging("dev")
        logger.error("invalid_settings", error=str(e))
        return 1

    configure_logging(cfg.environment)

    if args.store_addr or args.database_name:
        database_url = cfg.database_url
    else:
        database_url = get_database_url()

    try:
        asyncio.run(run(cfg, database_url))
    except StoreError as e:
        logger.error("startup_failed", error=str(e))
        return 1

    logger.info("worker_stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
