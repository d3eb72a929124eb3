"""MercadoWorker: command-line entry point.

Run one import (default):
    python -m mercadoworker --username SELLER --site-id MLA

Re-import every hour:
    python -m mercadoworker --schedule 3600

Unset options fall back to the environment (ML_USERNAME, ML_SITE_ID,
CACHE_DIR, SCHEDULE_INTERVAL_SEC, LOG_LEVEL) and .env.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys


def setup_logging(level: str = "INFO"):
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_config(args: argparse.Namespace):
    """Environment config with command-line overrides applied."""
    from .config import get_config

    config = get_config()
    source_updates = {}
    if args.username:
        source_updates["username"] = args.username
    if args.site_id:
        source_updates["site_id"] = args.site_id

    updates = {}
    if source_updates:
        updates["source"] = config.source.model_copy(update=source_updates)
    if args.cache_dir:
        updates["cache_dir"] = args.cache_dir
    if args.schedule is not None:
        updates["schedule_interval"] = args.schedule
    if args.log_level:
        updates["log_level"] = args.log_level
    return config.model_copy(update=updates) if updates else config


async def run_forever(config) -> None:
    """Run the periodic scheduler until cancelled."""
    from .harvester import HarvesterScheduler, InMemoryNodeStore

    scheduler = HarvesterScheduler(config, store=InMemoryNodeStore())
    scheduler.start()
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        await scheduler.stop()


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Import a Mercado Libre seller catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--username", "-u", help="Seller nickname (ML_USERNAME)")
    parser.add_argument("--site-id", "-s", help="Marketplace site id, e.g. MLA (ML_SITE_ID)")
    parser.add_argument("--cache-dir", help="Directory for downloaded images (CACHE_DIR)")
    parser.add_argument(
        "--schedule",
        type=int,
        default=None,
        help="Re-import every N seconds instead of running once",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level",
    )

    args = parser.parse_args()
    config = build_config(args)
    setup_logging(config.log_level)
    logger = logging.getLogger(__name__)

    if config.schedule_interval > 0:
        try:
            asyncio.run(run_forever(config))
        except KeyboardInterrupt:
            logger.info("Shutting down...")
        return

    from .harvester import run_import

    try:
        result = asyncio.run(run_import(config.source, cache_dir=config.cache_dir))
    except KeyboardInterrupt:
        logger.info("Import interrupted")
        sys.exit(1)

    print(json.dumps(result, indent=2))
    if result["errors"] and not result["emitted"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
