#!/usr/bin/env python3
"""
Backfill Datamuse frequency data into ``dictionary.info``.

Checks that the database and the Datamuse API are reachable, then processes
pending words in batches until none are left.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from .batch_processor import BatchProcessor
from .config import BackfillConfig
from .database_manager import DatabaseManager
from .datamuse_client import FrequencyLookupClient
from .pacing import FixedDelayPacer
from .runner import ContinuousRunner, SelectionRetriesExhausted
from .secure_config import get_database_config
from .word_store import StorageError, WordStore

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def configure_logging(log_file: Optional[str] = None, level: str = 'INFO') -> None:
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))
        except OSError as exc:
            logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
            logging.warning("Failed to attach file logger: %s", exc)
            return
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=handlers)


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Backfill word frequency info from the Datamuse API',
    )
    parser.add_argument(
        '--batch-size',
        type=int,
        default=None,
        help='Words per batch (default: 1000)',
    )
    parser.add_argument(
        '--delay',
        type=float,
        default=None,
        help='Seconds between API calls within a batch (default: 0.2)',
    )
    parser.add_argument(
        '--batch-delay',
        type=float,
        default=None,
        help='Seconds between batches (default: 5.0)',
    )
    parser.add_argument(
        '--max-retries',
        type=int,
        default=None,
        help='Give up after this many consecutive batch selection failures (default: retry forever)',
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Run the connection checks and exit',
    )
    parser.add_argument('--log-file', default=None, help='Optional append-only log file')
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Log level (default: %(default)s)',
    )
    return parser.parse_args(argv)


async def run_backfill(
    config: BackfillConfig,
    db: DatabaseManager,
    client: FrequencyLookupClient,
    store: Optional[WordStore] = None,
    check_only: bool = False,
) -> int:
    """Run connection checks and then the continuous backfill. Returns an exit code."""
    logger.info("Testing connections...")
    db_connected = await db.test_connection()
    api_connected = await client.test_connection()
    if not db_connected or not api_connected:
        logger.error("Connection tests failed. Exiting...")
        return 1

    if check_only:
        logger.info("All connections successful.")
        return 0

    store = store or WordStore(db, language=config.language, source=config.source)
    try:
        pending = await store.count_pending()
        logger.info(f"{pending} words currently need frequency information")
    except StorageError as e:
        logger.warning(f"Could not count pending words: {e}")

    logger.info("All connections successful. Starting processing...")
    runner = ContinuousRunner(
        BatchProcessor(store, client),
        max_selection_retries=config.max_selection_retries,
    )
    try:
        await runner.run(
            config.batch_size,
            FixedDelayPacer(config.per_call_delay),
            FixedDelayPacer(config.inter_batch_delay),
        )
    except SelectionRetriesExhausted as e:
        logger.error(f"Fatal error: {e}")
        return 1

    logger.info("Processing completed successfully!")
    return 0


async def _main_async(args: argparse.Namespace) -> int:
    config = BackfillConfig.from_env().with_overrides(
        batch_size=args.batch_size,
        per_call_delay=args.delay,
        inter_batch_delay=args.batch_delay,
        max_selection_retries=args.max_retries,
    )
    async with DatabaseManager(get_database_config()) as db:
        async with FrequencyLookupClient(config.api_base_url, timeout=config.request_timeout) as client:
            return await run_backfill(config, db, client, check_only=args.check_only)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.log_file, args.log_level)
    logger.info("=== Datamuse Word Processor ===")

    try:
        return asyncio.run(_main_async(args))
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
