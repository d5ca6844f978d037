from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from ratefeed.api.app import create_app
from ratefeed.api.server import HttpServer
from ratefeed.cache import ReadCache
from ratefeed.config.settings import Settings, settings
from ratefeed.db.session import create_engine, create_schema, create_sessionmaker
from ratefeed.db.storage import DbStorage
from ratefeed.errors import RateFeedError
from ratefeed.jobs.freshness import FreshnessEvaluator
from ratefeed.jobs.updater import RatesUpdater
from ratefeed.logging_config import setup_logging
from ratefeed.providers.cbr import CbrSource
from ratefeed.providers.local_file import LocalFileSource
from ratefeed.providers.selector import SourceFetcher, select_source

logger = logging.getLogger("ratefeed")


def build_updater(config: Settings, storage: DbStorage) -> RatesUpdater:
    cache = ReadCache()
    server = HttpServer(create_app(cache), config.server_host, config.server_port)
    fetcher = SourceFetcher(
        select_source(config.source), config.source.request_timeout_seconds
    )
    return RatesUpdater(
        storage=storage,
        fetcher=fetcher,
        evaluator=FreshnessEvaluator(config),
        cache=cache,
        server=server,
        retry_delay_seconds=config.retry_delay_seconds,
    )


async def run_daemon(config: Settings) -> None:
    engine = create_engine(config.database_url)
    try:
        while True:
            try:
                await create_schema(engine)
                break
            except (SQLAlchemyError, OSError) as exc:
                logger.error("cannot create db schema, retrying: %s", exc)
                await asyncio.sleep(config.retry_delay_seconds)
        storage = DbStorage(create_sessionmaker(engine), config.storage_timeout_seconds)
        await build_updater(config, storage).run_forever()
    finally:
        await engine.dispose()


def save_feed(config: Settings) -> None:
    """Download the feed and overwrite the local snapshot file with it."""
    data = CbrSource(config.source).get_currency_data()
    target = LocalFileSource(config.source)
    target.save_currency_data(data)
    logger.info("currency data saved in file: %s", target.path)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ratefeed",
        description="Currency rates updater and read API",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("run", help="Run the update loop and the HTTP server (default)")
    subparsers.add_parser("save-feed", help="Download the feed into the local source file")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = create_parser().parse_args(argv)
    setup_logging(settings.logging)

    if args.command == "save-feed":
        try:
            save_feed(settings)
        except RateFeedError as exc:
            logger.error("cannot save currency data: %s", exc)
            return 1
        return 0

    try:
        asyncio.run(run_daemon(settings))
    except KeyboardInterrupt:
        logger.info("stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
