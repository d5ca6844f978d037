from __future__ import annotations

import asyncio
import datetime
import logging
from typing import Protocol

from ratefeed.cache import ReadCache
from ratefeed.db.storage import DbStorage
from ratefeed.errors import RateFeedError, TimeParseError
from ratefeed.jobs.freshness import FreshnessEvaluator, format_update_datetime
from ratefeed.providers.selector import SourceFetcher
from ratefeed.schemas.currency import CurrencyRecord, Snapshot, UpdateTimestamp

logger = logging.getLogger("ratefeed.updater")


class Server(Protocol):
    failure: BaseException | None

    @property
    def is_running(self) -> bool: ...

    def start(self) -> asyncio.Task: ...


class RatesUpdater:
    """Keeps the durable store and the read cache in sync with the feed.

    Each cycle reads the latest stored update, fetches and stores a new feed
    if that update is stale or reloads the stored currencies otherwise, then
    publishes the result into the cache. A failed cycle leaves the cache as it
    was.
    """

    def __init__(
        self,
        storage: DbStorage,
        fetcher: SourceFetcher,
        evaluator: FreshnessEvaluator,
        cache: ReadCache,
        server: Server | None = None,
        retry_delay_seconds: float = 60.0,
    ) -> None:
        self.storage = storage
        self.fetcher = fetcher
        self.evaluator = evaluator
        self.cache = cache
        self.server = server
        self.retry_delay = datetime.timedelta(seconds=retry_delay_seconds)

    def _check_update_needed(self, latest: UpdateTimestamp | None) -> bool:
        logger.info("checking latest update time...")
        try:
            return self.evaluator.is_update_needed(latest)
        except TimeParseError as exc:
            logger.error("cannot check whether db needs an update, refreshing: %s", exc)
            return True

    async def _fetch_and_store(self) -> tuple[UpdateTimestamp, list[CurrencyRecord]]:
        logger.info("data is outdated, initializing update process...")
        records = await self.fetcher.get_parsed_data()

        logger.info("saving data...")
        now_text = format_update_datetime(self.evaluator.clock())
        try:
            update = await self.storage.insert_update_datetime(now_text)
            await self.storage.insert_currencies(records, update.id)
            await self.storage.commit()
        except RateFeedError:
            try:
                await self.storage.rollback()
            except RateFeedError as exc:
                logger.error("cannot roll back failed insert: %s", exc)
            raise

        self.evaluator.mark_updated(update)
        return update, records

    async def _update_storages(self) -> Snapshot:
        await self.storage.connect()
        try:
            latest = await self.storage.get_latest_update_datetime()
            if self._check_update_needed(latest):
                update, records = await self._fetch_and_store()
            else:
                update = latest
                records = await self.storage.get_latest_currencies(latest.id)
        finally:
            try:
                await self.storage.disconnect()
            except RateFeedError as exc:
                logger.error("cannot disconnect from db after update: %s", exc)

        return Snapshot(update=update, currencies=tuple(records))

    async def run_cycle(self) -> bool:
        """Run one update cycle; return whether a snapshot was published."""
        try:
            snapshot = await self._update_storages()
        except RateFeedError as exc:
            logger.error("update cycle failed, keeping cached data: %s", exc)
            return False
        except Exception:
            logger.exception("unexpected error in update cycle, keeping cached data")
            return False

        self.cache.set(snapshot)
        logger.info(
            "data is now up to date (%d currencies as of %s)",
            len(snapshot.currencies),
            snapshot.update.timestamp,
        )
        return True

    def _ensure_server(self) -> None:
        if self.server is None or self.server.is_running:
            return
        if self.server.failure is not None:
            logger.warning("restarting http server after failure: %s", self.server.failure)
        self.server.start()

    def _next_delay(self, published: bool) -> datetime.timedelta:
        try:
            delay = self.evaluator.time_to_next_update()
        except TimeParseError as exc:
            logger.error("cannot get time to next update: %s", exc)
            delay = self.retry_delay
        if not published:
            delay = max(delay, self.retry_delay)
        return delay

    async def run_forever(self) -> None:
        while True:
            published = await self.run_cycle()
            self._ensure_server()

            delay = self._next_delay(published)
            logger.info(
                "next update will occur after %s",
                datetime.timedelta(seconds=round(delay.total_seconds())),
            )
            await asyncio.sleep(delay.total_seconds())
