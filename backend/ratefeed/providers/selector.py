from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from ratefeed.config.settings import SourceSettings
from ratefeed.errors import DataError, NormalizationError, SourceUnavailableError
from ratefeed.parsing.normalizer import repaired
from ratefeed.parsing.xml_feed import parse_feed
from ratefeed.providers.cbr import CbrSource
from ratefeed.providers.local_file import LocalFileSource
from ratefeed.schemas.currency import CurrencyRecord

logger = logging.getLogger("ratefeed.providers")


class FeedSource(Protocol):
    def get_currency_data(self) -> bytes: ...


def select_source(config: SourceSettings) -> FeedSource:
    if config.read_from_file:
        return LocalFileSource(config)
    return CbrSource(config)


class SourceFetcher:
    def __init__(self, source: FeedSource, timeout_seconds: float) -> None:
        self.source = source
        self.timeout_seconds = timeout_seconds

    async def _get_raw_data(self) -> bytes:
        logger.debug("getting data from %r", self.source)
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.source.get_currency_data),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise SourceUnavailableError(
                f"{self.source!r} did not answer within {self.timeout_seconds}s"
            ) from exc

    async def get_parsed_data(self) -> list[CurrencyRecord]:
        logger.info("getting new data...")
        raw = await self._get_raw_data()

        try:
            data = repaired(raw)
        except DataError as exc:
            raise NormalizationError(f"cannot replace commas in data: {exc}") from exc

        logger.info("parsing data...")
        records = parse_feed(data)
        logger.debug("parsed %d currencies", len(records))
        return records
