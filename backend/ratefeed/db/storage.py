from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from typing import TypeVar

from pydantic import ValidationError
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ratefeed.db.models import Currency, UpdateDatetime
from ratefeed.errors import StorageError
from ratefeed.schemas.currency import CurrencyRecord, UpdateTimestamp

logger = logging.getLogger("ratefeed.db")

T = TypeVar("T")


class DbStorage:
    """Durable store of update timestamps and the currencies fetched with them.

    One session is opened per update cycle by :meth:`connect` and released by
    :meth:`disconnect`. Inserts are flushed but only made durable by
    :meth:`commit`, so a timestamp and its currencies land together or not at
    all. Every call runs under ``timeout_seconds``.
    """

    def __init__(self, sessionmaker: async_sessionmaker, timeout_seconds: float) -> None:
        self.sessionmaker = sessionmaker
        self.timeout_seconds = timeout_seconds
        self._session: AsyncSession | None = None

    async def _call(self, action: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            raise StorageError(
                f"cannot {action}: no answer within {self.timeout_seconds}s"
            ) from exc
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot {action}: {exc}") from exc
        except OSError as exc:
            raise StorageError(f"cannot {action}: {exc}") from exc

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise StorageError("storage is not connected")
        return self._session

    async def connect(self) -> None:
        if self._session is not None:
            return
        session = self.sessionmaker()
        try:
            await self._call("connect to db", session.execute(text("SELECT 1")))
        except StorageError:
            await session.close()
            raise
        self._session = session

    async def disconnect(self) -> None:
        session = self._session
        if session is None:
            return
        self._session = None
        await self._call("disconnect from db", session.close())

    async def commit(self) -> None:
        await self._call("commit", self._require_session().commit())

    async def rollback(self) -> None:
        await self._call("rollback", self._require_session().rollback())

    async def get_latest_update_datetime(self) -> UpdateTimestamp | None:
        session = self._require_session()
        stmt = select(UpdateDatetime).order_by(UpdateDatetime.id.desc()).limit(1)
        result = await self._call("get latest update datetime", session.execute(stmt))
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return UpdateTimestamp(id=row.id, timestamp=row.update_datetime)

    async def insert_update_datetime(self, now_text: str) -> UpdateTimestamp:
        session = self._require_session()
        row = UpdateDatetime(update_datetime=now_text)
        session.add(row)
        await self._call("insert update datetime", session.flush())
        return UpdateTimestamp(id=row.id, timestamp=row.update_datetime)

    async def insert_currencies(
        self, records: Sequence[CurrencyRecord], update_datetime_id: int
    ) -> None:
        session = self._require_session()
        session.add_all(
            [
                Currency(
                    update_datetime_id=update_datetime_id,
                    num_code=record.num_code,
                    char_code=record.char_code,
                    multiplier=record.multiplier,
                    name=record.name,
                    value=record.value,
                )
                for record in records
            ]
        )
        await self._call("insert currencies", session.flush())
        logger.debug("inserted %d currencies for update %d", len(records), update_datetime_id)

    async def get_latest_currencies(self, update_datetime_id: int) -> list[CurrencyRecord]:
        session = self._require_session()
        stmt = (
            select(Currency)
            .where(Currency.update_datetime_id == update_datetime_id)
            .order_by(Currency.id)
        )
        result = await self._call("get currencies", session.execute(stmt))
        rows = result.scalars().all()
        try:
            return [
                CurrencyRecord(
                    num_code=row.num_code,
                    char_code=row.char_code,
                    multiplier=row.multiplier,
                    name=row.name,
                    value=row.value,
                )
                for row in rows
            ]
        except ValidationError as exc:
            raise StorageError(
                f"stored currencies for update {update_datetime_id} are invalid: "
                f"{exc.errors()[0]['msg']}"
            ) from exc
