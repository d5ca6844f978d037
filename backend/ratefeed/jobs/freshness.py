from __future__ import annotations

import datetime
from collections.abc import Callable
from zoneinfo import ZoneInfo

from ratefeed.config.settings import Settings
from ratefeed.errors import TimeParseError
from ratefeed.schemas.currency import UpdateTimestamp

Clock = Callable[[], datetime.datetime]


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


def format_update_datetime(moment: datetime.datetime) -> str:
    return moment.isoformat(timespec="seconds")


def parse_update_datetime(value: str) -> datetime.datetime:
    try:
        parsed = datetime.datetime.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise TimeParseError(value) from exc
    if parsed.tzinfo is None:
        raise TimeParseError(value, "no utc offset")
    return parsed


class FreshnessEvaluator:
    """Decides when the stored rates go stale and when to check next.

    ``interval`` strategy: data is stale once ``update_interval_seconds`` have
    elapsed since the stored timestamp, boundary included.

    ``daily`` strategy: the source publishes once a day at ``publish_time``
    (``publish_timezone``). Data is stale when it was stored before the most
    recent publication; the next check is due at the following one.
    """

    def __init__(self, settings: Settings, clock: Clock = utc_now) -> None:
        self.strategy = settings.update_strategy
        self.interval = datetime.timedelta(seconds=settings.update_interval_seconds)
        self.publish_time = settings.publish_time
        self.publish_zone = ZoneInfo(settings.publish_timezone)
        self.clock = clock
        self._latest: UpdateTimestamp | None = None

    def _last_publication(self, now: datetime.datetime) -> datetime.datetime:
        local_now = now.astimezone(self.publish_zone)
        boundary = datetime.datetime.combine(
            local_now.date(), self.publish_time, tzinfo=self.publish_zone
        )
        if boundary > local_now:
            boundary = datetime.datetime.combine(
                local_now.date() - datetime.timedelta(days=1),
                self.publish_time,
                tzinfo=self.publish_zone,
            )
        return boundary

    def _next_publication(self, now: datetime.datetime) -> datetime.datetime:
        last = self._last_publication(now)
        return datetime.datetime.combine(
            last.date() + datetime.timedelta(days=1),
            self.publish_time,
            tzinfo=self.publish_zone,
        )

    def _is_stale(self, updated_at: datetime.datetime, now: datetime.datetime) -> bool:
        if self.strategy == "interval":
            return now - updated_at >= self.interval
        return updated_at < self._last_publication(now)

    def is_update_needed(self, latest: UpdateTimestamp | None) -> bool:
        self._latest = latest
        if latest is None:
            return True
        updated_at = parse_update_datetime(latest.timestamp)
        return self._is_stale(updated_at, self.clock())

    def mark_updated(self, latest: UpdateTimestamp) -> None:
        self._latest = latest

    def time_to_next_update(self) -> datetime.timedelta:
        if self._latest is None:
            return datetime.timedelta(0)
        updated_at = parse_update_datetime(self._latest.timestamp)
        now = self.clock()
        if self._is_stale(updated_at, now):
            return datetime.timedelta(0)

        if self.strategy == "interval":
            due = updated_at + self.interval
        else:
            due = self._next_publication(now)
        return max(due - now, datetime.timedelta(0))
