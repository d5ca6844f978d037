from __future__ import annotations

import threading

from ratefeed.schemas.currency import Snapshot


class ReadCache:
    """Holds the one snapshot served to readers.

    Snapshots are immutable and replaced whole, so a reader gets either the
    previous or the new generation.
    """

    def __init__(self, snapshot: Snapshot | None = None) -> None:
        self._lock = threading.Lock()
        self._snapshot = snapshot

    def get(self) -> Snapshot | None:
        with self._lock:
            return self._snapshot

    def set(self, snapshot: Snapshot) -> None:
        with self._lock:
            self._snapshot = snapshot
