from __future__ import annotations

from pathlib import Path

from ratefeed.config.settings import SourceSettings
from ratefeed.errors import SourceUnavailableError


class LocalFileSource:
    """Feed snapshot kept on the local filesystem."""

    def __init__(self, config: SourceSettings) -> None:
        self.path = Path(config.file)

    def get_currency_data(self) -> bytes:
        try:
            data = self.path.read_bytes()
        except OSError as exc:
            raise SourceUnavailableError(f"cannot read {self.path}: {exc}") from exc
        if not data:
            raise SourceUnavailableError(f"{self.path} is empty")
        return data

    def save_currency_data(self, data: bytes) -> None:
        """Overwrite the snapshot file with ``data``."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_bytes(data)
        except OSError as exc:
            raise SourceUnavailableError(f"cannot write {self.path}: {exc}") from exc

    def __repr__(self) -> str:
        return f"LocalFileSource(path='{self.path}')"
