from __future__ import annotations


class RateFeedError(Exception):
    """Base class for every error raised by the service."""


class SourceUnavailableError(RateFeedError):
    """The feed could not be retrieved from the file or the network."""


class NormalizationError(RateFeedError):
    """The raw feed bytes could not be normalized before parsing."""


class DataError(RateFeedError):
    """A buffer handed to the normalizer is missing or empty."""


class ParseError(RateFeedError):
    """The feed does not match the expected XML schema."""


class TimeParseError(RateFeedError):
    def __init__(self, value: str, reason: str | None = None) -> None:
        self.value = value
        message = f"cannot parse update datetime {value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class StorageError(RateFeedError):
    """A durable storage call failed or ran out of time."""


class ServerError(RateFeedError):
    """The HTTP server stopped with an error."""
