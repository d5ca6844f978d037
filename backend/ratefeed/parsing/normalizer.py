from __future__ import annotations

from ratefeed.errors import DataError

# The XML prolog and the <ValCurs> header of the feed end before this offset.
START_DATA_INDEX = 100

_COMMA = ord(",")
_DOT = ord(".")


def repair(data: bytearray | None) -> None:
    """Replace decimal commas with dots in place, past ``START_DATA_INDEX``.

    The upstream feed writes numbers as ``51,9138``. Header bytes before the
    offset are left untouched. This is destructive: keep a copy of ``data``
    if the raw bytes are needed afterwards.
    """
    if not data:
        raise DataError("data is empty")

    for index in range(START_DATA_INDEX, len(data)):
        if data[index] == _COMMA:
            data[index] = _DOT


def repaired(data: bytes | None) -> bytes:
    """Return a repaired copy of ``data``, leaving the argument intact."""
    if not data:
        raise DataError("data is empty")
    if len(data) <= START_DATA_INDEX:
        return bytes(data)
    head = data[:START_DATA_INDEX]
    tail = data[START_DATA_INDEX:].replace(b",", b".")
    return bytes(head) + tail
