import pytest

from ratefeed.errors import DataError
from ratefeed.parsing.normalizer import START_DATA_INDEX, repair, repaired


def test_repair_keeps_header_and_replaces_commas_after_offset() -> None:
    data = bytearray(b"a" * 120)
    data[50] = ord(",")
    data[110] = ord(",")

    repair(data)

    assert START_DATA_INDEX == 100
    assert data[50] == ord(",")
    assert data[110] == ord(".")
    assert data.count(b",") == 1
    assert data.count(b"a") == 118


def test_repair_touches_only_commas() -> None:
    original = bytes(range(256)) * 2
    data = bytearray(original)

    repair(data)

    for index, (before, after) in enumerate(zip(original, data)):
        if index >= START_DATA_INDEX and before == ord(","):
            assert after == ord(".")
        else:
            assert after == before


def test_repair_short_buffer_is_noop() -> None:
    data = bytearray(b"1,5;2,5")

    repair(data)

    assert data == bytearray(b"1,5;2,5")


@pytest.mark.parametrize("data", [None, bytearray()])
def test_repair_rejects_missing_data(data) -> None:
    with pytest.raises(DataError):
        repair(data)


def test_repaired_returns_new_buffer() -> None:
    raw = b"h," * 50 + b"51,9138"

    result = repaired(raw)

    assert raw.endswith(b"51,9138")
    assert result[:START_DATA_INDEX] == raw[:START_DATA_INDEX]
    assert result.endswith(b"51.9138")


def test_repaired_matches_in_place_repair(raw_feed: bytes) -> None:
    in_place = bytearray(raw_feed)
    repair(in_place)

    assert repaired(raw_feed) == bytes(in_place)


@pytest.mark.parametrize("data", [None, b""])
def test_repaired_rejects_missing_data(data) -> None:
    with pytest.raises(DataError):
        repaired(data)
