from decimal import Decimal

import pytest

from ratefeed.errors import ParseError
from ratefeed.parsing.normalizer import repaired
from ratefeed.parsing.xml_feed import parse_feed


def test_parse_feed_returns_records_in_document_order(raw_feed: bytes) -> None:
    records = parse_feed(repaired(raw_feed))

    assert [record.char_code for record in records] == ["AUD", "USD", "JPY"]
    usd = records[1]
    assert usd.num_code == "840"
    assert usd.multiplier == 1
    assert usd.name == "Доллар США"
    assert usd.value == Decimal("81.2345")
    assert records[2].multiplier == 100


def test_parse_feed_rejects_decimal_commas(raw_feed: bytes) -> None:
    with pytest.raises(ParseError):
        parse_feed(raw_feed)


def test_parse_feed_rejects_malformed_xml() -> None:
    with pytest.raises(ParseError):
        parse_feed(b"<ValCurs><Valute>")


def test_parse_feed_rejects_unexpected_root() -> None:
    with pytest.raises(ParseError):
        parse_feed(b"<Rates><Valute/></Rates>")


def test_parse_feed_rejects_empty_feed(feed_builder) -> None:
    with pytest.raises(ParseError):
        parse_feed(repaired(feed_builder(valutes=[])))


@pytest.mark.parametrize(
    "valute",
    [
        ("", "AUD", "1", "Австралийский доллар", "51,9138"),
        ("036", "AUD", "1", "Австралийский доллар", "n/a"),
        ("036", "AUD", "one", "Австралийский доллар", "51,9138"),
        ("036", "AUD", "0", "Австралийский доллар", "51,9138"),
        ("036", "AUD", "1", "Австралийский доллар", "-1,5"),
        ("036", "AUD", "1", "Австралийский доллар", "NaN"),
    ],
)
def test_parse_feed_rejects_invalid_entry(feed_builder, valute) -> None:
    with pytest.raises(ParseError):
        parse_feed(repaired(feed_builder(valutes=[valute])))


@pytest.mark.parametrize(
    "valutes",
    [
        [
            ("036", "AUD", "1", "Австралийский доллар", "51,9138"),
            ("036", "AZN", "1", "Азербайджанский манат", "47,7850"),
        ],
        [
            ("036", "AUD", "1", "Австралийский доллар", "51,9138"),
            ("944", "AUD", "1", "Азербайджанский манат", "47,7850"),
        ],
    ],
)
def test_parse_feed_rejects_duplicate_codes(feed_builder, valutes) -> None:
    with pytest.raises(ParseError):
        parse_feed(repaired(feed_builder(valutes=valutes)))


def test_parse_feed_rejects_missing_field() -> None:
    data = (
        b'<?xml version="1.0" encoding="utf-8"?><ValCurs>'
        b"<Valute><NumCode>036</NumCode><CharCode>AUD</CharCode>"
        b"<Nominal>1</Nominal><Value>51.9138</Value></Valute></ValCurs>"
    )
    with pytest.raises(ParseError, match="missing Name"):
        parse_feed(data)
