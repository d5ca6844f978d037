from __future__ import annotations

import xml.etree.ElementTree as ET
from decimal import Decimal, InvalidOperation

from pydantic import ValidationError

from ratefeed.errors import ParseError
from ratefeed.schemas.currency import CurrencyRecord


ROOT_TAG = "ValCurs"
ENTRY_TAG = "Valute"
_REQUIRED_FIELDS = ("NumCode", "CharCode", "Nominal", "Name", "Value")


def _field_text(entry: ET.Element, field: str, position: int) -> str:
    node = entry.find(field)
    text = (node.text or "").strip() if node is not None else ""
    if not text:
        raise ParseError(f"entry #{position}: missing {field}")
    return text


def _parse_entry(entry: ET.Element, position: int) -> CurrencyRecord:
    fields = {name: _field_text(entry, name, position) for name in _REQUIRED_FIELDS}

    try:
        multiplier = int(fields["Nominal"])
    except ValueError as exc:
        raise ParseError(
            f"entry #{position}: nominal {fields['Nominal']!r} is not an integer"
        ) from exc
    try:
        value = Decimal(fields["Value"])
    except InvalidOperation as exc:
        raise ParseError(
            f"entry #{position}: value {fields['Value']!r} is not a number"
        ) from exc
    if not value.is_finite():
        raise ParseError(f"entry #{position}: value {fields['Value']!r} is not finite")

    try:
        return CurrencyRecord(
            num_code=fields["NumCode"],
            char_code=fields["CharCode"],
            multiplier=multiplier,
            name=fields["Name"],
            value=value,
        )
    except ValidationError as exc:
        raise ParseError(f"entry #{position}: {exc.errors()[0]['msg']}") from exc


def parse_feed(data: bytes) -> list[CurrencyRecord]:
    """Parse a normalized ``ValCurs`` document into currency records.

    Records keep document order. The encoding comes from the XML prolog.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ParseError(f"malformed feed: {exc}") from exc

    if root.tag != ROOT_TAG:
        raise ParseError(f"unexpected root element <{root.tag}>")

    records: list[CurrencyRecord] = []
    seen_num_codes: set[str] = set()
    seen_char_codes: set[str] = set()
    for position, entry in enumerate(root.iter(ENTRY_TAG), start=1):
        record = _parse_entry(entry, position)
        if record.num_code in seen_num_codes:
            raise ParseError(f"duplicate num code {record.num_code}")
        if record.char_code in seen_char_codes:
            raise ParseError(f"duplicate char code {record.char_code}")
        seen_num_codes.add(record.num_code)
        seen_char_codes.add(record.char_code)
        records.append(record)

    if not records:
        raise ParseError("feed contains no currency entries")
    return records
