from collections.abc import Callable

import pytest

FEED_HEADER = (
    '<?xml version="1.0" encoding="windows-1251"?>'
    '<ValCurs Date="17.10.2026" name="Foreign Currency Market">'
)

DEFAULT_VALUTES = [
    ("036", "AUD", "1", "Австралийский доллар", "51,9138"),
    ("840", "USD", "1", "Доллар США", "81,2345"),
    ("392", "JPY", "100", "Японских иен", "54,0012"),
]


def build_valute(num_code: str, char_code: str, nominal: str, name: str, value: str) -> str:
    return (
        f'<Valute ID="R{num_code}">'
        f"<NumCode>{num_code}</NumCode>"
        f"<CharCode>{char_code}</CharCode>"
        f"<Nominal>{nominal}</Nominal>"
        f"<Name>{name}</Name>"
        f"<Value>{value}</Value>"
        f"<VunitRate>{value}</VunitRate>"
        "</Valute>"
    )


def build_feed(valutes=DEFAULT_VALUTES, header: str = FEED_HEADER) -> bytes:
    body = "".join(build_valute(*valute) for valute in valutes)
    return (header + body + "</ValCurs>").encode("cp1251")


@pytest.fixture
def feed_builder() -> Callable[..., bytes]:
    return build_feed


@pytest.fixture
def raw_feed() -> bytes:
    return build_feed()
