from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from ratefeed.api.app import create_app
from ratefeed.api.routes import get_cache, get_currencies, health
from ratefeed.cache import ReadCache
from ratefeed.schemas.currency import CurrencyRecord, Snapshot, UpdateTimestamp

SNAPSHOT = Snapshot(
    update=UpdateTimestamp(id=3, timestamp="2026-10-18T12:00:00+00:00"),
    currencies=(
        CurrencyRecord(
            num_code="840", char_code="USD", multiplier=1, name="Доллар США",
            value=Decimal("81.2345"),
        ),
        CurrencyRecord(
            num_code="392", char_code="JPY", multiplier=100, name="Японских иен",
            value=Decimal("54.0012"),
        ),
    ),
)


def test_create_app_exposes_cache() -> None:
    cache = ReadCache(SNAPSHOT)
    app = create_app(cache)

    assert get_cache(SimpleNamespace(app=app)) is cache
    paths = {route.path for route in app.routes}
    assert {"/currencies.json", "/health"} <= paths


def test_get_currencies_returns_current_snapshot() -> None:
    result = get_currencies(cache=ReadCache(SNAPSHOT))

    assert [record.char_code for record in result] == ["USD", "JPY"]


def test_get_currencies_before_first_update() -> None:
    with pytest.raises(HTTPException) as excinfo:
        get_currencies(cache=ReadCache())

    assert excinfo.value.status_code == 503


def test_currency_value_serializes_as_number() -> None:
    payload = SNAPSHOT.currencies[0].model_dump(mode="json")

    assert payload == {
        "num_code": "840",
        "char_code": "USD",
        "multiplier": 1,
        "name": "Доллар США",
        "value": 81.2345,
    }


def test_health_reports_update_time() -> None:
    assert health(cache=ReadCache(SNAPSHOT)) == {
        "status": "ok",
        "updated_at": "2026-10-18T12:00:00+00:00",
    }
    assert health(cache=ReadCache()) == {"status": "ok", "updated_at": None}
