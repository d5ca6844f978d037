from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

JsonNumber = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class CurrencyRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    num_code: str = Field(min_length=1)
    char_code: str = Field(min_length=1)
    multiplier: int = Field(ge=1)
    name: str = Field(min_length=1)
    value: JsonNumber = Field(gt=0)


class UpdateTimestamp(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    timestamp: str


class Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    update: UpdateTimestamp
    currencies: tuple[CurrencyRecord, ...] = ()
