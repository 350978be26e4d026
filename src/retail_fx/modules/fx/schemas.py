from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel

# Form fields arrive as strings or JSON numbers; parsing happens in the service so a
# bad value is reported as an invalid argument rather than a schema error.
RawNumber = str | int | float


class ExchangeRateCreate(BaseModel):
    rate: RawNumber


class ExchangeRateOut(BaseModel):
    id: uuid.UUID
    rate: Decimal
    created_at: datetime
    is_default: bool


class CurrentRateOut(BaseModel):
    rate: Decimal
    is_fallback: bool
    display_currency: str


class RateForDateOut(BaseModel):
    as_of: date
    rate: Decimal


class ConvertIn(BaseModel):
    amount: RawNumber
    from_currency: str
    to_currency: str
    rate: RawNumber | None = None


class ConvertOut(BaseModel):
    amount: Decimal
    from_currency: str
    to_currency: str
    rate: Decimal | None


class FormatIn(BaseModel):
    amount: RawNumber
    currency: str | None = None
    rate: RawNumber | None = None


class FormatOut(BaseModel):
    text: str
