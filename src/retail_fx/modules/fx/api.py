from __future__ import annotations

from datetime import date, datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from retail_fx.api.deps import get_currency_service
from retail_fx.core.config import settings
from retail_fx.core.db import db_session
from retail_fx.modules.fx import money
from retail_fx.modules.fx.schemas import (
    ConvertIn,
    ConvertOut,
    CurrentRateOut,
    ExchangeRateCreate,
    ExchangeRateOut,
    FormatIn,
    FormatOut,
    RateForDateOut,
)
from retail_fx.modules.fx.service import CurrencyService, get_rate_as_of, list_rates

router = APIRouter(tags=["fx"])


@router.get("/exchange-rates/current", response_model=CurrentRateOut)
def current_rate_endpoint(
    service: CurrencyService = Depends(get_currency_service),
) -> CurrentRateOut:
    rate = service.get_current_rate()
    return CurrentRateOut(
        rate=rate,
        is_fallback=service.rate_is_fallback,
        display_currency=service.display_currency.value,
    )


@router.get("/exchange-rates", response_model=list[ExchangeRateOut])
def list_rates_endpoint(
    limit: int = Query(default=settings.rate_history_limit, ge=1, le=500),
    session: Session = Depends(db_session),
) -> list[ExchangeRateOut]:
    return [
        ExchangeRateOut.model_validate(fx, from_attributes=True)
        for fx in list_rates(session, limit=limit)
    ]


@router.post(
    "/exchange-rates", response_model=ExchangeRateOut, status_code=status.HTTP_201_CREATED
)
def set_rate_endpoint(
    payload: ExchangeRateCreate,
    service: CurrencyService = Depends(get_currency_service),
) -> ExchangeRateOut:
    fx = service.set_default_rate(payload.rate)
    return ExchangeRateOut.model_validate(fx, from_attributes=True)


@router.get("/exchange-rates/as-of", response_model=ExchangeRateOut)
def rate_as_of_endpoint(at: datetime, session: Session = Depends(db_session)) -> ExchangeRateOut:
    fx = get_rate_as_of(session, at)
    return ExchangeRateOut.model_validate(fx, from_attributes=True)


@router.get("/exchange-rates/for-date", response_model=RateForDateOut)
def rate_for_date_endpoint(
    on: date = Query(alias="date"),
    service: CurrencyService = Depends(get_currency_service),
) -> RateForDateOut:
    return RateForDateOut(as_of=on, rate=service.get_exchange_rate_for_date(on))


@router.post("/fx/convert", response_model=ConvertOut)
def convert_endpoint(
    payload: ConvertIn,
    service: CurrencyService = Depends(get_currency_service),
) -> ConvertOut:
    from_currency = money.parse_currency(payload.from_currency)
    to_currency = money.parse_currency(payload.to_currency)
    rate = None
    if from_currency != to_currency:
        rate = service.resolve_rate(payload.rate)
    amount = service.convert(payload.amount, from_currency, to_currency, rate)
    return ConvertOut(
        amount=money.to_decimal(amount),
        from_currency=from_currency.value,
        to_currency=to_currency.value,
        rate=rate,
    )


@router.post("/fx/format", response_model=FormatOut)
def format_endpoint(
    payload: FormatIn,
    service: CurrencyService = Depends(get_currency_service),
) -> FormatOut:
    currency = money.parse_currency(payload.currency) if payload.currency else None
    return FormatOut(text=service.format_amount(payload.amount, currency, payload.rate))
