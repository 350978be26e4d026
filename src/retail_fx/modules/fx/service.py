from __future__ import annotations

import logging
from datetime import UTC, date, datetime, time
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from retail_fx.core.config import Settings
from retail_fx.core.config import settings as app_settings
from retail_fx.core.db import backend_call
from retail_fx.core.errors import ConflictError, NotFoundError
from retail_fx.core.logging import get_logger, log_event
from retail_fx.modules.fx import money
from retail_fx.modules.fx.models import ExchangeRate
from retail_fx.modules.fx.money import Currency, Number

logger = get_logger(__name__)


class RateNotFoundError(NotFoundError):
    pass


def get_current_rate(session: Session) -> ExchangeRate:
    with backend_call(session, "fx.rate.current"):
        fx = session.scalar(
            select(ExchangeRate)
            .where(ExchangeRate.is_default.is_(True))
            .order_by(ExchangeRate.created_at.desc())
            .limit(1)
        )
    if not fx:
        raise RateNotFoundError("No default exchange rate has been set")
    return fx


def get_rate_as_of(session: Session, at: datetime) -> ExchangeRate:
    at = _as_utc(at)
    with backend_call(session, "fx.rate.as_of"):
        fx = session.scalar(
            select(ExchangeRate)
            .where(ExchangeRate.created_at <= at)
            .order_by(ExchangeRate.created_at.desc())
            .limit(1)
        )
    if not fx:
        raise RateNotFoundError(f"No exchange rate recorded on or before {at.isoformat()}")
    return fx


def list_rates(session: Session, *, limit: int = 50) -> list[ExchangeRate]:
    with backend_call(session, "fx.rate.list"):
        return list(
            session.scalars(
                select(ExchangeRate).order_by(ExchangeRate.created_at.desc()).limit(limit)
            )
        )


def set_default_rate(session: Session, rate: Number) -> ExchangeRate:
    rate = money.parse_rate(rate)

    fx = ExchangeRate(rate=rate, is_default=True)
    try:
        with backend_call(session, "fx.rate.set"):
            # Clear and insert commit together, so readers never see zero or two defaults.
            session.execute(
                update(ExchangeRate)
                .where(ExchangeRate.is_default.is_(True))
                .values(is_default=False)
            )
            session.add(fx)
            session.commit()
            session.refresh(fx)
    except IntegrityError as e:
        session.rollback()
        log_event(logger, "fx.rate.conflict", level=logging.WARNING, rate=str(rate))
        raise ConflictError("The exchange rate was changed concurrently, reload and retry") from e

    log_event(logger, "fx.rate.set", rate=str(rate), exchange_rate_id=str(fx.id))
    return fx


class CurrencyService:
    """
    Currency operations for one session of work (an HTTP request, a script run).

    Holds a cached copy of the current default rate, loaded on first use and refreshed
    explicitly. Construct one per session and pass it to whatever needs it.
    """

    def __init__(
        self,
        session: Session,
        *,
        config: Settings | None = None,
        display_currency: Currency | str | None = None,
    ):
        self._session = session
        self._settings = config or app_settings
        self.display_currency = money.parse_currency(
            display_currency or self._settings.default_display_currency
        )
        self._current_rate: Decimal | None = None
        self.rate_is_fallback = False

    @property
    def current_rate(self) -> Decimal:
        if self._current_rate is None:
            return self.refresh()
        return self._current_rate

    def get_current_rate(self) -> Decimal:
        return self.current_rate

    def refresh(self) -> Decimal:
        try:
            fx = get_current_rate(self._session)
        except RateNotFoundError:
            rate = money.parse_rate(self._settings.bootstrap_exchange_rate)
            log_event(
                logger,
                "fx.rate.bootstrap_fallback",
                level=logging.WARNING,
                rate=str(rate),
            )
            self._current_rate = rate
            self.rate_is_fallback = True
            return rate

        self._current_rate = fx.rate
        self.rate_is_fallback = False
        return fx.rate

    def set_default_rate(self, rate: Number) -> ExchangeRate:
        fx = set_default_rate(self._session, rate)
        self._current_rate = fx.rate
        self.rate_is_fallback = False
        return fx

    def resolve_rate(self, rate_override: Number | None = None) -> Decimal:
        if rate_override is None:
            return self.current_rate
        if isinstance(rate_override, str) and not rate_override.strip():
            return self.current_rate
        return money.parse_rate(rate_override)

    def convert(
        self,
        amount: Number,
        from_currency: Currency | str,
        to_currency: Currency | str,
        rate_override: Number | None = None,
    ) -> Number:
        from_currency = money.parse_currency(from_currency)
        to_currency = money.parse_currency(to_currency)
        if from_currency == to_currency:
            return amount
        return money.convert(amount, from_currency, to_currency, self.resolve_rate(rate_override))

    def format_amount(
        self,
        amount_usd: Number,
        currency: Currency | str | None = None,
        rate_override: Number | None = None,
    ) -> str:
        currency = money.parse_currency(currency or self.display_currency)
        rate = self.resolve_rate(rate_override) if currency == Currency.SYP else None
        return money.format_amount(amount_usd, currency, rate)

    def get_exchange_rate_for_date(self, value: date | datetime) -> Decimal:
        """
        Suggest the rate that was in effect at ``value``.

        A bare date covers the whole day. Falls back to the current rate when nothing
        was recorded that early; the operator may still override the suggestion.
        """
        if isinstance(value, datetime):
            at = value
        else:
            at = datetime.combine(value, time.max, tzinfo=UTC)
        try:
            return get_rate_as_of(self._session, at).rate
        except RateNotFoundError:
            log_event(
                logger,
                "fx.rate.historical_fallback",
                level=logging.DEBUG,
                as_of=at.isoformat(),
            )
            return self.current_rate


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
