"""
Conversion, rounding and display rules for USD/SYP amounts.

Everything here is pure. Rates are SYP per 1 USD. Canonical amounts are USD; rounding
is applied for display and line-item pricing only, never to stored canonical amounts.
"""

from __future__ import annotations

import enum
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, InvalidOperation

from retail_fx.core.errors import InvalidArgumentError, InvalidStateError

CENT = Decimal("0.01")
WHOLE = Decimal("1")
SYP_PRICE_STEP = Decimal("100")


class Currency(str, enum.Enum):
    USD = "USD"
    SYP = "SYP"


Number = Decimal | int | float | str


def parse_currency(value: Currency | str | None) -> Currency:
    if isinstance(value, Currency):
        return value
    code = str(value or "").strip().upper()
    try:
        return Currency(code)
    except ValueError as e:
        raise InvalidArgumentError(f"Unsupported currency: {value!r}") from e


def to_decimal(value: Number, *, field: str = "amount") -> Decimal:
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid {field}: {value!r}")
    try:
        if isinstance(value, Decimal):
            number = value
        elif isinstance(value, float):
            # str() keeps the literal the user typed (19.995, not 19.99499...).
            number = Decimal(str(value))
        elif isinstance(value, str):
            number = Decimal(value.strip().replace(",", ""))
        else:
            number = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Invalid {field}: {value!r}") from e
    if not number.is_finite():
        raise InvalidArgumentError(f"Invalid {field}: {value!r}")
    return number


def parse_rate(value: Number) -> Decimal:
    rate = to_decimal(value, field="exchange rate")
    if rate <= 0:
        raise InvalidArgumentError("Exchange rate must be greater than zero")
    return rate


def convert(
    amount: Number, from_currency: Currency, to_currency: Currency, rate: Number
) -> Number:
    from_currency = parse_currency(from_currency)
    to_currency = parse_currency(to_currency)
    if from_currency == to_currency:
        return amount

    value = to_decimal(amount)
    rate = to_decimal(rate, field="exchange rate")
    if rate <= 0:
        raise InvalidStateError("Cannot convert with a non-positive exchange rate")
    if from_currency == Currency.USD:
        return value * rate
    return value / rate


def round_display_amount(amount: Number, currency: Currency) -> Decimal:
    """USD to cents, SYP to whole pounds; ties round away from zero."""
    step = CENT if parse_currency(currency) == Currency.USD else WHOLE
    return to_decimal(amount).quantize(step, rounding=ROUND_HALF_UP)


def round_line_item_unit_price(syp_amount: Number) -> Decimal:
    """
    Ceiling to the next multiple of 100 SYP.

    Applies only to unit prices converted from USD when a sale line is priced, so
    customer-facing prices end in round hundreds. The result is always >= the input
    and less than 100 above it. Negative inputs use the same ceiling and therefore
    move toward zero (-56810 -> -56800).
    """
    value = to_decimal(syp_amount)
    steps = (value / SYP_PRICE_STEP).to_integral_value(rounding=ROUND_CEILING)
    return steps * SYP_PRICE_STEP


def format_amount(amount_usd: Number, currency: Currency, rate: Number | None = None) -> str:
    currency = parse_currency(currency)
    if currency == Currency.USD:
        value = round_display_amount(amount_usd, Currency.USD)
        sign = "-" if value < 0 else ""
        return f"{sign}${abs(value):.2f}"

    if rate is None:
        raise InvalidArgumentError("An exchange rate is required to display SYP")
    syp = round_display_amount(convert(amount_usd, Currency.USD, Currency.SYP, rate), Currency.SYP)
    sign = "-" if syp < 0 else ""
    return f"{sign}{abs(syp):,.0f} SYP"
