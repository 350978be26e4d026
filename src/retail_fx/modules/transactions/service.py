from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Any

from retail_fx.core.errors import InvalidArgumentError
from retail_fx.modules.fx import money
from retail_fx.modules.fx.money import Currency, Number
from retail_fx.modules.fx.service import CurrencyService


@dataclass(frozen=True)
class MonetaryAmount:
    """Currency fields a sale, expense, payment or return record carries."""

    base_amount_usd: Decimal
    currency: Currency
    transaction_exchange_rate: Decimal | None = None
    syp_amount: Decimal | None = None

    def as_record_fields(self, amount_field: str = "amount") -> dict[str, Any]:
        return {
            amount_field: self.base_amount_usd,
            "currency": self.currency.value,
            "transaction_exchange_rate": self.transaction_exchange_rate,
            "syp_amount": self.syp_amount,
        }


@dataclass(frozen=True)
class SaleLine:
    quantity: Number
    base_unit_price_usd: Number


@dataclass(frozen=True)
class ReturnLine:
    quantity: Number
    unit_price: Number


@dataclass(frozen=True)
class PricedLine:
    quantity: Decimal
    unit_price: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class LineItemsQuote:
    lines: list[PricedLine]
    total: Decimal
    amount: MonetaryAmount


@dataclass(frozen=True)
class PaymentQuote:
    amount: MonetaryAmount
    is_full_payment: bool
    remaining_after_usd: Decimal


def build_monetary_amount(
    native_amount: Number, currency: Currency | str, rate: Number | None = None
) -> MonetaryAmount:
    currency = money.parse_currency(currency)
    native = money.to_decimal(native_amount)
    if currency == Currency.USD:
        return MonetaryAmount(base_amount_usd=native, currency=currency)

    if rate is None:
        raise InvalidArgumentError("An exchange rate is required for SYP amounts")
    rate = money.parse_rate(rate)
    return MonetaryAmount(
        base_amount_usd=money.convert(native, Currency.SYP, Currency.USD, rate),
        currency=currency,
        transaction_exchange_rate=rate,
        syp_amount=native,
    )


def transaction_rate(
    service: CurrencyService,
    currency: Currency,
    *,
    rate_override: Number | None = None,
    transaction_date: date | None = None,
) -> Decimal | None:
    """
    Rate a transaction is booked at: the operator's override, else the rate in effect
    on the transaction date, else the current rate. USD transactions carry no rate.
    """
    if currency != Currency.SYP:
        return None
    if rate_override is not None and str(rate_override).strip():
        return money.parse_rate(rate_override)
    if transaction_date is not None:
        return service.get_exchange_rate_for_date(transaction_date)
    return service.current_rate


def price_sale(
    service: CurrencyService,
    lines: Sequence[SaleLine],
    currency: Currency | str,
    *,
    rate_override: Number | None = None,
    sale_date: date | None = None,
) -> LineItemsQuote:
    currency = money.parse_currency(currency)
    if not lines:
        raise InvalidArgumentError("Please add at least one product")

    rate = transaction_rate(
        service, currency, rate_override=rate_override, transaction_date=sale_date
    )
    priced: list[PricedLine] = []
    for line in lines:
        quantity = _positive(line.quantity, field="quantity")
        base_price = _non_negative(line.base_unit_price_usd, field="unit price")
        if currency == Currency.SYP:
            unit_price = money.round_line_item_unit_price(
                money.convert(base_price, Currency.USD, Currency.SYP, rate)
            )
        else:
            unit_price = base_price
        priced.append(
            PricedLine(quantity=quantity, unit_price=unit_price, subtotal=quantity * unit_price)
        )
    return _line_items_quote(priced, currency, rate)


def quote_return(
    service: CurrencyService,
    lines: Sequence[ReturnLine],
    currency: Currency | str,
    *,
    rate_override: Number | None = None,
    return_date: date | None = None,
) -> LineItemsQuote:
    """Returned lines keep the unit price they were sold at, in the return's currency."""
    currency = money.parse_currency(currency)
    if not lines:
        raise InvalidArgumentError("Please add at least one item")

    rate = transaction_rate(
        service, currency, rate_override=rate_override, transaction_date=return_date
    )
    priced = []
    for line in lines:
        quantity = _positive(line.quantity, field="quantity")
        unit_price = _non_negative(line.unit_price, field="unit price")
        priced.append(
            PricedLine(quantity=quantity, unit_price=unit_price, subtotal=quantity * unit_price)
        )
    return _line_items_quote(priced, currency, rate)


def quote_expense(
    service: CurrencyService,
    amount: Number,
    currency: Currency | str,
    *,
    rate_override: Number | None = None,
    expense_date: date | None = None,
) -> MonetaryAmount:
    currency = money.parse_currency(currency)
    native = _positive(amount, field="expense amount")
    rate = transaction_rate(
        service, currency, rate_override=rate_override, transaction_date=expense_date
    )
    return build_monetary_amount(native, currency, rate)


def quote_payment(
    service: CurrencyService,
    amount: Number,
    currency: Currency | str,
    *,
    remaining_balance_usd: Number,
    payment_date: date,
    sale_date: date,
    today: date | None = None,
    rate_override: Number | None = None,
) -> PaymentQuote:
    currency = money.parse_currency(currency)
    native = money.to_decimal(amount)
    if native <= 0:
        raise InvalidArgumentError("Payment amount must be greater than zero")
    if payment_date < sale_date:
        raise InvalidArgumentError("Payment date cannot be before the sale date")
    if payment_date > (today or date.today()):
        raise InvalidArgumentError("Payment date cannot be in the future")

    rate = transaction_rate(
        service, currency, rate_override=rate_override, transaction_date=payment_date
    )
    payment = build_monetary_amount(native, currency, rate)

    remaining = money.to_decimal(remaining_balance_usd, field="remaining balance")
    if currency == Currency.USD:
        paid, owed = payment.base_amount_usd, remaining
    else:
        # SYP converts with sub-cent digits, so it is compared in cents.
        paid = money.round_display_amount(payment.base_amount_usd, Currency.USD)
        owed = money.round_display_amount(remaining, Currency.USD)
    if paid > owed:
        raise InvalidArgumentError("Payment amount cannot exceed the remaining balance")

    is_full_payment = paid == owed
    if is_full_payment:
        payment = replace(payment, base_amount_usd=remaining)
    return PaymentQuote(
        amount=payment,
        is_full_payment=is_full_payment,
        remaining_after_usd=owed - paid,
    )


def _line_items_quote(
    priced: list[PricedLine], currency: Currency, rate: Decimal | None
) -> LineItemsQuote:
    total = sum((line.subtotal for line in priced), Decimal("0"))
    return LineItemsQuote(
        lines=priced, total=total, amount=build_monetary_amount(total, currency, rate)
    )


def _positive(value: Number, *, field: str) -> Decimal:
    number = money.to_decimal(value, field=field)
    if number <= 0:
        raise InvalidArgumentError(f"The {field} must be greater than zero")
    return number


def _non_negative(value: Number, *, field: str) -> Decimal:
    number = money.to_decimal(value, field=field)
    if number < 0:
        raise InvalidArgumentError(f"The {field} cannot be negative")
    return number
