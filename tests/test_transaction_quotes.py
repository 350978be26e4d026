from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from retail_fx.core.db import SessionLocal
from retail_fx.core.errors import InvalidArgumentError
from retail_fx.modules.fx.models import ExchangeRate
from retail_fx.modules.fx.money import Currency
from retail_fx.modules.fx.service import CurrencyService, set_default_rate
from retail_fx.modules.transactions.service import (
    ReturnLine,
    SaleLine,
    build_monetary_amount,
    price_sale,
    quote_expense,
    quote_payment,
    quote_return,
)


def test_syp_sale_prices_lines_with_ceiling_and_books_usd_total():
    with SessionLocal() as session:
        service = CurrencyService(session)
        quote = price_sale(
            service,
            [SaleLine(quantity=2, base_unit_price_usd="4.37"), SaleLine(1, Decimal("4.50"))],
            "SYP",
            rate_override="13000",
        )

    assert [line.unit_price for line in quote.lines] == [Decimal("56900"), Decimal("58500")]
    assert [line.subtotal for line in quote.lines] == [Decimal("113800"), Decimal("58500")]
    assert quote.total == Decimal("172300")

    amount = quote.amount
    assert amount.currency == Currency.SYP
    assert amount.syp_amount == Decimal("172300")
    assert amount.transaction_exchange_rate == Decimal("13000")
    assert abs(amount.base_amount_usd * amount.transaction_exchange_rate - quote.total) < Decimal(
        "1e-18"
    )


def test_usd_sale_keeps_base_prices_and_carries_no_rate():
    with SessionLocal() as session:
        quote = price_sale(
            CurrencyService(session), [SaleLine(3, "4.37")], Currency.USD, rate_override="abc"
        )

    assert quote.lines[0].unit_price == Decimal("4.37")
    assert quote.total == Decimal("13.11")
    assert quote.amount.base_amount_usd == Decimal("13.11")
    assert quote.amount.transaction_exchange_rate is None
    assert quote.amount.syp_amount is None


def test_sale_without_override_uses_current_rate():
    with SessionLocal() as session:
        set_default_rate(session, 15000)
        quote = price_sale(CurrencyService(session), [SaleLine(1, "1.01")], "SYP")

    assert quote.amount.transaction_exchange_rate == Decimal("15000")
    assert quote.lines[0].unit_price == Decimal("15200")


def test_back_dated_sale_suggests_rate_in_effect_on_that_day():
    with SessionLocal() as session:
        session.add_all(
            [
                ExchangeRate(
                    rate=Decimal("13000"),
                    is_default=False,
                    created_at=datetime(2026, 1, 1, tzinfo=UTC),
                ),
                ExchangeRate(
                    rate=Decimal("15000"),
                    is_default=True,
                    created_at=datetime(2026, 3, 1, tzinfo=UTC),
                ),
            ]
        )
        session.commit()
        service = CurrencyService(session)

        quote = price_sale(service, [SaleLine(1, "1")], "SYP", sale_date=date(2026, 2, 10))
        assert quote.amount.transaction_exchange_rate == Decimal("13000")

        overridden = price_sale(
            service,
            [SaleLine(1, "1")],
            "SYP",
            sale_date=date(2026, 2, 10),
            rate_override=14000,
        )
        assert overridden.amount.transaction_exchange_rate == Decimal("14000")


def test_sale_rejects_bad_input():
    with SessionLocal() as session:
        service = CurrencyService(session)
        with pytest.raises(InvalidArgumentError):
            price_sale(service, [], "SYP")
        with pytest.raises(InvalidArgumentError):
            price_sale(service, [SaleLine(0, "1")], "USD")
        with pytest.raises(InvalidArgumentError):
            price_sale(service, [SaleLine(1, "-1")], "USD")
        with pytest.raises(InvalidArgumentError):
            price_sale(service, [SaleLine(1, "1")], "SYP", rate_override="abc")
        with pytest.raises(InvalidArgumentError):
            price_sale(service, [SaleLine(1, "1")], "EUR")


def test_syp_return_keeps_sold_unit_prices():
    with SessionLocal() as session:
        quote = quote_return(
            CurrencyService(session),
            [ReturnLine(quantity=1, unit_price="56900"), ReturnLine(2, "58500")],
            "SYP",
            rate_override=13000,
        )

    assert quote.total == Decimal("173900")
    assert quote.amount.syp_amount == Decimal("173900")
    assert quote.amount.base_amount_usd == Decimal("173900") / Decimal("13000")


def test_expense_in_syp_converts_with_transaction_rate():
    with SessionLocal() as session:
        service = CurrencyService(session)
        amount = quote_expense(service, "130000", "SYP", rate_override="13000")
        assert amount.base_amount_usd == Decimal("10")
        assert amount.as_record_fields() == {
            "amount": Decimal("10"),
            "currency": "SYP",
            "transaction_exchange_rate": Decimal("13000"),
            "syp_amount": Decimal("130000"),
        }

        usd = quote_expense(service, "25.50", "USD")
        assert usd.as_record_fields("total_amount") == {
            "total_amount": Decimal("25.50"),
            "currency": "USD",
            "transaction_exchange_rate": None,
            "syp_amount": None,
        }

        with pytest.raises(InvalidArgumentError):
            quote_expense(service, 0, "USD")


def test_full_syp_payment_of_remaining_balance():
    with SessionLocal() as session:
        quote = quote_payment(
            CurrencyService(session),
            "56810",
            "SYP",
            remaining_balance_usd="4.37",
            payment_date=date(2026, 5, 2),
            sale_date=date(2026, 5, 1),
            today=date(2026, 5, 3),
            rate_override="13000",
        )

    assert quote.amount.base_amount_usd == Decimal("4.37")
    assert quote.is_full_payment is True
    assert quote.remaining_after_usd == Decimal("0.00")


def test_syp_payment_within_a_cent_books_the_remaining_balance():
    with SessionLocal() as session:
        quote = quote_payment(
            CurrencyService(session),
            "56811",
            "SYP",
            remaining_balance_usd="4.37",
            payment_date=date(2026, 5, 2),
            sale_date=date(2026, 5, 1),
            today=date(2026, 5, 3),
            rate_override="13000",
        )

    assert quote.is_full_payment is True
    assert quote.amount.base_amount_usd == Decimal("4.37")
    assert quote.amount.syp_amount == Decimal("56811")
    assert quote.remaining_after_usd == Decimal("0.00")


def test_usd_payment_is_compared_without_cent_rounding():
    with SessionLocal() as session:
        quote = quote_payment(
            CurrencyService(session),
            "4.369",
            "USD",
            remaining_balance_usd="4.37",
            payment_date=date(2026, 5, 1),
            sale_date=date(2026, 5, 1),
            today=date(2026, 5, 1),
        )

    assert quote.is_full_payment is False
    assert quote.amount.base_amount_usd == Decimal("4.369")
    assert quote.remaining_after_usd == Decimal("0.001")


def test_partial_usd_payment():
    with SessionLocal() as session:
        quote = quote_payment(
            CurrencyService(session),
            "1.50",
            "USD",
            remaining_balance_usd="4.37",
            payment_date=date(2026, 5, 1),
            sale_date=date(2026, 5, 1),
            today=date(2026, 5, 1),
        )

    assert quote.is_full_payment is False
    assert quote.remaining_after_usd == Decimal("2.87")
    assert quote.amount.transaction_exchange_rate is None


@pytest.mark.parametrize(
    ("amount", "payment_date", "message"),
    [
        ("0", date(2026, 5, 2), "greater than zero"),
        ("5.00", date(2026, 5, 2), "remaining balance"),
        ("4.374", date(2026, 5, 2), "remaining balance"),
        ("1.00", date(2026, 4, 30), "before the sale date"),
        ("1.00", date(2026, 5, 4), "in the future"),
    ],
)
def test_payment_validation(amount, payment_date, message):
    with SessionLocal() as session:
        with pytest.raises(InvalidArgumentError, match=message):
            quote_payment(
                CurrencyService(session),
                amount,
                "USD",
                remaining_balance_usd="4.37",
                payment_date=payment_date,
                sale_date=date(2026, 5, 1),
                today=date(2026, 5, 3),
            )


def test_build_monetary_amount_requires_rate_for_syp():
    with pytest.raises(InvalidArgumentError):
        build_monetary_amount(100, "SYP")
    with pytest.raises(InvalidArgumentError):
        build_monetary_amount(100, "SYP", 0)
