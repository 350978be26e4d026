from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends

from retail_fx.api.deps import get_currency_service
from retail_fx.modules.fx.service import CurrencyService
from retail_fx.modules.transactions.schemas import (
    ExpenseQuoteIn,
    LineItemsQuoteOut,
    MonetaryAmountOut,
    PaymentQuoteIn,
    PaymentQuoteOut,
    PricedLineOut,
    ReturnQuoteIn,
    SaleQuoteIn,
)
from retail_fx.modules.transactions.service import (
    LineItemsQuote,
    MonetaryAmount,
    ReturnLine,
    SaleLine,
    price_sale,
    quote_expense,
    quote_payment,
    quote_return,
)

router = APIRouter(tags=["transactions"])


@router.post("/sales/quote", response_model=LineItemsQuoteOut)
def sale_quote_endpoint(
    payload: SaleQuoteIn,
    service: CurrencyService = Depends(get_currency_service),
) -> LineItemsQuoteOut:
    quote = price_sale(
        service,
        [SaleLine(**line.model_dump()) for line in payload.lines],
        payload.currency,
        rate_override=payload.transaction_exchange_rate,
        sale_date=payload.sale_date,
    )
    return _line_items_out(service, quote)


@router.post("/returns/quote", response_model=LineItemsQuoteOut)
def return_quote_endpoint(
    payload: ReturnQuoteIn,
    service: CurrencyService = Depends(get_currency_service),
) -> LineItemsQuoteOut:
    quote = quote_return(
        service,
        [ReturnLine(**line.model_dump()) for line in payload.lines],
        payload.currency,
        rate_override=payload.transaction_exchange_rate,
        return_date=payload.return_date,
    )
    return _line_items_out(service, quote)


@router.post("/expenses/quote", response_model=MonetaryAmountOut)
def expense_quote_endpoint(
    payload: ExpenseQuoteIn,
    service: CurrencyService = Depends(get_currency_service),
) -> MonetaryAmountOut:
    amount = quote_expense(
        service,
        payload.amount,
        payload.currency,
        rate_override=payload.transaction_exchange_rate,
        expense_date=payload.expense_date,
    )
    return _amount_out(service, amount)


@router.post("/payments/quote", response_model=PaymentQuoteOut)
def payment_quote_endpoint(
    payload: PaymentQuoteIn,
    service: CurrencyService = Depends(get_currency_service),
) -> PaymentQuoteOut:
    quote = quote_payment(
        service,
        payload.amount,
        payload.currency,
        remaining_balance_usd=payload.remaining_balance_usd,
        payment_date=payload.payment_date,
        sale_date=payload.sale_date,
        rate_override=payload.transaction_exchange_rate,
    )
    return PaymentQuoteOut(
        amount=_amount_out(service, quote.amount),
        is_full_payment=quote.is_full_payment,
        remaining_after_usd=quote.remaining_after_usd,
    )


def _amount_out(service: CurrencyService, amount: MonetaryAmount) -> MonetaryAmountOut:
    return MonetaryAmountOut(
        base_amount_usd=amount.base_amount_usd,
        currency=amount.currency.value,
        transaction_exchange_rate=amount.transaction_exchange_rate,
        syp_amount=amount.syp_amount,
        display=service.format_amount(
            amount.base_amount_usd, amount.currency, amount.transaction_exchange_rate
        ),
    )


def _line_items_out(service: CurrencyService, quote: LineItemsQuote) -> LineItemsQuoteOut:
    return LineItemsQuoteOut(
        lines=[PricedLineOut(**asdict(line)) for line in quote.lines],
        total=quote.total,
        amount=_amount_out(service, quote.amount),
    )
