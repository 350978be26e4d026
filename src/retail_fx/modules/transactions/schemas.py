from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from retail_fx.modules.fx.schemas import RawNumber


class MonetaryAmountOut(BaseModel):
    base_amount_usd: Decimal
    currency: str
    transaction_exchange_rate: Decimal | None
    syp_amount: Decimal | None
    display: str


class SaleLineIn(BaseModel):
    quantity: RawNumber
    base_unit_price_usd: RawNumber


class SaleQuoteIn(BaseModel):
    currency: str = "USD"
    transaction_exchange_rate: RawNumber | None = None
    sale_date: date | None = None
    lines: list[SaleLineIn] = Field(default_factory=list)


class ReturnLineIn(BaseModel):
    quantity: RawNumber
    unit_price: RawNumber


class ReturnQuoteIn(BaseModel):
    currency: str = "USD"
    transaction_exchange_rate: RawNumber | None = None
    return_date: date | None = None
    lines: list[ReturnLineIn] = Field(default_factory=list)


class PricedLineOut(BaseModel):
    quantity: Decimal
    unit_price: Decimal
    subtotal: Decimal


class LineItemsQuoteOut(BaseModel):
    lines: list[PricedLineOut]
    total: Decimal
    amount: MonetaryAmountOut


class ExpenseQuoteIn(BaseModel):
    amount: RawNumber
    currency: str = "USD"
    transaction_exchange_rate: RawNumber | None = None
    expense_date: date | None = None


class PaymentQuoteIn(BaseModel):
    amount: RawNumber
    currency: str = "USD"
    transaction_exchange_rate: RawNumber | None = None
    remaining_balance_usd: RawNumber
    payment_date: date
    sale_date: date


class PaymentQuoteOut(BaseModel):
    amount: MonetaryAmountOut
    is_full_payment: bool
    remaining_after_usd: Decimal
