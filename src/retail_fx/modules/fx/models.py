from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, Index, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from retail_fx.core.models import Base, CreatedAt, UUIDPrimaryKey


class ExchangeRate(UUIDPrimaryKey, CreatedAt, Base):
    """SYP per 1 USD. Rows are append-only; only ``is_default`` is ever flipped."""

    __tablename__ = "fx_exchange_rate"

    rate: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    is_default: Mapped[bool] = mapped_column(Boolean, default=False)


# At most one default row, whatever the writers do.
Index(
    "uq_fx_exchange_rate_single_default",
    ExchangeRate.is_default,
    unique=True,
    sqlite_where=ExchangeRate.is_default.is_(True),
    postgresql_where=ExchangeRate.is_default.is_(True),
)
