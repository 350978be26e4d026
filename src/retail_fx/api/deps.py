from __future__ import annotations

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from retail_fx.core.db import db_session
from retail_fx.modules.fx.service import CurrencyService


def get_currency_service(
    session: Session = Depends(db_session),
    x_display_currency: str | None = Header(default=None),
) -> CurrencyService:
    """Display currency comes from ``X-Display-Currency``, else from settings."""
    return CurrencyService(session, display_currency=x_display_currency or None)
