from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: str = "dev"

    database_url: str = "sqlite:///./retail_fx.db"

    # Used until an operator records the first rate.
    bootstrap_exchange_rate: Decimal = Decimal("13000")
    default_display_currency: Literal["USD", "SYP"] = "USD"
    rate_history_limit: int = 50


settings = Settings()
