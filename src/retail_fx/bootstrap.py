from __future__ import annotations

from retail_fx.core.config import settings
from retail_fx.core.db import engine
from retail_fx.core.logging import get_logger, log_event
from retail_fx.core.models import Base

logger = get_logger(__name__)


def bootstrap() -> None:
    import retail_fx.models  # noqa: F401

    if settings.environment in {"dev", "test"} and str(settings.database_url).startswith("sqlite"):
        Base.metadata.create_all(engine)
        log_event(logger, "bootstrap.schema.created", environment=settings.environment)
