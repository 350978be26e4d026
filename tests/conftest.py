from __future__ import annotations

import os

import pytest

# Set env before any retail_fx imports (settings/engine are created at import time).
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///./.retail_fx_test.db")


@pytest.fixture(autouse=True)
def _reset_db() -> None:
    import retail_fx.models  # noqa: F401
    from retail_fx.core.db import engine
    from retail_fx.core.models import Base

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)

    yield
