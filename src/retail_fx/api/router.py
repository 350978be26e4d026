from __future__ import annotations

from fastapi import APIRouter

from retail_fx.modules.fx.api import router as fx_router
from retail_fx.modules.transactions.api import router as transactions_router

router = APIRouter()

router.include_router(fx_router, prefix="/api")
router.include_router(transactions_router, prefix="/api")


@router.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}
