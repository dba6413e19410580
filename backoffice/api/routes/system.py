from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from backoffice.core.config import settings
from backoffice.core.stores import TenantStore, get_tenant_store
from backoffice.schemas.system import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
async def health_check(store: TenantStore = Depends(get_tenant_store)) -> HealthResponse:
    try:
        database_ok = await store.health_check()
    except Exception:
        logger.exception("Store health check failed")
        database_ok = False

    return HealthResponse(
        status="ok" if database_ok else "degraded",
        database_ok=database_ok,
        database_backend=settings.database_backend,
    )


@router.get("/ping")
async def ping() -> dict[str, str]:
    return {"message": "pong"}
