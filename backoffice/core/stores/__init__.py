from __future__ import annotations

from fastapi import Request

from backoffice.core.config import Settings
from backoffice.core.db import AsyncSessionLocal, engine
from backoffice.core.stores.base import (
    CURRENT_SUBSCRIPTION_STATUSES,
    OrganizationRecord,
    OrganizationStatus,
    SubscriptionRecord,
    SubscriptionStatus,
    TenantStore,
    UsageSnapshot,
)
from backoffice.core.stores.memory import InMemoryTenantStore
from backoffice.core.stores.sql import SqlTenantStore


def build_tenant_store(config: Settings) -> TenantStore:
    if config.database_backend == "memory":
        return InMemoryTenantStore()
    return SqlTenantStore(AsyncSessionLocal, engine=engine)


def get_tenant_store(request: Request) -> TenantStore:
    return request.app.state.tenant_store


__all__ = [
    "CURRENT_SUBSCRIPTION_STATUSES",
    "InMemoryTenantStore",
    "OrganizationRecord",
    "OrganizationStatus",
    "SqlTenantStore",
    "SubscriptionRecord",
    "SubscriptionStatus",
    "TenantStore",
    "UsageSnapshot",
    "build_tenant_store",
    "get_tenant_store",
]
