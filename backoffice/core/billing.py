from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Final, Literal

from fastapi import Depends, status

from backoffice.core.errors import TenantError
from backoffice.core.stores import TenantStore, get_tenant_store
from backoffice.core.stores.base import SubscriptionRecord, UsageSnapshot
from backoffice.core.tenant import TenantContext, get_tenant_context

logger = logging.getLogger(__name__)

LimitedResource = Literal["users", "projects", "storage"]

ALL_FEATURES: Final = "all"
NEAR_LIMIT_PERCENT: Final = 80.0


@dataclass(frozen=True, slots=True)
class ResourceLimit:
    code: str
    label: str
    unit: str = ""


RESOURCE_LIMITS: Final[dict[str, ResourceLimit]] = {
    "users": ResourceLimit(code="USER_LIMIT_REACHED", label="User"),
    "projects": ResourceLimit(code="PROJECT_LIMIT_REACHED", label="Project"),
    "storage": ResourceLimit(code="STORAGE_LIMIT_REACHED", label="Storage", unit="GB"),
}


def resource_cap(subscription: SubscriptionRecord, resource: LimitedResource) -> float | None:
    if resource == "users":
        return subscription.max_users
    if resource == "projects":
        return subscription.max_projects
    return subscription.max_storage_gb


def resource_usage(usage: UsageSnapshot, resource: LimitedResource) -> float:
    if resource == "users":
        return usage.users
    if resource == "projects":
        return usage.projects
    return usage.storage_gb


def _format_cap(cap: float) -> str:
    return str(int(cap)) if float(cap).is_integer() else str(cap)


def require_active_subscription(tenant: TenantContext) -> SubscriptionRecord:
    subscription = tenant.subscription
    if subscription is None or subscription.status not in ("active", "trial"):
        raise TenantError(
            status.HTTP_402_PAYMENT_REQUIRED,
            "SUBSCRIPTION_REQUIRED",
            "Active subscription required",
        )
    return subscription


def enforce_usage_limit(
    resource: LimitedResource,
    usage: UsageSnapshot,
    subscription: SubscriptionRecord,
) -> None:
    """Raise when adding one more unit of ``resource`` would exceed the plan cap.

    A missing cap means the plan does not limit the resource.
    """
    cap = resource_cap(subscription, resource)
    if cap is None:
        return

    if resource_usage(usage, resource) >= cap:
        limit = RESOURCE_LIMITS[resource]
        raise TenantError(
            status.HTTP_402_PAYMENT_REQUIRED,
            limit.code,
            f"{limit.label} limit reached ({_format_cap(cap)}{limit.unit}). Please upgrade your plan.",
        )


def check_subscription_limits(
    resource: LimitedResource,
) -> Callable[..., Awaitable[TenantContext | None]]:
    if resource not in RESOURCE_LIMITS:
        raise ValueError(f"Unknown limited resource: {resource}")

    async def _enforce(
        tenant: TenantContext | None = Depends(get_tenant_context),
        store: TenantStore = Depends(get_tenant_store),
    ) -> TenantContext | None:
        if tenant is None:
            return None

        try:
            subscription = require_active_subscription(tenant)
            # Read-then-decide: concurrent requests may both pass at cap - 1.
            usage = await store.get_usage(tenant.organization_id)
            enforce_usage_limit(resource, usage, subscription)
        except TenantError:
            raise
        except Exception as exc:
            logger.exception(
                "Subscription limits check failed for organization=%s resource=%s",
                tenant.organization_id,
                resource,
            )
            raise TenantError(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "LIMITS_CHECK_ERROR",
                "Failed to check subscription limits",
            ) from exc

        return tenant

    return _enforce


def has_feature(tenant: TenantContext | None, feature: str) -> bool:
    if tenant is None:
        return False
    return feature in tenant.features or ALL_FEATURES in tenant.features


def require_feature(feature: str) -> Callable[..., Awaitable[TenantContext | None]]:
    async def _dependency(
        tenant: TenantContext | None = Depends(get_tenant_context),
    ) -> TenantContext | None:
        if tenant is None:
            return None
        if not has_feature(tenant, feature):
            raise TenantError(
                status.HTTP_403_FORBIDDEN,
                "FEATURE_NOT_AVAILABLE",
                f"Feature '{feature}' is not included in your plan",
            )
        return tenant

    return _dependency


@dataclass(frozen=True, slots=True)
class ResourceUsage:
    current: float
    limit: float | None
    remaining: float | None
    percentage: float
    is_near_limit: bool
    is_at_limit: bool


def summarize_usage(
    resource: LimitedResource,
    usage: UsageSnapshot,
    subscription: SubscriptionRecord | None,
) -> ResourceUsage:
    current = resource_usage(usage, resource)
    limit = resource_cap(subscription, resource) if subscription is not None else None
    if limit is None:
        return ResourceUsage(
            current=current,
            limit=None,
            remaining=None,
            percentage=0.0,
            is_near_limit=False,
            is_at_limit=False,
        )

    percentage = (current / limit) * 100 if limit > 0 else 0.0
    return ResourceUsage(
        current=current,
        limit=limit,
        remaining=max(0, limit - current),
        percentage=round(percentage, 2),
        is_near_limit=percentage >= NEAR_LIMIT_PERCENT,
        is_at_limit=percentage >= 100,
    )
