from __future__ import annotations

from fastapi import APIRouter, Depends, status

from backoffice.core.auth import require_organization_access
from backoffice.core.billing import summarize_usage
from backoffice.core.errors import TenantError
from backoffice.core.stores import TenantStore, get_tenant_store
from backoffice.core.tenant import TenantContext, require_tenant_context
from backoffice.schemas.organization import (
    ResourceUsageResponse,
    SubscriptionResponse,
    TenantSummaryResponse,
    UsageResponse,
)

router = APIRouter(
    prefix="/organization",
    tags=["organization"],
    dependencies=[Depends(require_tenant_context), Depends(require_organization_access)],
)


@router.get("/current", response_model=TenantSummaryResponse)
async def get_current_organization(
    tenant: TenantContext = Depends(require_tenant_context),
) -> TenantSummaryResponse:
    subscription = tenant.subscription
    return TenantSummaryResponse(
        organization_id=tenant.organization_id,
        organization_slug=tenant.organization_slug,
        plan_name=subscription.plan_name if subscription else None,
        subscription_status=subscription.status if subscription else None,
        features=list(tenant.features),
    )


@router.get("/subscription", response_model=SubscriptionResponse)
async def get_current_subscription(
    tenant: TenantContext = Depends(require_tenant_context),
) -> SubscriptionResponse:
    subscription = tenant.subscription
    if subscription is None:
        raise TenantError(
            status.HTTP_404_NOT_FOUND,
            "SUBSCRIPTION_NOT_FOUND",
            "No active subscription for this organization",
        )

    return SubscriptionResponse(
        id=subscription.id,
        status=subscription.status,
        plan_name=subscription.plan_name,
        features=list(subscription.features),
        max_users=subscription.max_users,
        max_projects=subscription.max_projects,
        max_storage_gb=subscription.max_storage_gb,
        created_at=subscription.created_at,
    )


@router.get("/usage", response_model=UsageResponse)
async def get_usage(
    tenant: TenantContext = Depends(require_tenant_context),
    store: TenantStore = Depends(get_tenant_store),
) -> UsageResponse:
    usage = await store.get_usage(tenant.organization_id)

    def _resource(resource: str) -> ResourceUsageResponse:
        summary = summarize_usage(resource, usage, tenant.subscription)
        return ResourceUsageResponse(
            current=summary.current,
            limit=summary.limit,
            remaining=summary.remaining,
            percentage=summary.percentage,
            is_near_limit=summary.is_near_limit,
            is_at_limit=summary.is_at_limit,
        )

    return UsageResponse(
        users=_resource("users"),
        projects=_resource("projects"),
        storage=_resource("storage"),
    )
