from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from fastapi import Depends, Request, status

from backoffice.core.errors import TenantError
from backoffice.core.stores.base import OrganizationRecord, SubscriptionRecord, TenantStore

if TYPE_CHECKING:
    from backoffice.core.auth import AuthenticatedUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TenantContext:
    organization_id: int
    organization_slug: str
    subscription: SubscriptionRecord | None
    user: AuthenticatedUser | None
    features: tuple[str, ...] = ()


async def build_tenant_context(
    store: TenantStore,
    organization: OrganizationRecord,
    user: AuthenticatedUser | None,
) -> TenantContext:
    """Assemble the request's tenant context for an already loaded organization.

    A failure while loading the subscription degrades to a context without
    subscription or features; the organization identity stays resolved.
    """
    try:
        subscription = await store.get_current_subscription(organization.id)
    except Exception:
        logger.exception("Failed to load subscription for organization=%s", organization.id)
        subscription = None

    return TenantContext(
        organization_id=organization.id,
        organization_slug=organization.slug,
        subscription=subscription,
        user=user,
        features=subscription.features if subscription is not None else (),
    )


def check_organization_status(
    organization: OrganizationRecord,
    now: datetime | None = None,
) -> None:
    if organization.status == "suspended":
        raise TenantError(
            status.HTTP_403_FORBIDDEN,
            "TENANT_SUSPENDED",
            "Organization account is suspended",
        )

    if organization.status == "cancelled":
        raise TenantError(
            status.HTTP_403_FORBIDDEN,
            "TENANT_CANCELLED",
            "Organization account is cancelled",
        )

    if organization.status == "trial" and organization.trial_ends_at is not None:
        current = now or datetime.now(timezone.utc)
        trial_end = organization.trial_ends_at
        if trial_end.tzinfo is None:
            trial_end = trial_end.replace(tzinfo=timezone.utc)
        if trial_end < current:
            raise TenantError(
                status.HTTP_402_PAYMENT_REQUIRED,
                "TRIAL_EXPIRED",
                "Trial period has expired. Please upgrade your subscription.",
            )


def get_tenant_context(request: Request) -> TenantContext | None:
    return getattr(request.state, "tenant", None)


async def require_tenant_context(
    tenant: TenantContext | None = Depends(get_tenant_context),
) -> TenantContext:
    if tenant is None:
        raise TenantError(
            status.HTTP_400_BAD_REQUEST,
            "TENANT_REQUIRED",
            "Organization context required",
        )
    return tenant
