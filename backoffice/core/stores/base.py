from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Final, Literal, Protocol

OrganizationStatus = Literal["active", "trial", "suspended", "cancelled"]
SubscriptionStatus = Literal["active", "trial", "cancelled", "past_due", "paused"]

CURRENT_SUBSCRIPTION_STATUSES: Final[tuple[str, ...]] = ("active", "trial")


@dataclass(frozen=True, slots=True)
class OrganizationRecord:
    id: int
    slug: str
    status: OrganizationStatus
    name: str = ""
    domain: str | None = None
    trial_ends_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class SubscriptionRecord:
    id: int
    organization_id: int
    status: SubscriptionStatus
    plan_name: str
    created_at: datetime
    features: tuple[str, ...] = ()
    max_users: int | None = None
    max_projects: int | None = None
    max_storage_gb: float | None = None


@dataclass(frozen=True, slots=True)
class UsageSnapshot:
    users: int = 0
    projects: int = 0
    storage_gb: float = 0.0


class TenantStore(Protocol):
    async def get_organization_by_id(self, organization_id: int) -> OrganizationRecord | None: ...

    async def get_organization_by_slug(self, slug: str) -> OrganizationRecord | None: ...

    async def get_active_organization_by_domain(self, domain: str) -> OrganizationRecord | None: ...

    async def get_current_subscription(self, organization_id: int) -> SubscriptionRecord | None: ...

    async def get_usage(self, organization_id: int) -> UsageSnapshot: ...

    async def health_check(self) -> bool: ...

    async def close(self) -> None: ...
