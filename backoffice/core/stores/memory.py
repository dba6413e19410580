from __future__ import annotations

from collections.abc import Iterable

from backoffice.core.stores.base import (
    CURRENT_SUBSCRIPTION_STATUSES,
    OrganizationRecord,
    SubscriptionRecord,
    UsageSnapshot,
)


class InMemoryTenantStore:
    """Dict-backed tenant store, seeded programmatically."""

    def __init__(
        self,
        organizations: Iterable[OrganizationRecord] = (),
        subscriptions: Iterable[SubscriptionRecord] = (),
        usage: dict[int, UsageSnapshot] | None = None,
    ) -> None:
        self._organizations: dict[int, OrganizationRecord] = {}
        self._subscriptions: list[SubscriptionRecord] = []
        self._usage: dict[int, UsageSnapshot] = dict(usage or {})
        for organization in organizations:
            self.add_organization(organization)
        for subscription in subscriptions:
            self.add_subscription(subscription)

    def add_organization(self, organization: OrganizationRecord) -> None:
        self._organizations[organization.id] = organization

    def add_subscription(self, subscription: SubscriptionRecord) -> None:
        self._subscriptions.append(subscription)

    def set_usage(self, organization_id: int, usage: UsageSnapshot) -> None:
        self._usage[organization_id] = usage

    async def get_organization_by_id(self, organization_id: int) -> OrganizationRecord | None:
        return self._organizations.get(organization_id)

    async def get_organization_by_slug(self, slug: str) -> OrganizationRecord | None:
        for organization in self._organizations.values():
            if organization.slug == slug:
                return organization
        return None

    async def get_active_organization_by_domain(self, domain: str) -> OrganizationRecord | None:
        for organization in self._organizations.values():
            if organization.domain == domain and organization.status == "active":
                return organization
        return None

    async def get_current_subscription(self, organization_id: int) -> SubscriptionRecord | None:
        candidates = [
            subscription
            for subscription in self._subscriptions
            if subscription.organization_id == organization_id
            and subscription.status in CURRENT_SUBSCRIPTION_STATUSES
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda subscription: subscription.created_at)

    async def get_usage(self, organization_id: int) -> UsageSnapshot:
        return self._usage.get(organization_id, UsageSnapshot())

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        return None
