from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from backoffice.core.stores.base import (
    CURRENT_SUBSCRIPTION_STATUSES,
    OrganizationRecord,
    SubscriptionRecord,
    UsageSnapshot,
)
from backoffice.models.organization import Organization
from backoffice.models.project import Project
from backoffice.models.subscription import Subscription, SubscriptionPlan
from backoffice.models.usage_record import UsageRecord
from backoffice.models.user import User


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def organization_to_record(organization: Organization) -> OrganizationRecord:
    return OrganizationRecord(
        id=organization.id,
        slug=organization.slug,
        status=organization.status,
        name=organization.name,
        domain=organization.domain,
        trial_ends_at=_as_utc(organization.trial_ends_at),
    )


def subscription_to_record(subscription: Subscription, plan: SubscriptionPlan) -> SubscriptionRecord:
    return SubscriptionRecord(
        id=subscription.id,
        organization_id=subscription.organization_id,
        status=subscription.status,
        plan_name=plan.name,
        created_at=_as_utc(subscription.created_at),
        features=tuple(plan.features or ()),
        max_users=plan.max_users,
        max_projects=plan.max_projects,
        max_storage_gb=plan.max_storage_gb,
    )


class SqlTenantStore:
    """Tenant store over SQLAlchemy; serves both PostgreSQL and single-file SQLite."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._engine = engine

    async def _fetch_organization(self, *criteria: object) -> OrganizationRecord | None:
        async with self._session_factory() as session:
            organization = await session.scalar(select(Organization).where(*criteria).limit(1))
        if organization is None:
            return None
        return organization_to_record(organization)

    async def get_organization_by_id(self, organization_id: int) -> OrganizationRecord | None:
        return await self._fetch_organization(Organization.id == organization_id)

    async def get_organization_by_slug(self, slug: str) -> OrganizationRecord | None:
        return await self._fetch_organization(Organization.slug == slug)

    async def get_active_organization_by_domain(self, domain: str) -> OrganizationRecord | None:
        return await self._fetch_organization(
            Organization.domain == domain,
            Organization.status == "active",
        )

    async def get_current_subscription(self, organization_id: int) -> SubscriptionRecord | None:
        stmt = (
            select(Subscription, SubscriptionPlan)
            .join(SubscriptionPlan, Subscription.plan_id == SubscriptionPlan.id)
            .where(
                Subscription.organization_id == organization_id,
                Subscription.status.in_(CURRENT_SUBSCRIPTION_STATUSES),
            )
            .order_by(Subscription.created_at.desc())
            .limit(1)
        )
        async with self._session_factory() as session:
            row = (await session.execute(stmt)).first()
        if row is None:
            return None
        subscription, plan = row
        return subscription_to_record(subscription, plan)

    async def get_usage(self, organization_id: int) -> UsageSnapshot:
        async with self._session_factory() as session:
            users = await session.scalar(
                select(func.count(User.id)).where(User.organization_id == organization_id)
            )
            projects = await session.scalar(
                select(func.count(Project.id)).where(Project.organization_id == organization_id)
            )
            storage_gb = await session.scalar(
                select(UsageRecord.storage_used_gb)
                .where(
                    UsageRecord.organization_id == organization_id,
                    UsageRecord.period == "daily",
                )
                .order_by(UsageRecord.recorded_on.desc())
                .limit(1)
            )
        return UsageSnapshot(
            users=int(users or 0),
            projects=int(projects or 0),
            storage_gb=float(storage_gb or 0),
        )

    async def health_check(self) -> bool:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
