from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from backoffice.core.config import Settings
from backoffice.core.stores import (
    InMemoryTenantStore,
    SqlTenantStore,
    UsageSnapshot,
    build_tenant_store,
)
from backoffice.models import (
    Base,
    Organization,
    Project,
    Subscription,
    SubscriptionPlan,
    UsageRecord,
    User,
)
from tests.factories import NOW, organization, seeded_store, subscription


def test_build_tenant_store_selects_backend() -> None:
    assert isinstance(build_tenant_store(Settings(database_backend="memory")), InMemoryTenantStore)
    assert isinstance(build_tenant_store(Settings(database_backend="postgresql")), SqlTenantStore)


@pytest.mark.asyncio
async def test_memory_store_lookups() -> None:
    store = seeded_store()
    store.add_organization(organization(5, "inactive-domain", "trial", domain="crm.inactive.ma"))

    assert (await store.get_organization_by_id(1)).slug == "acme"  # type: ignore[union-attr]
    assert (await store.get_organization_by_slug("globex")).id == 2  # type: ignore[union-attr]
    assert await store.get_organization_by_slug("missing") is None
    assert (await store.get_active_organization_by_domain("backoffice.globex.com")).id == 2  # type: ignore[union-attr]
    assert await store.get_active_organization_by_domain("crm.inactive.ma") is None
    assert await store.get_usage(1) == UsageSnapshot(users=2, projects=7, storage_gb=4.5)
    assert await store.get_usage(999) == UsageSnapshot()
    assert await store.health_check() is True


@pytest.mark.asyncio
async def test_memory_store_ignores_terminal_subscriptions() -> None:
    store = InMemoryTenantStore(
        subscriptions=[
            subscription(1, "active", id=1, created_at=NOW - timedelta(days=10)),
            subscription(1, "cancelled", id=2, created_at=NOW),
            subscription(1, "trial", id=3, created_at=NOW - timedelta(days=1)),
        ]
    )

    current = await store.get_current_subscription(1)

    assert current is not None
    assert current.id == 3
    assert await store.get_current_subscription(2) is None


async def _seed(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session:
        acme = Organization(name="Acme", slug="acme", status="active", domain="backoffice.acme.ma")
        trial = Organization(name="Trial Co", slug="trial-co", status="trial")
        starter = SubscriptionPlan(
            name="Starter",
            slug="starter",
            features=["invoices"],
            max_users=3,
            max_projects=5,
            max_storage_gb=2.0,
        )
        pro = SubscriptionPlan(
            name="Professional",
            slug="professional",
            features=["invoices", "expenses", "exports"],
            max_users=10,
            max_projects=50,
            max_storage_gb=25.0,
        )
        session.add_all([acme, trial, starter, pro])
        await session.flush()

        session.add_all(
            [
                Subscription(
                    organization_id=acme.id,
                    plan_id=starter.id,
                    status="active",
                    created_at=NOW - timedelta(days=60),
                ),
                Subscription(
                    organization_id=acme.id,
                    plan_id=pro.id,
                    status="active",
                    created_at=NOW - timedelta(days=2),
                ),
                Subscription(
                    organization_id=acme.id,
                    plan_id=starter.id,
                    status="cancelled",
                    created_at=NOW,
                ),
                User(organization_id=acme.id, email="a@acme.ma", name="A", role="admin"),
                User(organization_id=acme.id, email="b@acme.ma", name="B", role="user"),
                User(organization_id=trial.id, email="c@trial.ma", name="C", role="admin"),
                Project(organization_id=acme.id, name="Documentary"),
                UsageRecord(organization_id=acme.id, period="daily", recorded_on=date(2026, 10, 17), storage_used_gb=1.5),
                UsageRecord(organization_id=acme.id, period="daily", recorded_on=date(2026, 10, 18), storage_used_gb=2.25),
                UsageRecord(organization_id=acme.id, period="monthly", recorded_on=date(2026, 10, 19), storage_used_gb=9.0),
            ]
        )
        await session.commit()


@pytest.mark.asyncio
async def test_sql_store_against_sqlite() -> None:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
    await _seed(session_factory)
    store = SqlTenantStore(session_factory, engine=engine)
    try:
        acme = await store.get_organization_by_slug("acme")
        assert acme is not None
        assert acme.status == "active"
        assert (await store.get_organization_by_id(acme.id)) == acme
        assert (await store.get_active_organization_by_domain("backoffice.acme.ma")) == acme
        assert await store.get_active_organization_by_domain("unknown.ma") is None

        current = await store.get_current_subscription(acme.id)
        assert current is not None
        assert current.plan_name == "Professional"
        assert current.features == ("invoices", "expenses", "exports")
        assert current.max_projects == 50
        assert current.created_at.tzinfo is not None

        trial = await store.get_organization_by_slug("trial-co")
        assert trial is not None
        assert await store.get_current_subscription(trial.id) is None

        usage = await store.get_usage(acme.id)
        assert usage == UsageSnapshot(users=2, projects=1, storage_gb=2.25)
        assert await store.get_usage(trial.id) == UsageSnapshot(users=1, projects=0, storage_gb=0.0)

        assert await store.health_check() is True
    finally:
        await store.close()
