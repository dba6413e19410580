from __future__ import annotations

import dataclasses
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException

from backoffice.core.errors import TenantError
from backoffice.core.tenant import (
    TenantContext,
    build_tenant_context,
    check_organization_status,
    require_tenant_context,
)
from tests.factories import NOW, organization, seeded_store, subscription, user


@pytest.mark.asyncio
async def test_build_tenant_context_copies_subscription_features() -> None:
    store = seeded_store()
    current_user = user()

    context = await build_tenant_context(store, organization(1, "acme"), current_user)

    assert context.organization_id == 1
    assert context.organization_slug == "acme"
    assert context.subscription is not None
    assert context.subscription.plan_name == "Professional"
    assert context.features == ("projects", "invoices", "expenses")
    assert context.user is current_user


@pytest.mark.asyncio
async def test_build_tenant_context_without_subscription() -> None:
    store = seeded_store()

    context = await build_tenant_context(store, organization(99, "lonely"), None)

    assert context.subscription is None
    assert context.features == ()


@pytest.mark.asyncio
async def test_build_tenant_context_degrades_on_store_error() -> None:
    store = seeded_store()
    store.get_current_subscription = AsyncMock(side_effect=RuntimeError("database down"))

    context = await build_tenant_context(store, organization(1, "acme"), None)

    assert context.organization_id == 1
    assert context.subscription is None
    assert context.features == ()


@pytest.mark.asyncio
async def test_current_subscription_is_latest_active_or_trial() -> None:
    store = seeded_store()
    store.add_subscription(subscription(1, "trial", id=10, plan_name="Starter", created_at=NOW))
    store.add_subscription(
        subscription(1, "cancelled", id=11, plan_name="Enterprise", created_at=NOW + timedelta(days=1))
    )

    context = await build_tenant_context(store, organization(1, "acme"), None)

    assert context.subscription is not None
    assert context.subscription.id == 10


def test_tenant_context_is_immutable() -> None:
    context = TenantContext(organization_id=1, organization_slug="acme", subscription=None, user=None)

    with pytest.raises(dataclasses.FrozenInstanceError):
        context.organization_id = 2  # type: ignore[misc]


@pytest.mark.parametrize(
    ("status", "code", "status_code"),
    [
        ("suspended", "TENANT_SUSPENDED", 403),
        ("cancelled", "TENANT_CANCELLED", 403),
    ],
)
def test_status_gate_rejects_inactive_organizations(status: str, code: str, status_code: int) -> None:
    with pytest.raises(TenantError) as exc:
        check_organization_status(organization(status=status), now=NOW)

    assert exc.value.code == code
    assert exc.value.status_code == status_code


def test_status_gate_rejects_expired_trial() -> None:
    expired = organization(status="trial", trial_ends_at=NOW - timedelta(seconds=1))

    with pytest.raises(TenantError) as exc:
        check_organization_status(expired, now=NOW)

    assert exc.value.code == "TRIAL_EXPIRED"
    assert exc.value.status_code == 402


def test_status_gate_allows_running_trial_and_active() -> None:
    check_organization_status(organization(status="trial", trial_ends_at=NOW + timedelta(hours=1)), now=NOW)
    check_organization_status(organization(status="trial", trial_ends_at=None), now=NOW)
    check_organization_status(organization(status="active"), now=NOW)


def test_status_gate_treats_naive_trial_end_as_utc() -> None:
    naive_end = (NOW - timedelta(minutes=5)).replace(tzinfo=None)

    with pytest.raises(TenantError):
        check_organization_status(organization(status="trial", trial_ends_at=naive_end), now=NOW)


@pytest.mark.asyncio
async def test_require_tenant_context() -> None:
    context = TenantContext(organization_id=1, organization_slug="acme", subscription=None, user=None)
    assert await require_tenant_context(context) is context

    with pytest.raises(HTTPException) as exc:
        await require_tenant_context(None)
    assert exc.value.status_code == 400
    assert exc.value.code == "TENANT_REQUIRED"


def test_tenant_error_payload_shape() -> None:
    error = TenantError(403, "TENANT_SUSPENDED", "Organization account is suspended")

    assert error.payload() == {
        "success": False,
        "message": "Organization account is suspended",
        "code": "TENANT_SUSPENDED",
    }
