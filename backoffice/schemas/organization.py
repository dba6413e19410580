from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class TenantSummaryResponse(BaseModel):
    organization_id: int
    organization_slug: str
    plan_name: str | None = None
    subscription_status: str | None = None
    features: list[str]


class SubscriptionResponse(BaseModel):
    id: int
    status: str
    plan_name: str
    features: list[str]
    max_users: int | None = None
    max_projects: int | None = None
    max_storage_gb: float | None = None
    created_at: datetime


class ResourceUsageResponse(BaseModel):
    current: float
    limit: float | None = None
    remaining: float | None = None
    percentage: float
    is_near_limit: bool
    is_at_limit: bool


class UsageResponse(BaseModel):
    users: ResourceUsageResponse
    projects: ResourceUsageResponse
    storage: ResourceUsageResponse
