from __future__ import annotations

from sqlalchemy import JSON, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.models.base import OrganizationScopedBase, TimestampedBase


class SubscriptionPlan(TimestampedBase):
    __tablename__ = "subscription_plans"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(60), unique=True, nullable=False)
    features: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    max_users: Mapped[int | None] = mapped_column(nullable=True)
    max_projects: Mapped[int | None] = mapped_column(nullable=True)
    max_storage_gb: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)
    is_active: Mapped[bool] = mapped_column(nullable=False, default=True)


class Subscription(OrganizationScopedBase):
    __tablename__ = "subscriptions"

    plan_id: Mapped[int] = mapped_column(ForeignKey("subscription_plans.id"), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="trial")
    billing_cycle: Mapped[str] = mapped_column(String(20), nullable=False, default="monthly")
