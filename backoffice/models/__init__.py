from backoffice.models.base import Base, OrganizationScopedBase, TimestampedBase
from backoffice.models.organization import Organization
from backoffice.models.project import Project
from backoffice.models.subscription import Subscription, SubscriptionPlan
from backoffice.models.usage_record import UsageRecord
from backoffice.models.user import User

__all__ = [
    "Base",
    "TimestampedBase",
    "OrganizationScopedBase",
    "Organization",
    "SubscriptionPlan",
    "Subscription",
    "User",
    "Project",
    "UsageRecord",
]
