from backoffice.schemas.organization import (
    ResourceUsageResponse,
    SubscriptionResponse,
    TenantSummaryResponse,
    UsageResponse,
)
from backoffice.schemas.project import ProjectCreateRequest, ProjectResponse
from backoffice.schemas.system import HealthResponse
from backoffice.schemas.user import UserCreateRequest, UserResponse

__all__ = [
    "TenantSummaryResponse",
    "SubscriptionResponse",
    "ResourceUsageResponse",
    "UsageResponse",
    "ProjectCreateRequest",
    "ProjectResponse",
    "UserCreateRequest",
    "UserResponse",
    "HealthResponse",
]
