from backoffice.core.repositories.base import OrganizationContextMissingError, OrganizationRepository
from backoffice.core.repositories.projects import ProjectRepository
from backoffice.core.repositories.users import UserRepository

__all__ = [
    "OrganizationContextMissingError",
    "OrganizationRepository",
    "ProjectRepository",
    "UserRepository",
]
