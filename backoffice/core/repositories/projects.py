from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.repositories.base import OrganizationRepository
from backoffice.models.project import Project


class ProjectRepository(OrganizationRepository[Project]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session, model=Project)
