from __future__ import annotations

from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from backoffice.core.config import settings
from backoffice.core.context import get_current_organization_id
from backoffice.core.db import apply_rls_organization_context
from backoffice.models.base import OrganizationScopedBase

ModelT = TypeVar("ModelT", bound=OrganizationScopedBase)


class OrganizationContextMissingError(RuntimeError):
    pass


class OrganizationRepository(Generic[ModelT]):
    """Rows owned by the organization resolved for the current request.

    Every read is filtered by that organization and every insert is stamped
    with it; callers cannot choose another one.
    """

    def __init__(self, session: AsyncSession, model: type[ModelT]) -> None:
        self.session = session
        self.model = model

    @property
    def organization_id(self) -> int:
        organization_id = get_current_organization_id()
        if organization_id is None:
            raise OrganizationContextMissingError(
                "Organization context is missing from the current request"
            )
        return organization_id

    async def _apply_rls(self) -> None:
        if settings.rls_enabled():
            await apply_rls_organization_context(self.session, self.organization_id)

    def _scoped_select(self) -> Select[tuple[ModelT]]:
        return select(self.model).where(self.model.organization_id == self.organization_id)

    async def create(self, **values: object) -> ModelT:
        await self._apply_rls()
        instance = self.model(**{**values, "organization_id": self.organization_id})
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def list(self, *, limit: int = 100, offset: int = 0) -> list[ModelT]:
        # Newest first, as the back office lists show them.
        await self._apply_rls()
        result = await self.session.execute(
            self._scoped_select()
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())
