from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.repositories.base import OrganizationRepository
from backoffice.models.user import User


class UserRepository(OrganizationRepository[User]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session=session, model=User)

    async def get_by_email(self, email: str) -> User | None:
        await self._apply_rls()
        result = await self.session.execute(
            self._scoped_select().where(User.email == email)
        )
        return result.scalar_one_or_none()
