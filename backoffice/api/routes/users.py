from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.auth import require_organization_access
from backoffice.core.billing import check_subscription_limits
from backoffice.core.db import get_db_session
from backoffice.core.permissions import USERS_MANAGE, require_capabilities
from backoffice.core.repositories.users import UserRepository
from backoffice.schemas.user import UserCreateRequest, UserResponse

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_organization_access)],
)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(require_capabilities(USERS_MANAGE)),
        Depends(check_subscription_limits("users")),
    ],
)
async def create_user(
    payload: UserCreateRequest,
    session: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    repository = UserRepository(session)
    email = payload.email.strip().lower()
    if await repository.get_by_email(email) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A user with this email already exists",
        )

    user = await repository.create(
        email=email,
        name=payload.name,
        role=payload.role,
        status="invited",
    )
    await session.commit()
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        status=user.status,
    )
