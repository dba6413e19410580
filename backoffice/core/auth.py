from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Request, status
from jose import JWTError, jwt

from backoffice.core.config import settings
from backoffice.core.errors import TenantError
from backoffice.core.tenant import TenantContext, get_tenant_context

logger = logging.getLogger(__name__)

SUPER_ADMIN_ROLE = "super_admin"


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    id: int
    organization_id: int | None
    role: str
    email: str | None = None
    name: str | None = None


def issue_access_token(user: AuthenticatedUser, *, remember_me: bool = False) -> str:
    ttl = (
        timedelta(days=settings.remember_me_ttl_days)
        if remember_me
        else timedelta(hours=settings.access_token_ttl_hours)
    )
    claims = {
        "id": user.id,
        "organization_id": user.organization_id,
        "role": user.role,
        "email": user.email,
        "name": user.name,
        "exp": datetime.now(timezone.utc) + ttl,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> AuthenticatedUser | None:
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        logger.debug("Rejected access token: %s", exc)
        return None

    user_id = claims.get("id")
    role = claims.get("role")
    if user_id is None or not role:
        return None

    organization_id = claims.get("organization_id")
    return AuthenticatedUser(
        id=int(user_id),
        organization_id=int(organization_id) if organization_id is not None else None,
        role=str(role),
        email=claims.get("email"),
        name=claims.get("name"),
    )


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def authenticate_request(request: Request) -> AuthenticatedUser | None:
    token = _bearer_token(request)
    if token is None:
        return None
    return decode_access_token(token)


def is_super_admin(user: AuthenticatedUser | None) -> bool:
    return user is not None and user.role == SUPER_ADMIN_ROLE


def get_current_user(request: Request) -> AuthenticatedUser | None:
    return getattr(request.state, "user", None)


async def require_user(
    user: AuthenticatedUser | None = Depends(get_current_user),
) -> AuthenticatedUser:
    if user is None:
        raise TenantError(status.HTTP_401_UNAUTHORIZED, "AUTH_REQUIRED", "Authentication required")
    return user


async def require_organization_access(
    tenant: TenantContext | None = Depends(get_tenant_context),
    user: AuthenticatedUser | None = Depends(get_current_user),
) -> TenantContext:
    """Reject users whose home organization is not the resolved tenant.

    Compares ids already attached to the request; the store is not consulted.
    """
    if tenant is None or user is None:
        raise TenantError(status.HTTP_401_UNAUTHORIZED, "AUTH_REQUIRED", "Authentication required")

    if user.organization_id != tenant.organization_id:
        raise TenantError(
            status.HTTP_403_FORBIDDEN,
            "ORGANIZATION_ACCESS_DENIED",
            "Access denied to this organization",
        )
    return tenant
