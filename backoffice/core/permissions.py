from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Final, Literal

from fastapi import Depends, status

from backoffice.core.auth import AuthenticatedUser, require_user
from backoffice.core.errors import TenantError

Role = Literal["super_admin", "admin", "manager", "user"]

PROJECTS_VIEW: Final = "projects:view"
PROJECTS_CREATE: Final = "projects:create"
USERS_VIEW: Final = "users:view"
USERS_MANAGE: Final = "users:manage"
EXPENSES_CREATE: Final = "expenses:create"
EXPENSES_APPROVE: Final = "expenses:approve"
EXPENSES_VIEW_ALL: Final = "expenses:view_all"
INVOICES_MANAGE: Final = "invoices:manage"
INVOICES_EDIT_PAID: Final = "invoices:edit_paid"
ORGANIZATION_MANAGE: Final = "organization:manage"

ALL_CAPABILITIES: Final[frozenset[str]] = frozenset(
    {
        PROJECTS_VIEW,
        PROJECTS_CREATE,
        USERS_VIEW,
        USERS_MANAGE,
        EXPENSES_CREATE,
        EXPENSES_APPROVE,
        EXPENSES_VIEW_ALL,
        INVOICES_MANAGE,
        INVOICES_EDIT_PAID,
        ORGANIZATION_MANAGE,
    }
)

ROLE_CAPABILITIES: Final[dict[str, frozenset[str]]] = {
    "super_admin": ALL_CAPABILITIES,
    "admin": ALL_CAPABILITIES,
    "manager": frozenset(
        {
            PROJECTS_VIEW,
            PROJECTS_CREATE,
            USERS_VIEW,
            EXPENSES_CREATE,
            EXPENSES_APPROVE,
            EXPENSES_VIEW_ALL,
            INVOICES_MANAGE,
        }
    ),
    "user": frozenset({PROJECTS_VIEW, EXPENSES_CREATE}),
}


def capabilities_for(role: str | None) -> frozenset[str]:
    return ROLE_CAPABILITIES.get((role or "").strip().lower(), frozenset())


def has_capabilities(role: str | None, required: Iterable[str]) -> bool:
    return set(required) <= capabilities_for(role)


def require_capabilities(*required: str) -> Callable[..., Awaitable[AuthenticatedUser]]:
    async def _dependency(user: AuthenticatedUser = Depends(require_user)) -> AuthenticatedUser:
        if not has_capabilities(user.role, required):
            raise TenantError(
                status.HTTP_403_FORBIDDEN,
                "INSUFFICIENT_PERMISSIONS",
                "Your role does not allow this operation",
            )
        return user

    return _dependency
