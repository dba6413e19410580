from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable

from fastapi import Request
from starlette import status
from starlette.responses import JSONResponse, Response

from backoffice.core.auth import AuthenticatedUser, authenticate_request, is_super_admin
from backoffice.core.context import reset_current_organization_id, set_current_organization_id
from backoffice.core.errors import TenantError
from backoffice.core.resolver import TenantResolver, should_skip_tenant_resolution
from backoffice.core.stores.base import TenantStore
from backoffice.core.tenant import TenantContext, build_tenant_context, check_organization_status

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


async def authentication_middleware(request: Request, call_next: CallNext) -> Response:
    request.state.user = authenticate_request(request)
    return await call_next(request)


class TenantMiddleware:
    """Resolve the tenant, load its context and apply the status gate.

    Rejections are rendered here directly; the route is only reached when the
    organization may be served, or when no tenant is needed.
    """

    def __init__(
        self,
        store: TenantStore,
        *,
        required: bool = True,
        allow_super_admin: bool = False,
        skip_paths: Iterable[str] = (),
        reserved_subdomains: Iterable[str] = ("www", "app"),
        org_path_pattern: str = r"^/(?:api/)?org/(?P<org_slug>[^/]+)",
    ) -> None:
        self.store = store
        self.required = required
        self.allow_super_admin = allow_super_admin
        self.skip_paths = tuple(skip_paths)
        self.resolver = TenantResolver(
            store,
            reserved_subdomains=reserved_subdomains,
            org_path_pattern=org_path_pattern,
        )

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        path = request.url.path
        if should_skip_tenant_resolution(path, self.skip_paths):
            return await call_next(request)

        user: AuthenticatedUser | None = getattr(request.state, "user", None)
        try:
            tenant = await self.load_tenant(
                host=request.headers.get("host", ""),
                path=path,
                user=user,
            )
        except TenantError as exc:
            return exc.to_response()
        except Exception:
            logger.exception("Tenant middleware failed for path=%s", path)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "success": False,
                    "message": "Failed to resolve tenant context",
                    "code": "TENANT_ERROR",
                },
            )

        if tenant is None:
            return await call_next(request)

        request.state.tenant = tenant
        token = set_current_organization_id(tenant.organization_id)
        try:
            return await call_next(request)
        finally:
            reset_current_organization_id(token)

    async def load_tenant(
        self,
        *,
        host: str,
        path: str,
        user: AuthenticatedUser | None,
    ) -> TenantContext | None:
        resolution = await self.resolver.resolve(host=host, path=path, user=user)
        organization_id = resolution.organization_id

        if self.allow_super_admin and is_super_admin(user):
            if organization_id is None:
                return None
            organization = await self.store.get_organization_by_id(organization_id)
            if organization is None:
                return None
            return await build_tenant_context(self.store, organization, user)

        if organization_id is None:
            if self.required:
                raise TenantError(
                    status.HTTP_400_BAD_REQUEST,
                    "TENANT_REQUIRED",
                    "Organization context required",
                )
            return None

        organization = await self.store.get_organization_by_id(organization_id)
        if organization is None:
            raise TenantError(
                status.HTTP_404_NOT_FOUND,
                "TENANT_NOT_FOUND",
                "Organization not found",
            )

        check_organization_status(organization)
        logger.debug(
            "Resolved organization=%s via %s for path=%s",
            organization.id,
            resolution.source,
            path,
        )
        return await build_tenant_context(self.store, organization, user)
