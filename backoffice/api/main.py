from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backoffice.api.middleware import TenantMiddleware, authentication_middleware
from backoffice.api.routes.organization import router as organization_router
from backoffice.api.routes.projects import router as projects_router
from backoffice.api.routes.system import router as system_router
from backoffice.api.routes.users import router as users_router
from backoffice.core.config import Settings, settings
from backoffice.core.errors import TenantError, tenant_error_handler
from backoffice.core.stores import TenantStore, build_tenant_store


def create_app(store: TenantStore | None = None, config: Settings = settings) -> FastAPI:
    logging.basicConfig(level=config.log_level)
    tenant_store = store if store is not None else build_tenant_store(config)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await tenant_store.close()

    app = FastAPI(title="Nomedia Back Office", lifespan=lifespan)
    app.state.tenant_store = tenant_store
    app.add_exception_handler(TenantError, tenant_error_handler)

    # Middlewares wrap in reverse order: authentication runs before tenant resolution.
    app.middleware("http")(
        TenantMiddleware(
            tenant_store,
            required=config.tenant_required,
            allow_super_admin=config.tenant_allow_super_admin,
            skip_paths=config.tenant_skip_paths(),
            reserved_subdomains=config.tenant_reserved_subdomains(),
            org_path_pattern=config.tenant_org_path_pattern,
        )
    )
    app.middleware("http")(authentication_middleware)

    app.include_router(system_router, prefix="/api")
    app.include_router(organization_router, prefix="/api")
    app.include_router(projects_router, prefix="/api")
    app.include_router(users_router, prefix="/api")
    app.include_router(organization_router, prefix="/api/org/{org_slug}")
    app.include_router(projects_router, prefix="/api/org/{org_slug}")
    app.include_router(users_router, prefix="/api/org/{org_slug}")
    return app


app = create_app()
