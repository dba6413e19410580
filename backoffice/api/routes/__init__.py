from backoffice.api.routes.organization import router as organization_router
from backoffice.api.routes.projects import router as projects_router
from backoffice.api.routes.system import router as system_router
from backoffice.api.routes.users import router as users_router

__all__ = [
    "organization_router",
    "projects_router",
    "system_router",
    "users_router",
]
