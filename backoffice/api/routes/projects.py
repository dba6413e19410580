from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.auth import require_organization_access
from backoffice.core.billing import check_subscription_limits, require_feature
from backoffice.core.db import get_db_session
from backoffice.core.permissions import PROJECTS_CREATE, PROJECTS_VIEW, require_capabilities
from backoffice.core.repositories.projects import ProjectRepository
from backoffice.schemas.project import ProjectCreateRequest, ProjectResponse

router = APIRouter(
    prefix="/projects",
    tags=["projects"],
    dependencies=[Depends(require_organization_access), Depends(require_feature("projects"))],
)


@router.get(
    "",
    response_model=list[ProjectResponse],
    dependencies=[Depends(require_capabilities(PROJECTS_VIEW))],
)
async def list_projects(
    limit: int = 100,
    offset: int = 0,
    session: AsyncSession = Depends(get_db_session),
) -> list[ProjectResponse]:
    repository = ProjectRepository(session)
    projects = await repository.list(limit=limit, offset=offset)
    return [
        ProjectResponse(
            id=project.id,
            name=project.name,
            client=project.client,
            status=project.status,
            budget=project.budget,
        )
        for project in projects
    ]


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(require_capabilities(PROJECTS_CREATE)),
        Depends(check_subscription_limits("projects")),
    ],
)
async def create_project(
    payload: ProjectCreateRequest,
    session: AsyncSession = Depends(get_db_session),
) -> ProjectResponse:
    repository = ProjectRepository(session)
    project = await repository.create(
        name=payload.name,
        client=payload.client,
        status=payload.status,
        budget=payload.budget,
    )
    await session.commit()
    return ProjectResponse(
        id=project.id,
        name=project.name,
        client=project.client,
        status=project.status,
        budget=project.budget,
    )
