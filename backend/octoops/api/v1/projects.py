"""Project endpoints."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import Field

from octoops.api.errors import ErrorBoundaryRoute
from octoops.db.session import DBSession
from octoops.models.project import Project
from octoops.schemas import CamelModel, UserSummary
from octoops.services.projects import ProjectService

router = APIRouter(route_class=ErrorBoundaryRoute)


class ProjectCreate(CamelModel):
    """Project create request."""

    name: str = Field(..., min_length=1, max_length=255)
    owner_id: UUID
    description: str | None = None


class ProjectResponse(CamelModel):
    """Project with owner and team populated."""

    id: UUID
    name: str
    description: str | None
    owner: UserSummary | None
    team: list[UserSummary]
    created_at: datetime
    updated_at: datetime


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(request: ProjectCreate, db: DBSession) -> Project:
    """Create a project; the owner joins its team."""
    return await ProjectService(db).create_project(
        name=request.name,
        owner_id=request.owner_id,
        description=request.description,
    )


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: UUID, db: DBSession) -> Project:
    """Get a project with its team."""
    return await ProjectService(db).get_project(project_id)
