"""Task endpoints."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Query, status
from pydantic import Field

from octoops.api.errors import ErrorBoundaryRoute
from octoops.db.session import DBSession
from octoops.models.project import Task
from octoops.schemas import CamelModel, MessageResponse, UserRef, UserSummary
from octoops.services.tasks import TaskService

router = APIRouter(route_class=ErrorBoundaryRoute)

TaskStatus = Literal["todo", "in-progress", "in-review", "done"]
TaskPriority = Literal["low", "medium", "high", "urgent"]

# Columns that cannot be cleared through an update
REQUIRED_TASK_FIELDS = {"title", "status", "priority"}


# ============================================================================
# Schemas
# ============================================================================

class TaskCreate(CamelModel):
    """Task create request.

    ``assignee``, ``createdBy`` and ``dependencies`` carry ids.
    """

    title: str = Field(..., min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus = "todo"
    priority: TaskPriority = "medium"
    due_date: date | None = None
    project_id: UUID | None = None
    assignee: UUID | None = None
    created_by: UUID | None = None
    dependencies: list[UUID] = Field(default_factory=list)


class TaskUpdate(CamelModel):
    """Task update request; only the fields sent are changed."""

    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None
    project_id: UUID | None = None
    assignee: UUID | None = None
    dependencies: list[UUID] | None = None


class TaskDependencyResponse(CamelModel):
    """A task referenced as a dependency."""

    id: UUID
    title: str
    status: str
    priority: str
    assignee_name: str | None
    project_id: UUID | None


class TaskResponse(CamelModel):
    """Task with assignee, creator and dependencies populated."""

    id: UUID
    title: str
    description: str | None
    status: str
    priority: str
    due_date: date | None
    project_id: UUID | None
    assignee: UserSummary | None
    assignee_name: str | None
    created_by: UserRef | None
    dependencies: list[TaskDependencyResponse]
    created_at: datetime
    updated_at: datetime


def _to_model_fields(data: dict) -> dict:
    """Map request reference fields onto model column names."""
    renames = {"assignee": "assignee_id", "created_by": "created_by_id"}
    return {renames.get(key, key): value for key, value in data.items()}


# ============================================================================
# Endpoints
# ============================================================================

@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    db: DBSession,
    project_id: UUID | None = Query(None, alias="projectId"),
) -> list[Task]:
    """List tasks, newest first."""
    return await TaskService(db).list_tasks(project_id)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(request: TaskCreate, db: DBSession) -> Task:
    """Create a task, snapshotting the assignee's name."""
    return await TaskService(db).create_task(_to_model_fields(request.model_dump()))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(task_id: UUID, updates: TaskUpdate, db: DBSession) -> Task:
    """Update a task."""
    data = {
        key: value
        for key, value in updates.model_dump(exclude_unset=True).items()
        if value is not None or key not in REQUIRED_TASK_FIELDS
    }
    return await TaskService(db).update_task(task_id, _to_model_fields(data))


@router.post("/{task_id}/submit", response_model=TaskResponse)
async def submit_task(task_id: UUID, db: DBSession) -> Task:
    """Submit a task for review."""
    return await TaskService(db).submit_task(task_id)


@router.post("/{task_id}/approve", response_model=TaskResponse)
async def approve_task(task_id: UUID, db: DBSession) -> Task:
    """Approve a task."""
    return await TaskService(db).approve_task(task_id)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(task_id: UUID, db: DBSession) -> dict:
    """Delete a task."""
    await TaskService(db).delete_task(task_id)
    return {"message": "Task deleted successfully"}
