"""Task lifecycle service: CRUD plus the submit/approve transitions."""

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from octoops.config import get_settings
from octoops.exceptions import InvalidTransitionError, NotFoundError
from octoops.models.project import Project, Task
from octoops.models.user import User

logger = structlog.get_logger()


# Transition -> (target status, statuses it may start from).
# Only consulted when enforce_task_transitions is on.
TASK_TRANSITIONS: dict[str, tuple[str, frozenset[str]]] = {
    "submit": ("in-review", frozenset({"todo", "in-progress"})),
    "approve": ("done", frozenset({"in-review"})),
}


def select_tasks() -> Select:
    """Task query with both dependency directions loaded."""
    return select(Task).options(
        selectinload(Task.dependencies),
        selectinload(Task.dependents),
    )


class TaskService:
    """Service for tasks."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_tasks(self, project_id: UUID | None = None) -> list[Task]:
        """List tasks, newest first, optionally scoped to a project."""
        stmt = select_tasks().order_by(Task.created_at.desc())
        if project_id:
            stmt = stmt.where(Task.project_id == project_id)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_task(self, task_id: UUID) -> Task:
        result = await self.db.execute(
            select_tasks()
            .where(Task.id == task_id)
            .execution_options(populate_existing=True)
        )
        task = result.scalar_one_or_none()
        if not task:
            raise NotFoundError("Task not found")
        return task

    # =========================================================================
    # CRUD
    # =========================================================================

    async def create_task(self, data: dict[str, Any]) -> Task:
        """Create a task.

        ``data`` uses model attribute names plus ``dependencies`` as a list of
        task ids.
        """
        dependency_ids = data.pop("dependencies", None) or []
        await self._check_references(data)

        task = Task(**data)
        await self._snapshot_assignee(task)
        task.dependencies = await self._load_dependencies(dependency_ids)

        self.db.add(task)
        await self.db.commit()

        logger.info(
            "task_created",
            task_id=str(task.id),
            project_id=str(task.project_id) if task.project_id else None,
            assignee_id=str(task.assignee_id) if task.assignee_id else None,
        )
        return await self.get_task(task.id)

    async def update_task(self, task_id: UUID, updates: dict[str, Any]) -> Task:
        """Merge ``updates`` into the task."""
        task = await self.get_task(task_id)

        dependency_ids = updates.pop("dependencies", None)
        await self._check_references(updates)

        for field, value in updates.items():
            setattr(task, field, value)

        if updates.get("assignee_id"):
            await self._snapshot_assignee(task)

        if dependency_ids is not None:
            task.dependencies = await self._load_dependencies(
                [dep_id for dep_id in dependency_ids if dep_id != task_id]
            )

        await self.db.commit()

        logger.info("task_updated", task_id=str(task_id), fields=sorted(updates))
        return await self.get_task(task_id)

    async def delete_task(self, task_id: UUID) -> None:
        """Hard-delete a task; dependency links in both directions go with it."""
        task = await self.get_task(task_id)
        await self.db.delete(task)
        await self.db.commit()

        logger.info("task_deleted", task_id=str(task_id))

    # =========================================================================
    # Transitions
    # =========================================================================

    async def submit_task(self, task_id: UUID) -> Task:
        """Move the task to in-review."""
        return await self._transition(task_id, "submit")

    async def approve_task(self, task_id: UUID) -> Task:
        """Move the task to done."""
        return await self._transition(task_id, "approve")

    async def _transition(self, task_id: UUID, action: str) -> Task:
        target, allowed_from = TASK_TRANSITIONS[action]
        task = await self.get_task(task_id)

        if self.settings.enforce_task_transitions and task.status not in allowed_from:
            raise InvalidTransitionError(action, task.status)

        previous = task.status
        task.status = target
        await self.db.commit()

        logger.info(
            "task_transitioned",
            task_id=str(task_id),
            action=action,
            from_status=previous,
            to_status=target,
        )
        return await self.get_task(task_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _check_references(self, fields: dict[str, Any]) -> None:
        """Fail with NotFound when a user or project reference points at nothing."""
        for field in ("assignee_id", "created_by_id"):
            if fields.get(field) and await self.db.get(User, fields[field]) is None:
                raise NotFoundError("User not found")
        if fields.get("project_id") and await self.db.get(Project, fields["project_id"]) is None:
            raise NotFoundError("Project not found")

    async def _snapshot_assignee(self, task: Task) -> None:
        """Copy the assignee's current name onto the task."""
        if not task.assignee_id:
            return
        assignee = await self.db.get(User, task.assignee_id)
        if assignee:
            task.assignee_name = assignee.name

    async def _load_dependencies(self, dependency_ids: list[UUID]) -> list[Task]:
        """Resolve dependency ids to tasks, dropping ids that match nothing."""
        if not dependency_ids:
            return []
        result = await self.db.execute(select_tasks().where(Task.id.in_(dependency_ids)))
        return list(result.scalars().all())
