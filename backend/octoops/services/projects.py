"""Project and team membership service."""

from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from octoops.exceptions import NotFoundError
from octoops.models.project import Project
from octoops.models.user import User
from octoops.services.users import UserService

logger = structlog.get_logger()


class ProjectService:
    """Service for projects and their team sets."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_project(self, project_id: UUID) -> Project | None:
        result = await self.db.execute(select(Project).where(Project.id == project_id))
        return result.scalar_one_or_none()

    async def get_project(self, project_id: UUID) -> Project:
        project = await self.find_project(project_id)
        if not project:
            raise NotFoundError("Project not found")
        return project

    async def create_project(
        self,
        name: str,
        owner_id: UUID,
        description: str | None = None,
    ) -> Project:
        """Create a project with its owner as the first team member."""
        owner = await UserService(self.db).get_user(owner_id)

        project = Project(name=name, description=description, owner=owner, team=[owner])
        self.db.add(project)
        await self.db.commit()

        logger.info("project_created", project_id=str(project.id), owner_id=str(owner_id))
        return project

    def add_member(self, project: Project, user: User) -> bool:
        """Add a user to the team set. Returns False when already a member.

        Does not commit; callers fold this into their own unit of work.
        """
        if project.has_member(user.id):
            return False
        project.team.append(user)
        return True

    async def remove_member(self, project_id: UUID, user_id: UUID) -> list[User]:
        """Pull a user from the team set and return the remaining members."""
        project = await self.get_project(project_id)

        remaining = [member for member in project.team if member.id != user_id]
        if len(remaining) != len(project.team):
            project.team = remaining
            await self.db.commit()
            logger.info(
                "team_member_removed",
                project_id=str(project_id),
                user_id=str(user_id),
            )

        return project.team

    async def update_member_role(self, user_id: UUID, role: str) -> User:
        """Change a user's directory role."""
        user = await UserService(self.db).get_user(user_id)
        user.role = role
        await self.db.commit()

        logger.info("member_role_updated", user_id=str(user_id), role=role)
        return user
