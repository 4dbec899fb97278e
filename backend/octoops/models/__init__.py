"""SQLAlchemy models package."""

from octoops.models.user import User
from octoops.models.project import Project, Task, project_members, task_dependencies
from octoops.models.invite import TeamInvite
from octoops.models.settings import ProjectSettings

__all__ = [
    # Users & projects
    "User",
    "Project",
    "project_members",
    # Tasks
    "Task",
    "task_dependencies",
    # Team invitations
    "TeamInvite",
    # Settings
    "ProjectSettings",
]
