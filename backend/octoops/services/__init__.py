"""Business logic services."""

from octoops.services.invitations import InvitationService
from octoops.services.project_settings import SettingsService
from octoops.services.projects import ProjectService
from octoops.services.tasks import TaskService
from octoops.services.users import UserService

__all__ = [
    "InvitationService",
    "ProjectService",
    "SettingsService",
    "TaskService",
    "UserService",
]
