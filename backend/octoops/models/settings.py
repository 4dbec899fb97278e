"""Per-project settings model."""

from uuid import UUID

from sqlalchemy import Uuid
from sqlalchemy.orm import Mapped, mapped_column

from octoops.db.base import BaseModel, JSONType


def default_notifications() -> dict:
    return {
        "email": True,
        "taskAssigned": True,
        "taskCompleted": True,
        "weeklyDigest": False,
    }


def default_ai_settings() -> dict:
    return {"enabled": True, "autoAssign": False}


class ProjectSettings(BaseModel):
    """Singleton configuration blob per project.

    Each sub-document is replaced wholesale on write, never deep-merged.
    """

    __tablename__ = "project_settings"

    # Not a foreign key: settings may be written before the project exists
    project_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), unique=True, nullable=False, index=True
    )

    notifications: Mapped[dict] = mapped_column(
        JSONType, nullable=False, default=default_notifications
    )
    integrations: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)
    ai_settings: Mapped[dict] = mapped_column(
        JSONType, nullable=False, default=default_ai_settings
    )
    general: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<ProjectSettings project_id={self.project_id}>"
