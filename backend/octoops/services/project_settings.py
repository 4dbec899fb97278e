"""Per-project settings store, created lazily and upserted on every write."""

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from octoops.db.base import utcnow
from octoops.exceptions import InvalidRequestError
from octoops.models.settings import ProjectSettings

logger = structlog.get_logger()

SETTINGS_SECTIONS = ("notifications", "integrations", "ai_settings", "general")


class SettingsService:
    """Service for project settings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find(self, project_id: UUID) -> ProjectSettings | None:
        result = await self.db.execute(
            select(ProjectSettings).where(ProjectSettings.project_id == project_id)
        )
        return result.scalar_one_or_none()

    async def get_settings(self, project_id: UUID | None) -> ProjectSettings:
        """Return the project's settings, creating defaults on first read."""
        if not project_id:
            raise InvalidRequestError("Project ID is required")

        settings = await self._find(project_id)
        if settings is None:
            settings = ProjectSettings(project_id=project_id)
            self.db.add(settings)
            await self.db.commit()
            logger.info("settings_created", project_id=str(project_id))

        return settings

    async def update_settings(
        self, project_id: UUID | None, updates: dict[str, Any]
    ) -> ProjectSettings:
        """Upsert settings, replacing each given section wholesale."""
        if not project_id:
            raise InvalidRequestError("Project ID is required")

        sections = {
            key: value
            for key, value in updates.items()
            if key in SETTINGS_SECTIONS and value is not None
        }

        settings = await self._find(project_id)
        if settings is None:
            settings = ProjectSettings(project_id=project_id, **sections)
            self.db.add(settings)
        else:
            for section, value in sections.items():
                setattr(settings, section, value)
            # Touch even when nothing changed
            settings.updated_at = utcnow()

        await self.db.commit()

        logger.info(
            "settings_updated",
            project_id=str(project_id),
            sections=sorted(sections),
        )
        return settings

    async def update_notifications(
        self, project_id: UUID | None, notifications: dict[str, Any] | None
    ) -> ProjectSettings:
        return await self.update_settings(project_id, {"notifications": notifications})

    async def update_integrations(
        self, project_id: UUID | None, integrations: dict[str, Any] | None
    ) -> ProjectSettings:
        return await self.update_settings(project_id, {"integrations": integrations})

    async def update_ai_settings(
        self, project_id: UUID | None, ai_settings: dict[str, Any] | None
    ) -> ProjectSettings:
        return await self.update_settings(project_id, {"ai_settings": ai_settings})
