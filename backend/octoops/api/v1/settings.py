"""Project settings endpoints."""

from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Query

from octoops.api.errors import ErrorBoundaryRoute
from octoops.db.session import DBSession
from octoops.models.settings import ProjectSettings
from octoops.schemas import CamelModel
from octoops.services.project_settings import SettingsService

router = APIRouter(route_class=ErrorBoundaryRoute)


# ============================================================================
# Schemas
# ============================================================================

class SettingsUpdate(CamelModel):
    """Settings patch; each section sent replaces the stored one."""

    project_id: UUID | None = None
    notifications: dict[str, Any] | None = None
    integrations: dict[str, Any] | None = None
    ai_settings: dict[str, Any] | None = None
    general: dict[str, Any] | None = None


class NotificationsUpdate(CamelModel):
    project_id: UUID | None = None
    notifications: dict[str, Any] | None = None


class IntegrationsUpdate(CamelModel):
    project_id: UUID | None = None
    integrations: dict[str, Any] | None = None


class AISettingsUpdate(CamelModel):
    project_id: UUID | None = None
    ai_settings: dict[str, Any] | None = None


class SettingsResponse(CamelModel):
    id: UUID
    project_id: UUID
    notifications: dict[str, Any]
    integrations: dict[str, Any]
    ai_settings: dict[str, Any]
    general: dict[str, Any]
    created_at: datetime
    updated_at: datetime


# ============================================================================
# Endpoints
# ============================================================================

@router.get("", response_model=SettingsResponse)
async def get_settings(
    db: DBSession,
    project_id: UUID | None = Query(None, alias="projectId"),
) -> ProjectSettings:
    """Get a project's settings, creating defaults on first access."""
    return await SettingsService(db).get_settings(project_id)


@router.put("", response_model=SettingsResponse)
async def update_settings(request: SettingsUpdate, db: DBSession) -> ProjectSettings:
    """Update any settings sections."""
    updates = request.model_dump(exclude_unset=True, exclude={"project_id"})
    return await SettingsService(db).update_settings(request.project_id, updates)


@router.put("/notifications", response_model=SettingsResponse)
async def update_notification_preferences(
    request: NotificationsUpdate, db: DBSession
) -> ProjectSettings:
    """Replace notification preferences."""
    return await SettingsService(db).update_notifications(
        request.project_id, request.notifications
    )


@router.put("/integrations", response_model=SettingsResponse)
async def update_integrations(request: IntegrationsUpdate, db: DBSession) -> ProjectSettings:
    """Replace integrations."""
    return await SettingsService(db).update_integrations(request.project_id, request.integrations)


@router.put("/ai", response_model=SettingsResponse)
async def update_ai_settings(request: AISettingsUpdate, db: DBSession) -> ProjectSettings:
    """Replace AI settings."""
    return await SettingsService(db).update_ai_settings(request.project_id, request.ai_settings)
