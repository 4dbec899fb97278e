"""API router package."""

from fastapi import APIRouter

from octoops.api.v1 import (
    auth,
    health,
    projects,
    settings,
    tasks,
    team,
    users,
)

router = APIRouter()

# Include all API routers
router.include_router(health.router, tags=["Health"])
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
router.include_router(team.router, prefix="/team", tags=["Team"])
router.include_router(settings.router, prefix="/settings", tags=["Settings"])
