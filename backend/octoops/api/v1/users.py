"""User directory endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query

from octoops.api.errors import ErrorBoundaryRoute
from octoops.db.session import DBSession
from octoops.models.user import User
from octoops.schemas import UserResponse
from octoops.services.users import UserService

router = APIRouter(route_class=ErrorBoundaryRoute)


@router.get("", response_model=UserResponse)
async def find_user(db: DBSession, email: str = Query(...)) -> User:
    """Look up a user by email."""
    return await UserService(db).get_user_by_email(email)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, db: DBSession) -> User:
    """Get a user by id."""
    return await UserService(db).get_user(user_id)
