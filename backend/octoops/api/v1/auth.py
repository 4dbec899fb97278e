"""Authentication endpoints: invite-code login and owner signup."""

from datetime import datetime, timedelta, timezone
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import EmailStr, Field

from octoops.api.errors import ErrorBoundaryRoute
from octoops.config import get_settings
from octoops.db.session import DBSession
from octoops.exceptions import NotFoundError
from octoops.models.user import User
from octoops.schemas import CamelModel, UserResponse
from octoops.services.users import UserService

router = APIRouter(route_class=ErrorBoundaryRoute)
logger = structlog.get_logger()
settings = get_settings()
security = HTTPBearer(auto_error=False)


# ============================================================================
# Schemas
# ============================================================================

class LoginRequest(CamelModel):
    """Invite-code login request."""

    invite_code: str | None = None


class LoginResponse(CamelModel):
    """Logged-in user plus a session token."""

    user: UserResponse
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class SignupRequest(CamelModel):
    """Project owner signup request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    project_name: str | None = None


class SignupResponse(CamelModel):
    user: UserResponse
    project_name: str | None = None


# ============================================================================
# Tokens
# ============================================================================

def create_access_token(user_id: UUID) -> tuple[str, int]:
    """Sign a session token for ``user_id``.

    Returns the token and its lifetime in seconds, as reported by ``expiresIn``.
    """
    lifetime = timedelta(minutes=settings.jwt_access_token_expire_minutes)
    claims = {
        "sub": str(user_id),
        "type": "access",
        "exp": datetime.now(timezone.utc) + lifetime,
    }
    token = jwt.encode(
        claims,
        settings.jwt_secret_key.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )
    return token, int(lifetime.total_seconds())


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: DBSession,
) -> User:
    """Get the current authenticated user from JWT token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not credentials:
        raise credentials_exception

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret_key.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
        )
        user_id = UUID(payload["sub"])
        if payload.get("type") != "access":
            raise credentials_exception
    except (JWTError, KeyError, ValueError):
        raise credentials_exception

    try:
        return await UserService(db).get_user(user_id)
    except NotFoundError:
        raise credentials_exception


CurrentUser = Annotated[User, Depends(get_current_user)]


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, db: DBSession) -> dict:
    """Log in with an invite code.

    The role comes from the code ("qa" anywhere means QA, otherwise member);
    every login for a role maps to the same shared account.
    """
    user = await UserService(db).login(request.invite_code)
    access_token, expires_in = create_access_token(user.id)

    return {
        "user": user,
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": expires_in,
    }


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest, db: DBSession) -> dict:
    """Sign up a project owner. The project itself is created separately."""
    user = await UserService(db).signup_owner(request.name, request.email)
    return {"user": user, "project_name": request.project_name}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUser) -> User:
    """Return the user behind the bearer token."""
    return current_user
