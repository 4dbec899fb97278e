"""User directory service: lookups, invite-code login and owner signup."""

from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from octoops.config import get_settings
from octoops.exceptions import ConflictError, NotFoundError
from octoops.models.user import DEFAULT_AVATARS, User, member_avatar

logger = structlog.get_logger()

LOGIN_ACCOUNT_NAMES = {
    "qa": "QA Specialist",
    "member": "Team Developer",
}


def role_from_invite_code(invite_code: str | None) -> str:
    """Derive the login role from an invite code ("qa" anywhere means QA)."""
    if invite_code and "qa" in invite_code.lower():
        return "qa"
    return "member"


class UserService:
    """Service for the user directory."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: UUID) -> User:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User not found")
        return user

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> User:
        user = await self.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def login(self, invite_code: str | None) -> User:
        """Find or create the shared account for the role encoded in the code.

        No credential is verified here; the caller issues a session token for
        the returned user.
        """
        role = role_from_invite_code(invite_code)
        email = f"{role}@{get_settings().login_account_domain}"

        user = await self.find_by_email(email)
        if user is None:
            user = User(
                name=LOGIN_ACCOUNT_NAMES[role],
                email=email,
                role=role,
                avatar=member_avatar(role),
            )
            self.db.add(user)
            await self.db.commit()
            logger.info("login_account_created", user_id=str(user.id), role=role)

        logger.info("user_logged_in", user_id=str(user.id), role=role)
        return user

    async def signup_owner(self, name: str, email: str) -> User:
        """Create a project owner account."""
        if await self.find_by_email(email):
            raise ConflictError("User already exists")

        user = User(
            name=name,
            email=email,
            role="owner",
            avatar=DEFAULT_AVATARS["owner"],
        )
        self.db.add(user)
        await self.db.commit()

        logger.info("owner_signed_up", user_id=str(user.id), email=email)
        return user
