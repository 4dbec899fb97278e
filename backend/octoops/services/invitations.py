"""Team invitation lifecycle: issue, accept, expire and cancel invite codes."""

import secrets
from datetime import timedelta
from uuid import UUID

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from octoops.config import get_settings
from octoops.db.base import utcnow
from octoops.exceptions import (
    ConflictError,
    InvalidRequestError,
    InviteExpiredError,
    NotFoundError,
)
from octoops.models.invite import TeamInvite
from octoops.models.project import Project
from octoops.models.user import User, member_avatar
from octoops.services.projects import ProjectService
from octoops.services.users import UserService

logger = structlog.get_logger()


def generate_invite_code() -> str:
    """Generate a 32-character hex invite code."""
    return secrets.token_hex(16)


class InvitationService:
    """Service for team invitations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()
        self.projects = ProjectService(db)
        self.users = UserService(db)

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_invite(self, invite_id: UUID) -> TeamInvite:
        result = await self.db.execute(select(TeamInvite).where(TeamInvite.id == invite_id))
        invite = result.scalar_one_or_none()
        if not invite:
            raise NotFoundError("Invite not found")
        return invite

    async def get_team(self, project_id: UUID | None) -> tuple[list[User], list[TeamInvite]]:
        """Return the project's members and its pending invites."""
        if not project_id:
            raise InvalidRequestError("Project ID is required")

        project = await self.projects.get_project(project_id)

        result = await self.db.execute(
            select(TeamInvite)
            .where(
                TeamInvite.project_id == project_id,
                TeamInvite.status == "pending",
            )
            .order_by(TeamInvite.created_at.desc())
        )
        pending_invites = list(result.scalars().all())

        return project.team, pending_invites

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def invite(
        self,
        email: str,
        role: str,
        project_id: UUID,
        invited_by_id: UUID | None = None,
    ) -> TeamInvite:
        """Issue a pending invite for ``email`` to join the project."""
        project = await self.projects.get_project(project_id)
        if invited_by_id:
            await self.users.get_user(invited_by_id)

        user = await self.users.find_by_email(email)
        if user and project.has_member(user.id):
            raise ConflictError("User is already a team member")

        invite = TeamInvite(
            email=email,
            role=role,
            project_id=project_id,
            invited_by_id=invited_by_id,
            invite_code=generate_invite_code(),
            expires_at=utcnow() + timedelta(days=self.settings.invite_expiry_days),
            status="pending",
        )
        self.db.add(invite)
        await self.db.commit()

        # Re-query so the inviter is populated
        result = await self.db.execute(
            select(TeamInvite)
            .where(TeamInvite.id == invite.id)
            .execution_options(populate_existing=True)
        )
        invite = result.scalar_one()

        logger.info(
            "invite_created",
            invite_id=str(invite.id),
            project_id=str(project_id),
            email=email,
            role=role,
        )
        return invite

    async def accept_invite(self, invite_code: str, user_name: str | None = None) -> User:
        """Resolve a pending invite code into team membership.

        Expired invites are moved to ``expired`` on first access and can never
        be accepted afterwards. The pending -> accepted step is a conditional
        update, so two concurrent accepts cannot both succeed.
        """
        result = await self.db.execute(
            select(TeamInvite).where(
                TeamInvite.invite_code == invite_code,
                TeamInvite.status == "pending",
            )
        )
        invite = result.scalar_one_or_none()

        if not invite:
            raise NotFoundError("Invalid or expired invite code")

        now = utcnow()

        if invite.is_expired(now):
            invite.status = "expired"
            await self.db.commit()
            logger.info("invite_expired", invite_id=str(invite.id))
            raise InviteExpiredError()

        claimed = await self.db.execute(
            update(TeamInvite)
            .where(TeamInvite.id == invite.id, TeamInvite.status == "pending")
            .values(status="accepted", accepted_at=now, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError("Invalid or expired invite code")

        user = await self.users.find_by_email(invite.email)
        if user is None:
            user = User(
                name=user_name or invite.email.split("@")[0],
                email=invite.email,
                role=invite.role,
                status="active",
                invited_by=invite.invited_by_id,
                invited_at=invite.created_at,
                accepted_at=now,
                avatar=member_avatar(invite.role),
            )
            self.db.add(user)
            await self.db.flush()

        project = await self.db.get(Project, invite.project_id)
        if project is not None:
            self.projects.add_member(project, user)

        invite.status = "accepted"
        invite.accepted_at = now
        await self.db.commit()

        logger.info(
            "invite_accepted",
            invite_id=str(invite.id),
            project_id=str(invite.project_id),
            user_id=str(user.id),
        )
        return user

    async def cancel_invite(self, invite_id: UUID) -> TeamInvite:
        """Reject an invite.

        Under the ``always`` policy any invite is rejected regardless of its
        status; ``pending_only`` refuses invites that already left pending.
        """
        invite = await self.get_invite(invite_id)

        if self.settings.invite_cancel_policy == "pending_only" and invite.status != "pending":
            raise ConflictError(f"Invite is already {invite.status}")

        invite.status = "rejected"
        await self.db.commit()

        logger.info("invite_cancelled", invite_id=str(invite_id))
        return invite
