"""Team membership and invitation endpoints."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Query, status
from pydantic import EmailStr

from octoops.api.errors import ErrorBoundaryRoute
from octoops.db.session import DBSession
from octoops.models.invite import TeamInvite
from octoops.models.user import User
from octoops.schemas import CamelModel, MessageResponse, UserRef, UserResponse
from octoops.services.invitations import InvitationService
from octoops.services.projects import ProjectService

router = APIRouter(route_class=ErrorBoundaryRoute)

MemberRole = Literal["owner", "member", "qa"]


# ============================================================================
# Schemas
# ============================================================================

class InviteCreate(CamelModel):
    """Invite a team member by email."""

    email: EmailStr
    role: MemberRole = "member"
    project_id: UUID
    invited_by: UUID | None = None


class InviteResponse(CamelModel):
    """Team invite with the inviter populated."""

    id: UUID
    email: str
    role: str
    project_id: UUID
    invited_by: UserRef | None
    invite_code: str
    expires_at: datetime | None
    status: str
    accepted_at: datetime | None
    created_at: datetime


class AcceptInviteRequest(CamelModel):
    invite_code: str
    user_name: str | None = None


class AcceptInviteResponse(CamelModel):
    user: UserResponse
    message: str


class TeamResponse(CamelModel):
    members: list[UserResponse]
    pending_invites: list[InviteResponse]


class RemoveMemberRequest(CamelModel):
    user_id: UUID
    project_id: UUID


class UpdateRoleRequest(CamelModel):
    user_id: UUID
    role: MemberRole


# ============================================================================
# Endpoints
# ============================================================================

@router.get("", response_model=TeamResponse)
async def get_team_members(
    db: DBSession,
    project_id: UUID | None = Query(None, alias="projectId"),
) -> dict:
    """List a project's members and its pending invites."""
    members, pending_invites = await InvitationService(db).get_team(project_id)
    return {"members": members, "pending_invites": pending_invites}


@router.post("/invite", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
async def invite_team_member(request: InviteCreate, db: DBSession) -> TeamInvite:
    """Invite someone to the project's team."""
    return await InvitationService(db).invite(
        email=request.email,
        role=request.role,
        project_id=request.project_id,
        invited_by_id=request.invited_by,
    )


@router.post("/accept", response_model=AcceptInviteResponse)
async def accept_invite(request: AcceptInviteRequest, db: DBSession) -> dict:
    """Accept an invite code and join the team."""
    user = await InvitationService(db).accept_invite(request.invite_code, request.user_name)
    return {"user": user, "message": "Invitation accepted successfully"}


@router.post("/remove", response_model=list[UserResponse])
async def remove_team_member(request: RemoveMemberRequest, db: DBSession) -> list[User]:
    """Remove a member from the project's team."""
    return await ProjectService(db).remove_member(request.project_id, request.user_id)


@router.post("/role", response_model=UserResponse)
async def update_member_role(request: UpdateRoleRequest, db: DBSession) -> User:
    """Change a member's role."""
    return await ProjectService(db).update_member_role(request.user_id, request.role)


@router.delete("/invite/{invite_id}", response_model=MessageResponse)
async def cancel_invite(invite_id: UUID, db: DBSession) -> dict:
    """Revoke an invitation."""
    await InvitationService(db).cancel_invite(invite_id)
    return {"message": "Invitation cancelled successfully"}
