"""Team invitation model."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from octoops.db.base import BaseModel, as_utc, one_of, utcnow
from octoops.models.user import USER_ROLES, User


INVITE_STATUSES = ("pending", "accepted", "expired", "rejected")


class TeamInvite(BaseModel):
    """Email invitation to join a project's team with a given role.

    Starts ``pending`` and moves to exactly one of ``accepted``, ``expired``
    or ``rejected``.
    """

    __tablename__ = "team_invites"
    __table_args__ = (
        one_of("status", INVITE_STATUSES, "check_invite_status"),
        one_of("role", USER_ROLES, "check_invite_role"),
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="member")

    project_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    invited_by_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # 32 hex characters
    invite_code: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, index=True
    )
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True
    )  # pending, accepted, expired, rejected
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    invited_by: Mapped["User | None"] = relationship("User", lazy="selectin")

    def __repr__(self) -> str:
        try:
            return f"<TeamInvite {self.email} [{self.status}]>"
        except Exception:
            return f"<TeamInvite id={self.id}>"

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the invite is past its expiry."""
        expires_at = as_utc(self.expires_at)
        if expires_at is None:
            return False
        return expires_at < (now or utcnow())
