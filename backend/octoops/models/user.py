"""User model."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from octoops.db.base import BaseModel, one_of

USER_ROLES = ("owner", "member", "qa")

DEFAULT_AVATARS = {
    "owner": "👩‍💼",
    "qa": "👩‍🎨",
    "member": "👨‍💻",
}


def member_avatar(role: str) -> str:
    """Avatar for accounts created by login or invite: QA gets its own, everyone else the member one."""
    return DEFAULT_AVATARS["qa"] if role == "qa" else DEFAULT_AVATARS["member"]


class User(BaseModel):
    """A person in the directory, identified by email."""

    __tablename__ = "users"
    __table_args__ = (one_of("role", USER_ROLES, "check_user_role"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="member"
    )  # owner, member, qa
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    avatar: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # Invitation trail (set when the user was created by accepting an invite)
    invited_by: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    invited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        try:
            return f"<User {self.email}>"
        except Exception:
            return f"<User id={self.id}>"
