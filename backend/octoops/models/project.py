"""Project, team membership and task models."""

from datetime import date
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Column, Date, ForeignKey, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from octoops.db.base import Base, BaseModel, one_of

if TYPE_CHECKING:
    from octoops.models.user import User


TASK_STATUSES = ("todo", "in-progress", "in-review", "done")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")


# A project's team is a set: the composite primary key rules out duplicates.
project_members = Table(
    "project_members",
    Base.metadata,
    Column(
        "project_id",
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

# Task -> tasks it depends on. Rows go away with either task.
task_dependencies = Table(
    "task_dependencies",
    Base.metadata,
    Column(
        "task_id",
        Uuid(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "depends_on_id",
        Uuid(as_uuid=True),
        ForeignKey("tasks.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Project(BaseModel):
    """A project owned by one user, worked on by its team."""

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    owner_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    owner: Mapped["User | None"] = relationship("User", lazy="selectin")
    team: Mapped[list["User"]] = relationship(
        "User", secondary=project_members, lazy="selectin", order_by="User.created_at"
    )

    def __repr__(self) -> str:
        try:
            return f"<Project {self.name}>"
        except Exception:
            return f"<Project id={self.id}>"

    def has_member(self, user_id: UUID) -> bool:
        return any(member.id == user_id for member in self.team)


class Task(BaseModel):
    """Task within a project."""

    __tablename__ = "tasks"
    __table_args__ = (
        one_of("status", TASK_STATUSES, "check_task_status"),
        one_of("priority", TASK_PRIORITIES, "check_task_priority"),
    )

    # Basic info
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Status and priority
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="todo"
    )  # todo, in-progress, in-review, done
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default="medium"
    )  # low, medium, high, urgent
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Ownership and assignment
    project_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    created_by_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    assignee_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    # Snapshot of the assignee's name taken when the assignee is set
    assignee_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    created_by: Mapped["User | None"] = relationship(
        "User", foreign_keys=[created_by_id], lazy="selectin"
    )
    assignee: Mapped["User | None"] = relationship(
        "User", foreign_keys=[assignee_id], lazy="selectin"
    )
    dependencies: Mapped[list["Task"]] = relationship(
        "Task",
        secondary=task_dependencies,
        primaryjoin=lambda: Task.id == task_dependencies.c.task_id,
        secondaryjoin=lambda: Task.id == task_dependencies.c.depends_on_id,
        back_populates="dependents",
        lazy="selectin",
        join_depth=1,
    )
    dependents: Mapped[list["Task"]] = relationship(
        "Task",
        secondary=task_dependencies,
        primaryjoin=lambda: Task.id == task_dependencies.c.depends_on_id,
        secondaryjoin=lambda: Task.id == task_dependencies.c.task_id,
        back_populates="dependencies",
        lazy="selectin",
        join_depth=1,
    )

    def __repr__(self) -> str:
        try:
            return f"<Task {self.title} [{self.status}]>"
        except Exception:
            return f"<Task id={self.id}>"
