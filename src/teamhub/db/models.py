"""SQLAlchemy ORM models — single source of truth for the database schema.

Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Tables are created from this metadata at startup.

Key concepts:
- Integer primary keys (the frontend routes on numeric ids)
- Uniqueness lives in the database (emails, reset tokens, likes,
  acceptances), so concurrent inserts cannot slip past an app-level check
- Users own everything; ON DELETE CASCADE where the record has no
  meaning without its owner
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


ROLE_ADMIN = "admin"
ROLE_USER = "user"

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"


# ══════════════════════════════════════════════════════════════
# Accounts
# ══════════════════════════════════════════════════════════════


class User(Base):
    """A team member or admin.

    New members start `pending` until an admin approves them; admins
    are created `approved`.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ROLE_USER
    )  # admin, user
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=STATUS_PENDING
    )  # pending, approved
    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    skills: Mapped[str] = mapped_column(Text, nullable=False, default="")
    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class ResetToken(Base):
    """A single-use password reset token.

    Expiry is logical: rows past `expires_at` are ignored on lookup and
    never swept.
    """

    __tablename__ = "reset_tokens"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    token: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )


# ══════════════════════════════════════════════════════════════
# Check-ins: weekly progress and tasks
# ══════════════════════════════════════════════════════════════


class Progress(Base):
    """A weekly progress report against a project."""

    __tablename__ = "progress"
    __table_args__ = (Index("idx_progress_user", "user_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_name: Mapped[str] = mapped_column(String(200), nullable=False)
    project_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    project_completion: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    week: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    completion: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    user: Mapped["User"] = relationship(lazy="joined")


TASK_STATUSES = ("ongoing", "completed", "blocked")


class Task(Base):
    """A task check-in: what someone is working on and where it stands."""

    __tablename__ = "tasks"
    __table_args__ = (Index("idx_tasks_user", "user_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False
    )  # ongoing, completed, blocked
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    user: Mapped["User"] = relationship(lazy="joined")


# ══════════════════════════════════════════════════════════════
# Meetings
# ══════════════════════════════════════════════════════════════


class Meeting(Base):
    """A meeting scheduled by an admin. `time` is free text from the UI."""

    __tablename__ = "meetings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    time: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    admin_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    admin: Mapped["User"] = relationship(lazy="joined")
    acceptances: Mapped[list["MeetingAcceptance"]] = relationship(
        back_populates="meeting",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class MeetingAcceptance(Base):
    """One user's RSVP to a meeting. The composite key forbids duplicates."""

    __tablename__ = "meeting_acceptances"

    meeting_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("meetings.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    accepted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    meeting: Mapped["Meeting"] = relationship(back_populates="acceptances")
    user: Mapped["User"] = relationship(lazy="joined")


# ══════════════════════════════════════════════════════════════
# Project showcase
# ══════════════════════════════════════════════════════════════


class Project(Base):
    """A project published to the showcase by an admin."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    tech_stack: Mapped[str] = mapped_column(String(500), nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    admin_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    admin: Mapped["User"] = relationship(lazy="joined")
    likes: Mapped[list["ProjectLike"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    comments: Mapped[list["ProjectComment"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProjectComment.id",
    )


class ProjectLike(Base):
    """A like on a project. At most one per user per project."""

    __tablename__ = "project_likes"

    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    project: Mapped["Project"] = relationship(back_populates="likes")
    user: Mapped["User"] = relationship(lazy="joined")


class ProjectComment(Base):
    __tablename__ = "project_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    project: Mapped["Project"] = relationship(back_populates="comments")
    user: Mapped["User"] = relationship(lazy="joined")


# ══════════════════════════════════════════════════════════════
# Resource library
# ══════════════════════════════════════════════════════════════


class Resource(Base):
    """A shared link or note. Needs a link, a description, or both."""

    __tablename__ = "resources"
    __table_args__ = (Index("idx_resources_user", "user_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    link: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    user: Mapped["User"] = relationship(lazy="joined")
