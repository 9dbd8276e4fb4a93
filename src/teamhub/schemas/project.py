"""Pydantic schemas for the project showcase."""

from datetime import datetime
from typing import Optional

from teamhub.schemas.common import CamelModel, RecordId


class ProjectCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    tech_stack: Optional[str] = None
    image_url: Optional[str] = None
    admin_id: Optional[RecordId] = None


class ProjectCreated(CamelModel):
    message: str
    project_id: int


class ProjectLikeToggle(CamelModel):
    project_id: Optional[RecordId] = None
    user_id: Optional[RecordId] = None


class ProjectLikeResult(CamelModel):
    message: str
    liked: bool


class CommentCreate(CamelModel):
    project_id: Optional[RecordId] = None
    user_id: Optional[RecordId] = None
    content: Optional[str] = None


class Liker(CamelModel):
    id: int
    name: str
    email: str


class CommentRead(CamelModel):
    id: int
    content: str
    user_name: str


class ProjectRead(CamelModel):
    id: int
    title: str
    description: str
    tech_stack: str
    image_url: Optional[str]
    created_at: datetime
    admin_name: str
    has_liked: bool
    likes: list[Liker]
    comments: list[CommentRead]

    @classmethod
    def from_row(cls, row, viewer_id: int) -> "ProjectRead":
        likers = [like.user for like in row.likes]
        return cls(
            id=row.id,
            title=row.title,
            description=row.description,
            tech_stack=row.tech_stack,
            image_url=row.image_url,
            created_at=row.created_at,
            admin_name=row.admin.name,
            has_liked=any(u.id == viewer_id for u in likers),
            likes=[Liker(id=u.id, name=u.name, email=u.email) for u in likers],
            comments=[
                CommentRead(id=c.id, content=c.content, user_name=c.user.name)
                for c in row.comments
            ],
        )
