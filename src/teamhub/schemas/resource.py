"""Pydantic schemas for the resource library."""

from datetime import datetime
from typing import Optional

from teamhub.schemas.common import CamelModel, RecordId


class ResourceCreate(CamelModel):
    title: Optional[str] = None
    type: Optional[str] = None
    tags: Optional[list[str]] = None
    link: Optional[str] = None
    description: Optional[str] = None
    user_id: Optional[RecordId] = None


class ResourceCreated(CamelModel):
    message: str
    resource_id: int


class ResourceRead(CamelModel):
    id: int
    title: str
    type: str
    tags: list[str]
    link: Optional[str]
    description: Optional[str]
    created_at: datetime
    user_id: int
    user_name: str

    @classmethod
    def from_row(cls, row) -> "ResourceRead":
        return cls(
            id=row.id,
            title=row.title,
            type=row.type,
            tags=row.tags or [],
            link=row.link,
            description=row.description,
            created_at=row.created_at,
            user_id=row.user_id,
            user_name=row.user.name,
        )
