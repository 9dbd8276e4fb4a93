"""Pydantic schemas for meetings and acceptances."""

from datetime import datetime
from typing import Optional

from teamhub.schemas.common import CamelModel, RecordId


class MeetingCreate(CamelModel):
    title: Optional[str] = None
    time: Optional[str] = None
    description: Optional[str] = None
    admin_id: Optional[RecordId] = None


class MeetingCreated(CamelModel):
    message: str
    meeting_id: int


class MeetingAccept(CamelModel):
    meeting_id: Optional[RecordId] = None
    user_id: Optional[RecordId] = None


class Attendee(CamelModel):
    id: int
    name: str
    email: str


class MeetingRead(CamelModel):
    id: int
    title: str
    time: str
    description: Optional[str]
    created_at: datetime
    admin_id: int
    admin_name: str
    has_accepted: bool
    accepted_users: list[Attendee]

    @classmethod
    def from_row(cls, row, viewer_id: int) -> "MeetingRead":
        attendees = [a.user for a in row.acceptances]
        return cls(
            id=row.id,
            title=row.title,
            time=row.time,
            description=row.description,
            created_at=row.created_at,
            admin_id=row.admin_id,
            admin_name=row.admin.name,
            has_accepted=any(u.id == viewer_id for u in attendees),
            accepted_users=[Attendee(id=u.id, name=u.name, email=u.email) for u in attendees],
        )
