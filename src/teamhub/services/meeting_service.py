"""Meeting service — scheduling, acceptance, and cancellation.

Rules:
- only admins schedule (enforced by the route)
- the meeting's creator can't accept their own meeting
- a user accepts a meeting at most once; the composite primary key on
  meeting_acceptances enforces it even under concurrent requests
- only the creating admin can delete a meeting
"""

from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from teamhub.db.models import Meeting, MeetingAcceptance
from teamhub.errors import Conflict, Forbidden, NotFound

logger = structlog.get_logger()


class MeetingService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_meetings(self) -> list[Meeting]:
        result = await self.db.execute(
            select(Meeting)
            .options(selectinload(Meeting.acceptances))
            .order_by(Meeting.time.asc(), Meeting.id.asc())
        )
        return list(result.scalars().all())

    async def create_meeting(
        self, admin_id: int, title: str, time: str, description: Optional[str] = None
    ) -> Meeting:
        meeting = Meeting(
            admin_id=admin_id,
            title=title,
            time=time,
            description=description or None,
        )
        self.db.add(meeting)
        await self.db.commit()
        logger.info("meetings.created", meeting_id=meeting.id, admin_id=admin_id)
        return meeting

    async def accept(self, meeting_id: int, user_id: int) -> None:
        meeting = await self.db.get(Meeting, meeting_id)
        if meeting is None:
            raise NotFound("Meeting not found")
        if meeting.admin_id == user_id:
            raise Forbidden("Admins cannot accept their own meetings")

        existing = await self.db.get(MeetingAcceptance, (meeting_id, user_id))
        if existing is not None:
            raise Conflict("Meeting already accepted")

        self.db.add(MeetingAcceptance(meeting_id=meeting_id, user_id=user_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("Meeting already accepted")
        logger.info("meetings.accepted", meeting_id=meeting_id, user_id=user_id)

    async def delete_meeting(self, meeting_id: int, requester_id: int) -> None:
        meeting = await self.db.get(Meeting, meeting_id)
        if meeting is None:
            raise NotFound("Meeting not found")
        if meeting.admin_id != requester_id:
            raise Forbidden("Only the meeting creator can delete it")

        # Acceptances go with it via ON DELETE CASCADE
        await self.db.execute(delete(Meeting).where(Meeting.id == meeting_id))
        await self.db.commit()
        logger.info("meetings.deleted", meeting_id=meeting_id, by=requester_id)
