"""Meetings API.

- GET /meetings → all meetings, soonest first, with who accepted
- POST /meetings → schedule (admins, as themselves)
- POST /meetings/accept → accept a meeting (as yourself)
- DELETE /meetings/{meeting_id} → cancel (the admin who scheduled it)
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.auth.dependencies import (
    CurrentIdentity,
    ensure_self,
    get_current_user,
    require_admin,
)
from teamhub.db.engine import get_db
from teamhub.errors import ValidationFailed
from teamhub.schemas.common import MAX_ID, Message
from teamhub.schemas.meeting import (
    MeetingAccept,
    MeetingCreate,
    MeetingCreated,
    MeetingRead,
)
from teamhub.services.meeting_service import MeetingService

router = APIRouter(prefix="/meetings")


def _svc(db: AsyncSession = Depends(get_db)) -> MeetingService:
    return MeetingService(db)


@router.get("", response_model=list[MeetingRead])
async def list_meetings(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: MeetingService = Depends(_svc),
):
    return [
        MeetingRead.from_row(m, viewer_id=identity.user_id)
        for m in await svc.list_meetings()
    ]


@router.post("", response_model=MeetingCreated, status_code=201)
async def create_meeting(
    body: MeetingCreate,
    admin: CurrentIdentity = Depends(require_admin),
    svc: MeetingService = Depends(_svc),
):
    if not body.title or not body.time:
        raise ValidationFailed("Title and time are required")
    admin_id = ensure_self(admin, body.admin_id, "Only admins can schedule meetings")

    meeting = await svc.create_meeting(
        admin_id=admin_id,
        title=body.title,
        time=body.time,
        description=body.description,
    )
    return MeetingCreated(message="Meeting scheduled successfully", meeting_id=meeting.id)


@router.post("/accept", response_model=Message)
async def accept_meeting(
    body: MeetingAccept,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: MeetingService = Depends(_svc),
):
    if not body.meeting_id:
        raise ValidationFailed("Meeting ID is required")
    user_id = ensure_self(identity, body.user_id, "Unauthorized to accept for this user")

    await svc.accept(body.meeting_id, user_id)
    return Message(message="Meeting accepted successfully")


@router.delete("/{meeting_id}", response_model=Message)
async def delete_meeting(
    meeting_id: int = Path(ge=1, le=MAX_ID),
    admin: CurrentIdentity = Depends(require_admin),
    svc: MeetingService = Depends(_svc),
):
    await svc.delete_meeting(meeting_id, requester_id=admin.user_id)
    return Message(message="Meeting deleted successfully")
