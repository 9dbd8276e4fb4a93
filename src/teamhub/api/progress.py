"""Weekly progress API.

- POST /progress → submit a report for yourself (admins: for anyone)
- GET /progress/view → every report, newest first (admins only)
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.auth.dependencies import (
    CurrentIdentity,
    ensure_self_or_admin,
    get_current_user,
    require_admin,
)
from teamhub.db.engine import get_db
from teamhub.errors import ValidationFailed
from teamhub.schemas.checkin import ProgressCreate, ProgressRead
from teamhub.schemas.common import Message
from teamhub.services.checkin_service import CheckinService

router = APIRouter(prefix="/progress")


def _svc(db: AsyncSession = Depends(get_db)) -> CheckinService:
    return CheckinService(db)


def _is_percentage(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 100


@router.post("", response_model=Message, status_code=201)
async def submit_progress(
    body: ProgressCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: CheckinService = Depends(_svc),
):
    if not body.project_name or not body.week or not body.status:
        raise ValidationFailed("Missing required fields: projectName, week, status")
    if not _is_percentage(body.project_completion):
        raise ValidationFailed("Project completion must be an integer between 0 and 100")
    if not _is_percentage(body.completion):
        raise ValidationFailed("Weekly completion must be an integer between 0 and 100")

    user_id = ensure_self_or_admin(identity, body.user_id)
    await svc.submit_progress(
        user_id=user_id,
        project_name=body.project_name,
        project_description=body.project_description,
        project_completion=body.project_completion,
        week=body.week,
        status=body.status,
        completion=body.completion,
        notes=body.notes,
    )
    return Message(message="Progress submitted")


@router.get("/view", response_model=list[ProgressRead])
async def view_progress(
    admin: CurrentIdentity = Depends(require_admin),
    svc: CheckinService = Depends(_svc),
):
    return [ProgressRead.from_row(row) for row in await svc.list_progress()]
