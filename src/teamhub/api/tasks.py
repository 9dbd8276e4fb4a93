"""Task check-in API.

- POST /tasks → log a task for yourself (admins: for anyone)
- GET /tasks/view → every task, newest first (admins only)
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
from teamhub.schemas.checkin import TaskCreate, TaskRead
from teamhub.schemas.common import Message
from teamhub.services.checkin_service import CheckinService

router = APIRouter(prefix="/tasks")


def _svc(db: AsyncSession = Depends(get_db)) -> CheckinService:
    return CheckinService(db)


@router.post("", response_model=Message, status_code=201)
async def submit_task(
    body: TaskCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: CheckinService = Depends(_svc),
):
    if not body.task or not body.status:
        raise ValidationFailed("Missing required fields: task, status")

    user_id = ensure_self_or_admin(identity, body.user_id)
    await svc.submit_task(
        user_id=user_id,
        task=body.task,
        status=body.status,
        description=body.description,
    )
    return Message(message="Task added successfully")


@router.get("/view", response_model=list[TaskRead])
async def view_tasks(
    admin: CurrentIdentity = Depends(require_admin),
    svc: CheckinService = Depends(_svc),
):
    return [TaskRead.from_row(row) for row in await svc.list_tasks()]
