"""Check-in service — weekly progress reports and task updates.

Both record types belong to a user. The route decides whose record it
is (self, or anyone for an admin); this layer makes sure that user
exists and writes the row.
"""

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.db.models import TASK_STATUSES, Progress, Task, User
from teamhub.errors import ValidationFailed

logger = structlog.get_logger()


class CheckinService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _require_user(self, user_id: int) -> None:
        if await self.db.get(User, user_id) is None:
            raise ValidationFailed("Invalid user ID")

    # ─── Progress ───────────────────────────────────────

    async def submit_progress(
        self,
        user_id: int,
        project_name: str,
        project_completion: int,
        week: str,
        status: str,
        completion: int,
        project_description: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Progress:
        await self._require_user(user_id)
        progress = Progress(
            user_id=user_id,
            project_name=project_name,
            project_description=project_description or None,
            project_completion=project_completion,
            week=week,
            status=status,
            completion=completion,
            notes=notes or None,
        )
        self.db.add(progress)
        await self.db.commit()
        logger.info(
            "progress.submitted",
            user_id=user_id,
            project=project_name,
            week=week,
        )
        return progress

    async def list_progress(self) -> list[Progress]:
        result = await self.db.execute(
            select(Progress).order_by(Progress.created_at.desc(), Progress.id.desc())
        )
        return list(result.scalars().all())

    # ─── Tasks ──────────────────────────────────────────

    async def submit_task(
        self,
        user_id: int,
        task: str,
        status: str,
        description: Optional[str] = None,
    ) -> Task:
        status = status.lower()
        if status not in TASK_STATUSES:
            raise ValidationFailed(
                "Invalid status value. Must be one of: " + ", ".join(TASK_STATUSES)
            )
        await self._require_user(user_id)
        row = Task(
            user_id=user_id,
            task=task,
            description=description or None,
            status=status,
        )
        self.db.add(row)
        await self.db.commit()
        logger.info("tasks.submitted", user_id=user_id, status=status)
        return row

    async def list_tasks(self) -> list[Task]:
        result = await self.db.execute(
            select(Task).order_by(Task.created_at.desc(), Task.id.desc())
        )
        return list(result.scalars().all())
