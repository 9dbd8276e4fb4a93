"""Pydantic schemas for weekly progress reports and task check-ins.

Create schemas leave every field optional so the route can answer a
missing field with the same message the frontend already shows.
"""

from datetime import datetime
from typing import Optional

from pydantic import StrictInt

from teamhub.schemas.common import CamelModel, RecordId


# ─── Progress ─────────────────────────────────────────────

class ProgressCreate(CamelModel):
    project_name: Optional[str] = None
    project_description: Optional[str] = None
    project_completion: Optional[StrictInt] = None
    user_id: Optional[RecordId] = None
    week: Optional[str] = None
    status: Optional[str] = None
    completion: Optional[StrictInt] = None
    notes: Optional[str] = None


class ProgressRead(CamelModel):
    id: int
    project_name: str
    project_description: Optional[str]
    project_completion: int
    user_id: int
    week: str
    status: str
    completion: int
    notes: Optional[str]
    created_at: datetime
    user_name: str
    user_email: str

    @classmethod
    def from_row(cls, row) -> "ProgressRead":
        return cls(
            id=row.id,
            project_name=row.project_name,
            project_description=row.project_description,
            project_completion=row.project_completion,
            user_id=row.user_id,
            week=row.week,
            status=row.status,
            completion=row.completion,
            notes=row.notes,
            created_at=row.created_at,
            user_name=row.user.name,
            user_email=row.user.email,
        )


# ─── Tasks ────────────────────────────────────────────────

class TaskCreate(CamelModel):
    task: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    user_id: Optional[RecordId] = None


class TaskRead(CamelModel):
    id: int
    task: str
    description: Optional[str]
    status: str
    user_id: int
    created_at: datetime
    user_name: str
    user_email: str

    @classmethod
    def from_row(cls, row) -> "TaskRead":
        return cls(
            id=row.id,
            task=row.task,
            description=row.description,
            status=row.status,
            user_id=row.user_id,
            created_at=row.created_at,
            user_name=row.user.name,
            user_email=row.user.email,
        )
