"""Project showcase API.

- GET /projects → all projects with likes and comments, newest first
- POST /projects → publish (admins, as themselves)
- POST /projects/like → toggle your like
- POST /projects/comment → comment as yourself
- DELETE /projects/{project_id} → remove (admins)
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
from teamhub.schemas.project import (
    CommentCreate,
    ProjectCreate,
    ProjectCreated,
    ProjectLikeResult,
    ProjectLikeToggle,
    ProjectRead,
)
from teamhub.services.project_service import ProjectService

router = APIRouter(prefix="/projects")


def _svc(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


@router.get("", response_model=list[ProjectRead])
async def list_projects(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    return [
        ProjectRead.from_row(p, viewer_id=identity.user_id)
        for p in await svc.list_projects()
    ]


@router.post("", response_model=ProjectCreated, status_code=201)
async def create_project(
    body: ProjectCreate,
    admin: CurrentIdentity = Depends(require_admin),
    svc: ProjectService = Depends(_svc),
):
    if not body.title or not body.description or not body.tech_stack:
        raise ValidationFailed("Title, description, and techStack are required")
    admin_id = ensure_self(admin, body.admin_id, "Only admins can publish projects")

    project = await svc.create_project(
        admin_id=admin_id,
        title=body.title,
        description=body.description,
        tech_stack=body.tech_stack,
        image_url=body.image_url,
    )
    return ProjectCreated(message="Project published successfully", project_id=project.id)


@router.post("/like", response_model=ProjectLikeResult)
async def toggle_like(
    body: ProjectLikeToggle,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    if not body.project_id:
        raise ValidationFailed("Project ID is required")
    user_id = ensure_self(identity, body.user_id, "Unauthorized to like for this user")

    liked = await svc.toggle_like(body.project_id, user_id)
    message = "Like added successfully" if liked else "Like removed successfully"
    return ProjectLikeResult(message=message, liked=liked)


@router.post("/comment", response_model=Message, status_code=201)
async def add_comment(
    body: CommentCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ProjectService = Depends(_svc),
):
    if not body.project_id or not body.content:
        raise ValidationFailed("Project ID and content are required")
    user_id = ensure_self(identity, body.user_id, "Unauthorized to comment for this user")

    await svc.add_comment(body.project_id, user_id, body.content)
    return Message(message="Comment added successfully")


@router.delete("/{project_id}", response_model=Message)
async def delete_project(
    project_id: int = Path(ge=1, le=MAX_ID),
    admin: CurrentIdentity = Depends(require_admin),
    svc: ProjectService = Depends(_svc),
):
    await svc.delete_project(project_id, requester_id=admin.user_id)
    return Message(message="Project deleted successfully")
