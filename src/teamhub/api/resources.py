"""Resource library API.

- GET /resources → everything shared, newest first
- POST /resources → share a link or note (as yourself)
- DELETE /resources/{resource_id} → remove (owner or admin)
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.auth.dependencies import (
    CurrentIdentity,
    ensure_owner_or_admin,
    ensure_self,
    get_current_user,
)
from teamhub.db.engine import get_db
from teamhub.errors import ValidationFailed
from teamhub.schemas.common import MAX_ID, Message
from teamhub.schemas.resource import ResourceCreate, ResourceCreated, ResourceRead
from teamhub.services.resource_service import ResourceService

router = APIRouter(prefix="/resources")


def _svc(db: AsyncSession = Depends(get_db)) -> ResourceService:
    return ResourceService(db)


@router.get("", response_model=list[ResourceRead])
async def list_resources(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ResourceService = Depends(_svc),
):
    return [ResourceRead.from_row(r) for r in await svc.list_resources()]


@router.post("", response_model=ResourceCreated, status_code=201)
async def create_resource(
    body: ResourceCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ResourceService = Depends(_svc),
):
    if (
        not body.title
        or not body.type
        or not body.tags
        or (not body.link and not body.description)
    ):
        raise ValidationFailed(
            "Title, type, tags, and either link or description are required"
        )
    user_id = ensure_self(identity, body.user_id, "Unauthorized to publish for this user")

    resource = await svc.create_resource(
        user_id=user_id,
        title=body.title,
        type=body.type,
        tags=body.tags,
        link=body.link,
        description=body.description,
    )
    return ResourceCreated(
        message="Resource published successfully", resource_id=resource.id
    )


@router.delete("/{resource_id}", response_model=Message)
async def delete_resource(
    resource_id: int = Path(ge=1, le=MAX_ID),
    identity: CurrentIdentity = Depends(get_current_user),
    svc: ResourceService = Depends(_svc),
):
    resource = await svc.get_resource(resource_id)
    ensure_owner_or_admin(identity, resource.user_id, "Unauthorized to delete this resource")
    await svc.delete_resource(resource_id, requester_id=identity.user_id)
    return Message(message="Resource deleted successfully")
