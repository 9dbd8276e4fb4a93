"""Resource library service."""

from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.db.models import Resource
from teamhub.errors import NotFound

logger = structlog.get_logger()


class ResourceService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_resources(self) -> list[Resource]:
        result = await self.db.execute(
            select(Resource).order_by(Resource.created_at.desc(), Resource.id.desc())
        )
        return list(result.scalars().all())

    async def get_resource(self, resource_id: int) -> Resource:
        resource = await self.db.get(Resource, resource_id)
        if resource is None:
            raise NotFound("Resource not found")
        return resource

    async def create_resource(
        self,
        user_id: int,
        title: str,
        type: str,
        tags: list[str],
        link: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Resource:
        resource = Resource(
            user_id=user_id,
            title=title,
            type=type,
            tags=list(tags),
            link=link or None,
            description=description or None,
        )
        self.db.add(resource)
        await self.db.commit()
        logger.info("resources.created", resource_id=resource.id, user_id=user_id)
        return resource

    async def delete_resource(self, resource_id: int, requester_id: int) -> None:
        await self.db.execute(delete(Resource).where(Resource.id == resource_id))
        await self.db.commit()
        logger.info("resources.deleted", resource_id=resource_id, by=requester_id)
