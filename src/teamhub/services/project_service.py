"""Project showcase service — publishing, likes, comments.

A like is a toggle: liking a liked project removes the like. The
composite key on project_likes keeps it to one like per user even when
two toggles race.
"""

from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from teamhub.db.models import Project, ProjectComment, ProjectLike
from teamhub.errors import Conflict, NotFound

logger = structlog.get_logger()


class ProjectService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_projects(self) -> list[Project]:
        result = await self.db.execute(
            select(Project)
            .options(selectinload(Project.likes), selectinload(Project.comments))
            .order_by(Project.created_at.desc(), Project.id.desc())
        )
        return list(result.scalars().all())

    async def _require_project(self, project_id: int) -> Project:
        project = await self.db.get(Project, project_id)
        if project is None:
            raise NotFound("Project not found")
        return project

    async def create_project(
        self,
        admin_id: int,
        title: str,
        description: str,
        tech_stack: str,
        image_url: Optional[str] = None,
    ) -> Project:
        project = Project(
            admin_id=admin_id,
            title=title,
            description=description,
            tech_stack=tech_stack,
            image_url=image_url or None,
        )
        self.db.add(project)
        await self.db.commit()
        logger.info("projects.created", project_id=project.id, admin_id=admin_id)
        return project

    async def toggle_like(self, project_id: int, user_id: int) -> bool:
        """Like or unlike. Returns True if the project is now liked."""
        await self._require_project(project_id)

        existing = await self.db.get(ProjectLike, (project_id, user_id))
        if existing is not None:
            await self.db.delete(existing)
            await self.db.commit()
            logger.info("projects.unliked", project_id=project_id, user_id=user_id)
            return False

        self.db.add(ProjectLike(project_id=project_id, user_id=user_id))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("Project already liked")
        logger.info("projects.liked", project_id=project_id, user_id=user_id)
        return True

    async def add_comment(
        self, project_id: int, user_id: int, content: str
    ) -> ProjectComment:
        await self._require_project(project_id)
        comment = ProjectComment(project_id=project_id, user_id=user_id, content=content)
        self.db.add(comment)
        await self.db.commit()
        logger.info("projects.commented", project_id=project_id, user_id=user_id)
        return comment

    async def delete_project(self, project_id: int, requester_id: int) -> None:
        await self._require_project(project_id)
        # Likes and comments go with it via ON DELETE CASCADE
        await self.db.execute(delete(Project).where(Project.id == project_id))
        await self.db.commit()
        logger.info("projects.deleted", project_id=project_id, by=requester_id)
