"""User directory and profile API.

- GET /users → everyone on the team (any signed-in user)
- PUT /users/{user_id} → edit your own profile; no admin override
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.auth.dependencies import CurrentIdentity, ensure_self, get_current_user
from teamhub.db.engine import get_db
from teamhub.errors import ValidationFailed
from teamhub.schemas.common import MAX_ID
from teamhub.schemas.user import ProfileUpdate, ProfileUpdated, UserRead
from teamhub.services.auth_service import AuthService

router = APIRouter(prefix="/users")


def _svc(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.get("", response_model=list[UserRead])
async def list_users(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: AuthService = Depends(_svc),
):
    return await svc.list_users()


@router.put("/{user_id}", response_model=ProfileUpdated)
async def update_profile(
    body: ProfileUpdate,
    user_id: int = Path(ge=1, le=MAX_ID),
    identity: CurrentIdentity = Depends(get_current_user),
    svc: AuthService = Depends(_svc),
):
    ensure_self(identity, user_id, "You can only update your own profile")
    if not body.name or not body.skills:
        raise ValidationFailed("Name and skills are required")

    user = await svc.update_profile(
        user_id,
        name=body.name,
        skills=body.skills,
        linkedin_url=body.linkedin_url,
    )
    return ProfileUpdated(
        message="Profile updated successfully",
        user=UserRead.model_validate(user),
    )
