"""Pydantic schemas for users and profiles."""

from typing import Optional

from teamhub.schemas.common import CamelModel


class UserSummary(CamelModel):
    """What the session and auth endpoints reveal about a user."""
    id: int
    email: str
    name: str
    role: str


class UserRead(UserSummary):
    status: str
    skills: str = ""
    linkedin_url: Optional[str] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = None
    skills: Optional[str] = None
    linkedin_url: Optional[str] = None


class ProfileUpdated(CamelModel):
    message: str
    user: UserRead
