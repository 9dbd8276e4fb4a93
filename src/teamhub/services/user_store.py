"""Credential store — users and password reset tokens.

Every operation is a point lookup or write keyed by a unique index, and
each write commits as its own transaction. Uniqueness is the database's
job: an insert that trips a unique constraint surfaces as DuplicateKey,
so two concurrent signups for one email can't both succeed.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.db.models import ResetToken, User
from teamhub.errors import DuplicateKey, NotFound


class UserStore:
    """Persistence for User and ResetToken rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Users ──────────────────────────────────────────

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def find_by_id(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def create(self, user: User) -> int:
        """Insert a user and return its id.

        Raises DuplicateKey if the email is already registered.
        """
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateKey("User already exists")
        return user.id

    async def update_status(self, user_id: int, status: str) -> None:
        await self.db.execute(
            update(User).where(User.id == user_id).values(status=status)
        )
        await self.db.commit()

    async def update_password(self, user_id: int, password_hash: str) -> None:
        await self.db.execute(
            update(User).where(User.id == user_id).values(password_hash=password_hash)
        )
        await self.db.commit()

    async def update_profile(
        self,
        user_id: int,
        name: str,
        skills: str,
        linkedin_url: Optional[str],
    ) -> User:
        """Update profile fields and return the stored row.

        The read, the write, and the read-back share one transaction with
        the row locked, so a concurrent delete can't leave us reporting a
        profile that no longer exists.
        """
        result = await self.db.execute(
            select(User).where(User.id == user_id).with_for_update()
        )
        user = result.scalars().first()
        if user is None:
            await self.db.rollback()
            raise NotFound("User not found")

        user.name = name
        user.skills = skills
        user.linkedin_url = linkedin_url
        await self.db.commit()
        return user

    # ─── Reset tokens ───────────────────────────────────

    async def create_reset_token(
        self, user_id: int, token: str, expires_at: datetime
    ) -> ResetToken:
        reset = ResetToken(user_id=user_id, token=token, expires_at=expires_at)
        self.db.add(reset)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateKey("Reset token already exists")
        return reset

    async def find_valid_reset_token(
        self, token: str, now: datetime
    ) -> Optional[ResetToken]:
        """Return the token row iff it exists and `expires_at > now`."""
        result = await self.db.execute(
            select(ResetToken).where(
                ResetToken.token == token,
                ResetToken.expires_at > now,
            )
        )
        return result.scalars().first()

    async def delete_reset_token(self, token: str) -> bool:
        """Delete a token. True if a row was actually removed."""
        result = await self.db.execute(
            delete(ResetToken).where(ResetToken.token == token)
        )
        await self.db.commit()
        return result.rowcount > 0

    async def consume_reset_token(
        self, token: str, password_hash: str, now: datetime
    ) -> Optional[int]:
        """Spend a reset token on a new password hash.

        Deleting the token and writing the password happen in one
        transaction; only the caller whose DELETE removed the row gets to
        write, so a token can't be spent twice even by concurrent requests.
        Returns the user id, or None if the token was invalid or expired.
        """
        reset = await self.find_valid_reset_token(token, now)
        if reset is None:
            await self.db.rollback()
            return None
        user_id = reset.user_id

        result = await self.db.execute(
            delete(ResetToken).where(ResetToken.token == token)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            return None

        await self.db.execute(
            update(User).where(User.id == user_id).values(password_hash=password_hash)
        )
        await self.db.commit()
        return user_id
