"""Auth service — signup, login, approval, password reset, profile edits.

Service layer separates business logic from HTTP routing: routes check
presence of fields and hand over, this module applies the account
policies and talks to the credential store. Cookie handling stays in
the route.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.auth.password import hash_password, verify_password
from teamhub.auth.session import issue_session_token
from teamhub.config import settings
from teamhub.db.models import (
    ROLE_ADMIN,
    ROLE_USER,
    STATUS_APPROVED,
    STATUS_PENDING,
    User,
)
from teamhub.errors import Conflict, Forbidden, NotFound, Unauthenticated, ValidationFailed
from teamhub.services.user_store import UserStore

logger = structlog.get_logger()

# Same message for an unknown email and a wrong password.
LOGIN_FAILED = "Login failed. Please try again."


class AuthService:
    """Account lifecycle on top of UserStore."""

    def __init__(self, db: AsyncSession):
        self.store = UserStore(db)

    async def signup(
        self,
        email: str,
        password: str,
        name: str,
        role: Optional[str] = None,
        skills: Optional[str] = None,
    ) -> User:
        """Register an account. Admins start approved, members pending."""
        role = role or ROLE_USER
        if role not in (ROLE_ADMIN, ROLE_USER):
            raise ValidationFailed("Role must be admin or user")

        if await self.store.find_by_email(email):
            logger.info("auth.signup_duplicate", email=email)
            raise Conflict("User already exists")

        user = User(
            email=email,
            password_hash=hash_password(password),
            name=name,
            role=role,
            status=STATUS_APPROVED if role == ROLE_ADMIN else STATUS_PENDING,
            skills=skills or "",
        )
        # The unique index on email still rejects a concurrent duplicate.
        await self.store.create(user)
        logger.info("auth.signup", user_id=user.id, role=role, status=user.status)
        return user

    async def login(self, email: str, password: str) -> tuple[User, str]:
        """Check credentials and mint a session token."""
        user = await self.store.find_by_email(email)
        if user is None:
            logger.info("auth.login_failed", reason="unknown_email")
            raise Unauthenticated(LOGIN_FAILED)
        if not verify_password(password, user.password_hash):
            logger.info("auth.login_failed", reason="bad_password", user_id=user.id)
            raise Unauthenticated(LOGIN_FAILED)

        if settings.require_approval_for_login and user.status != STATUS_APPROVED:
            logger.info("auth.login_pending", user_id=user.id)
            raise Forbidden("Account is awaiting admin approval")

        token = issue_session_token(
            user_id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
        )
        logger.info("auth.login", user_id=user.id)
        return user, token

    async def get_user(self, user_id: int) -> User:
        user = await self.store.find_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def list_users(self) -> list[User]:
        return await self.store.list_users()

    async def approve(self, user_id: int, approved_by: int) -> None:
        """pending → approved. Approving twice is a conflict, not a no-op."""
        user = await self.store.find_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        if user.status == STATUS_APPROVED:
            raise Conflict("User already approved")
        await self.store.update_status(user_id, STATUS_APPROVED)
        logger.info("auth.approved", user_id=user_id, approved_by=approved_by)

    async def request_password_reset(self, email: str) -> str:
        """Create a one-hour reset token for the account behind `email`.

        There's no mailer: the link is written to the log outside
        production. Returns the raw token.
        """
        user = await self.store.find_by_email(email)
        if user is None:
            logger.info("auth.reset_unknown_email")
            raise NotFound("No account found with this email")

        token = secrets.token_hex(32)
        expires_at = datetime.now(timezone.utc) + timedelta(
            minutes=settings.reset_token_ttl_minutes
        )
        await self.store.create_reset_token(user.id, token, expires_at)

        if not settings.is_production:
            logger.info(
                "auth.reset_link",
                user_id=user.id,
                link=f"{settings.frontend_url.rstrip('/')}/reset-password/{token}",
                expires_at=expires_at.isoformat(),
            )
        else:
            logger.info("auth.reset_requested", user_id=user.id)
        return token

    async def reset_password(self, token: str, password: str) -> int:
        """Spend a reset token. Invalid, expired, and used tokens all fail the same."""
        user_id = await self.store.consume_reset_token(
            token, hash_password(password), datetime.now(timezone.utc)
        )
        if user_id is None:
            logger.info("auth.reset_rejected")
            raise ValidationFailed("Invalid or expired reset token")
        logger.info("auth.password_reset", user_id=user_id)
        return user_id

    async def set_password(self, user_id: int, password: str) -> None:
        await self.store.update_password(user_id, hash_password(password))

    async def update_profile(
        self,
        user_id: int,
        name: str,
        skills: str,
        linkedin_url: Optional[str] = None,
    ) -> User:
        user = await self.store.update_profile(
            user_id, name=name, skills=skills, linkedin_url=linkedin_url or None
        )
        logger.info("users.profile_updated", user_id=user_id)
        return user
