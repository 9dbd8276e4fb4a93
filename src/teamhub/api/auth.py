"""Auth API — signup, login/logout, session checks, approval, password reset.

- POST /auth/signup → create an account (members start pending)
- POST /auth/login → email/password → session cookie + token in body
- POST /auth/logout → clear the session cookie
- GET /auth/check, /auth/verify → who am I
- PUT /auth/approve/{user_id} → admin approves a pending member
- POST /auth/forgot-password → issue a one-hour reset token
- POST /auth/reset-password → spend a reset token on a new password
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from teamhub.auth.dependencies import CurrentIdentity, get_current_user, require_admin
from teamhub.config import settings
from teamhub.db.engine import get_db
from teamhub.errors import ValidationFailed
from teamhub.schemas.common import MAX_ID, Message
from teamhub.schemas.user import UserSummary
from teamhub.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


def _svc(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


# ─── Schemas ─────────────────────────────────────────────


class SignupRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    skills: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    message: str
    user: UserSummary
    token: str


class SessionUser(BaseModel):
    user: UserSummary


class VerifyResponse(BaseModel):
    authenticated: bool
    user: UserSummary


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    token: Optional[str] = None
    password: Optional[str] = None


def _summary(user) -> UserSummary:
    return UserSummary(id=user.id, email=user.email, name=user.name, role=user.role)


# ─── Signup ──────────────────────────────────────────────


@router.post("/signup", response_model=Message, status_code=201)
async def signup(body: SignupRequest, svc: AuthService = Depends(_svc)):
    """Create a new account."""
    if not body.email or not body.password or not body.name:
        raise ValidationFailed("Email, password, and name are required")

    user = await svc.signup(
        email=body.email.strip(),
        password=body.password,
        name=body.name,
        role=body.role,
        skills=body.skills,
    )
    if user.status == "pending":
        return Message(message="Registration successful. Waiting for admin approval.")
    return Message(message="Registration successful. You can now login.")


# ─── Login / logout ─────────────────────────────────────


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, response: Response, svc: AuthService = Depends(_svc)):
    """Login with email and password → session cookie (and token in body)."""
    if not body.email or not body.password:
        raise ValidationFailed("Email and password are required")

    user, token = await svc.login(body.email.strip(), body.password)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_hours * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return LoginResponse(message="Login successful", user=_summary(user), token=token)


@router.post("/logout", response_model=Message)
async def logout(response: Response):
    """Drop the session cookie. The token itself stays valid until it expires."""
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    return Message(message="Logged out")


# ─── Current user ───────────────────────────────────────


@router.get("/check", response_model=SessionUser)
async def check(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: AuthService = Depends(_svc),
):
    user = await svc.get_user(identity.user_id)
    return SessionUser(user=_summary(user))


@router.get("/verify", response_model=VerifyResponse)
async def verify(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: AuthService = Depends(_svc),
):
    """Same as /check, in the shape the frontend's route guard expects."""
    user = await svc.get_user(identity.user_id)
    return VerifyResponse(authenticated=True, user=_summary(user))


# ─── Approval ───────────────────────────────────────────


@router.put("/approve/{user_id}", response_model=Message)
async def approve(
    user_id: int = Path(ge=1, le=MAX_ID),
    admin: CurrentIdentity = Depends(require_admin),
    svc: AuthService = Depends(_svc),
):
    await svc.approve(user_id, approved_by=admin.user_id)
    return Message(message="User approved")


# ─── Password reset ─────────────────────────────────────


@router.post("/forgot-password", response_model=Message)
async def forgot_password(body: ForgotPasswordRequest, svc: AuthService = Depends(_svc)):
    if not body.email:
        raise ValidationFailed("Email is required")
    await svc.request_password_reset(body.email.strip())
    return Message(message="Password reset instructions sent")


@router.post("/reset-password", response_model=Message)
async def reset_password(body: ResetPasswordRequest, svc: AuthService = Depends(_svc)):
    if not body.token or not body.password:
        raise ValidationFailed("Token and new password are required")
    await svc.reset_password(body.token, body.password)
    return Message(message="Password has been reset successfully")
