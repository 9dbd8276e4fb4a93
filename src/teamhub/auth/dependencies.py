"""FastAPI auth dependencies — the authorization guard.

These are used as Depends() in route handlers to extract and validate
the caller's identity before any handler logic (or any write) runs.

Step 1, authentication: the session token comes from the session cookie,
falling back to an `Authorization: Bearer` header for clients that can't
hold cookies. No token → 401. A token that fails verification → 403.

Step 2, authorization: each route declares one rule:
any-authenticated (get_current_user), role=admin (require_admin), or one
of the ownership checks below, which compare the verified identity with
whatever id the client claims to be acting for.
"""

from typing import Optional

from fastapi import Depends, Request

from teamhub.auth.session import SessionClaims, TokenError, verify_session_token
from teamhub.config import settings
from teamhub.errors import Forbidden, InvalidCredentials, Unauthenticated


class CurrentIdentity:
    """Represents the authenticated user making the request.

    Built straight from the verified session claims. The guard does not
    hit the database, so role changes apply from the next login.
    """

    def __init__(self, user_id: int, email: str, name: str, role: str):
        self.user_id = user_id
        self.email = email
        self.name = name
        self.role = role

    @classmethod
    def from_claims(cls, claims: SessionClaims) -> "CurrentIdentity":
        return cls(
            user_id=claims.user_id,
            email=claims.email,
            name=claims.name,
            role=claims.role,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def extract_token(request: Request) -> Optional[str]:
    """Session cookie first, then a bearer header."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        return authorization[7:].strip() or None
    return None


async def get_current_user_optional(request: Request) -> Optional[CurrentIdentity]:
    """Extract current identity, or None if there is no token.

    A token that is present but doesn't verify is still rejected.
    """
    token = extract_token(request)
    if not token:
        return None
    try:
        claims = verify_session_token(token)
    except TokenError:
        raise InvalidCredentials("Invalid token")
    return CurrentIdentity.from_claims(claims)


async def get_current_user(
    identity: Optional[CurrentIdentity] = Depends(get_current_user_optional),
) -> CurrentIdentity:
    """Extract current identity; 401 if there is no token."""
    if identity is None:
        raise Unauthenticated("No token provided")
    return identity


async def require_admin(
    identity: CurrentIdentity = Depends(get_current_user),
) -> CurrentIdentity:
    """role=admin rule."""
    if not identity.is_admin:
        raise Forbidden("Admin access required")
    return identity


# ─── Ownership rules ─────────────────────────────────────


def ensure_self(
    identity: CurrentIdentity,
    target_user_id: Optional[int],
    message: str = "You can only act for yourself",
) -> int:
    """self rule, no admin override. Returns the acting user id.

    A missing target means "me".
    """
    if target_user_id is not None and target_user_id != identity.user_id:
        raise Forbidden(message)
    return identity.user_id


def ensure_self_or_admin(
    identity: CurrentIdentity,
    target_user_id: Optional[int],
    message: str = "Unauthorized to submit for this user",
) -> int:
    """self-or-admin rule. Returns the user id the write is for."""
    if target_user_id is None or target_user_id == identity.user_id:
        return identity.user_id
    if not identity.is_admin:
        raise Forbidden(message)
    return target_user_id


def ensure_owner_or_admin(
    identity: CurrentIdentity,
    owner_id: int,
    message: str = "Not allowed",
) -> None:
    """owner-or-admin rule against a stored record's owner."""
    if owner_id != identity.user_id and not identity.is_admin:
        raise Forbidden(message)
