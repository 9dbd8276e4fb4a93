"""Session token creation and verification.

A session is a signed JWT (HS256 by default) carrying who the caller is:
user id, email, name, and role, plus issued-at and expiry. Verification
is pure recomputation of the signature; there is no session table and
no revocation list, so a token stays valid until `exp` and logout only
drops the client's cookie.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from teamhub.config import settings


class TokenError(Exception):
    """Raised when a session token can't be verified."""


class InvalidSignature(TokenError):
    """Signature mismatch, wrong algorithm, or a token that isn't a JWT."""


class TokenExpired(TokenError):
    """The token verified but its `exp` is in the past."""


@dataclass(frozen=True)
class SessionClaims:
    user_id: int
    email: str
    name: str
    role: str
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def issue_session_token(
    user_id: int,
    email: str,
    name: str,
    role: str,
    ttl: Optional[timedelta] = None,
) -> str:
    """Create a signed session token for a user."""
    issued = datetime.now(timezone.utc)
    expires = issued + (ttl or timedelta(hours=settings.session_ttl_hours))
    payload = {
        "sub": str(user_id),
        "email": email,
        "name": name,
        "role": role,
        "iat": issued,
        "exp": expires,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_session_token(token: str) -> SessionClaims:
    """Verify and decode a session token.

    Raises TokenExpired or InvalidSignature on failure.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired("Token has expired")
    except jwt.InvalidTokenError as e:
        raise InvalidSignature(f"Invalid token: {e}")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise InvalidSignature("Invalid token: malformed subject")

    return SessionClaims(
        user_id=user_id,
        email=payload.get("email", ""),
        name=payload.get("name", ""),
        role=payload.get("role", "user"),
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
