"""Auth API tests.

Covers:
1. Signup — pending vs approved, required fields, duplicates
2. Login — cookie + token, identical failures for bad email/password
3. Logout
4. Session checks — cookie, bearer, missing, invalid, stale user
5. Approval — admin only, one-way
6. Password reset — single-use, expiry
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from teamhub.auth.session import issue_session_token, verify_session_token
from teamhub.config import settings
from teamhub.db.models import ResetToken, User
from teamhub.services.user_store import UserStore

from conftest import unique_email


async def _signup(client, role="user", password="password_123", email=None):
    email = email or unique_email(role)
    r = await client.post(
        "/api/auth/signup",
        json={"email": email, "password": password, "name": "Someone", "role": role},
    )
    return email, r


# ═══════════════════════════════════════════════════════════
# Signup
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_signup_member_is_pending(client, db_session):
    email, r = await _signup(client)
    assert r.status_code == 201
    assert r.json() == {"message": "Registration successful. Waiting for admin approval."}

    user = (await db_session.execute(select(User).where(User.email == email))).scalar_one()
    assert user.status == "pending"
    assert user.role == "user"


@pytest.mark.asyncio
async def test_signup_admin_is_approved(client, db_session):
    email, r = await _signup(client, role="admin")
    assert r.status_code == 201
    assert r.json() == {"message": "Registration successful. You can now login."}

    user = (await db_session.execute(select(User).where(User.email == email))).scalar_one()
    assert user.status == "approved"


@pytest.mark.asyncio
async def test_signup_stores_hash_not_password(client, db_session):
    email, _ = await _signup(client, password="plain-text-pw")
    user = (await db_session.execute(select(User).where(User.email == email))).scalar_one()
    assert user.password_hash != "plain-text-pw"
    assert user.password_hash.startswith("$2b$")


@pytest.mark.asyncio
async def test_signup_missing_fields(client):
    r = await client.post("/api/auth/signup", json={"email": "x@example.com"})
    assert r.status_code == 400
    assert r.json() == {"error": "Email, password, and name are required"}


@pytest.mark.asyncio
async def test_signup_unknown_role(client):
    _, r = await _signup(client, role="superuser")
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_signup_duplicate_email(client, db_session):
    """Second signup with the same email fails and leaves one row."""
    email, r1 = await _signup(client)
    assert r1.status_code == 201

    _, r2 = await _signup(client, email=email)
    assert r2.status_code == 400
    assert r2.json() == {"error": "User already exists"}

    count = await db_session.scalar(
        select(func.count()).select_from(User).where(User.email == email)
    )
    assert count == 1


# ═══════════════════════════════════════════════════════════
# Login / logout
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_sets_cookie_and_returns_token(client):
    email, _ = await _signup(client)
    r = await client.post("/api/auth/login", json={"email": email, "password": "password_123"})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Login successful"
    assert body["user"]["email"] == email
    assert body["user"]["role"] == "user"
    assert set(body["user"]) == {"id", "email", "name", "role"}

    cookie = r.headers["set-cookie"]
    assert cookie.startswith(f"{settings.session_cookie_name}={body['token']}")
    lowered = cookie.lower()
    assert "httponly" in lowered
    assert "samesite=strict" in lowered
    assert "max-age=86400" in lowered


@pytest.mark.asyncio
async def test_login_token_claims_match_user(client):
    email, _ = await _signup(client, role="admin")
    r = await client.post("/api/auth/login", json={"email": email, "password": "password_123"})
    body = r.json()

    claims = verify_session_token(body["token"])
    assert claims.user_id == body["user"]["id"]
    assert claims.email == email
    assert claims.role == "admin"


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client):
    """Unknown email and wrong password get the same status and body."""
    email, _ = await _signup(client)

    wrong_pw = await client.post("/api/auth/login", json={"email": email, "password": "nope"})
    unknown = await client.post(
        "/api/auth/login",
        json={"email": unique_email("ghost"), "password": "password_123"},
    )
    assert wrong_pw.status_code == unknown.status_code == 401
    assert wrong_pw.json() == unknown.json() == {"error": "Login failed. Please try again."}
    assert "set-cookie" not in wrong_pw.headers


@pytest.mark.asyncio
async def test_login_missing_fields(client):
    r = await client.post("/api/auth/login", json={"email": "a@example.com"})
    assert r.status_code == 400
    assert r.json() == {"error": "Email and password are required"}


@pytest.mark.asyncio
async def test_pending_member_can_log_in(client):
    email, _ = await _signup(client)
    r = await client.post("/api/auth/login", json={"email": email, "password": "password_123"})
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_pending_member_blocked_when_approval_required(client, monkeypatch):
    monkeypatch.setattr(settings, "require_approval_for_login", True)
    email, _ = await _signup(client)
    r = await client.post("/api/auth/login", json={"email": email, "password": "password_123"})
    assert r.status_code == 403
    assert r.json() == {"error": "Account is awaiting admin approval"}


@pytest.mark.asyncio
async def test_logout_clears_cookie(client):
    r = await client.post("/api/auth/logout")
    assert r.status_code == 200
    assert r.json() == {"message": "Logged out"}
    cookie = r.headers["set-cookie"]
    assert cookie.startswith(f'{settings.session_cookie_name}=""') or cookie.startswith(
        f"{settings.session_cookie_name}=;"
    )
    assert "max-age=0" in cookie.lower()


# ═══════════════════════════════════════════════════════════
# Session checks
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_check_with_bearer(client, member):
    r = await client.get("/api/auth/check", headers=member.headers)
    assert r.status_code == 200
    assert r.json() == {
        "user": {"id": member.id, "email": member.email, "name": member.name, "role": "user"}
    }


@pytest.mark.asyncio
async def test_verify_with_cookie(client, admin):
    r = await client.get(
        "/api/auth/verify",
        headers={"Cookie": f"{settings.session_cookie_name}={admin.token}"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["authenticated"] is True
    assert body["user"]["id"] == admin.id
    assert body["user"]["role"] == "admin"


@pytest.mark.asyncio
async def test_cookie_wins_over_bearer(client, admin, member):
    r = await client.get(
        "/api/auth/check",
        headers={
            "Cookie": f"{settings.session_cookie_name}={admin.token}",
            "Authorization": f"Bearer {member.token}",
        },
    )
    assert r.json()["user"]["id"] == admin.id


@pytest.mark.asyncio
async def test_check_without_token(client):
    r = await client.get("/api/auth/check")
    assert r.status_code == 401
    assert r.json() == {"error": "No token provided"}


@pytest.mark.asyncio
async def test_check_with_invalid_token(client):
    r = await client.get("/api/auth/check", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 403
    assert r.json() == {"error": "Invalid token"}


@pytest.mark.asyncio
async def test_check_with_expired_token(client, member):
    token = issue_session_token(
        user_id=member.id,
        email=member.email,
        name=member.name,
        role="user",
        ttl=timedelta(seconds=-1),
    )
    r = await client.get("/api/auth/check", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_check_for_deleted_user(client):
    """A valid token for a user that no longer exists → 404."""
    token = issue_session_token(user_id=999999, email="gone@example.com", name="Gone", role="user")
    r = await client.get("/api/auth/check", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 404
    assert r.json() == {"error": "User not found"}


# ═══════════════════════════════════════════════════════════
# Approval
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_admin_approves_member(client, admin, member, db_session):
    r = await client.put(f"/api/auth/approve/{member.id}", headers=admin.headers)
    assert r.status_code == 200
    assert r.json() == {"message": "User approved"}

    user = await db_session.get(User, member.id)
    assert user.status == "approved"


@pytest.mark.asyncio
async def test_approve_twice_conflicts(client, admin, member):
    await client.put(f"/api/auth/approve/{member.id}", headers=admin.headers)
    r = await client.put(f"/api/auth/approve/{member.id}", headers=admin.headers)
    assert r.status_code == 400
    assert r.json() == {"error": "User already approved"}


@pytest.mark.asyncio
async def test_approve_unknown_user(client, admin):
    r = await client.put("/api/auth/approve/999999", headers=admin.headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_member_cannot_approve(client, member, other_member, db_session):
    r = await client.put(f"/api/auth/approve/{other_member.id}", headers=member.headers)
    assert r.status_code == 403
    assert r.json() == {"error": "Admin access required"}

    user = await db_session.get(User, other_member.id)
    assert user.status == "pending"


# ═══════════════════════════════════════════════════════════
# Password reset
# ═══════════════════════════════════════════════════════════


async def _reset_token_for(db_session, user_id: int) -> str:
    result = await db_session.execute(
        select(ResetToken.token).where(ResetToken.user_id == user_id)
    )
    return result.scalars().first()


@pytest.mark.asyncio
async def test_forgot_password_unknown_email(client):
    r = await client.post("/api/auth/forgot-password", json={"email": unique_email("ghost")})
    assert r.status_code == 404
    assert r.json() == {"error": "No account found with this email"}


@pytest.mark.asyncio
async def test_forgot_password_missing_email(client):
    r = await client.post("/api/auth/forgot-password", json={})
    assert r.status_code == 400
    assert r.json() == {"error": "Email is required"}


@pytest.mark.asyncio
async def test_reset_flow(client, member, db_session):
    """Forgot → reset → new password works, old one doesn't, token is spent."""
    r = await client.post("/api/auth/forgot-password", json={"email": member.email})
    assert r.status_code == 200
    assert r.json() == {"message": "Password reset instructions sent"}

    token = await _reset_token_for(db_session, member.id)
    assert token and len(token) == 64

    r = await client.post(
        "/api/auth/reset-password", json={"token": token, "password": "brand-new-pw"}
    )
    assert r.status_code == 200
    assert r.json() == {"message": "Password has been reset successfully"}

    old = await client.post(
        "/api/auth/login", json={"email": member.email, "password": member.password}
    )
    assert old.status_code == 401
    new = await client.post(
        "/api/auth/login", json={"email": member.email, "password": "brand-new-pw"}
    )
    assert new.status_code == 200

    again = await client.post(
        "/api/auth/reset-password", json={"token": token, "password": "third-pw"}
    )
    assert again.status_code == 400
    assert again.json() == {"error": "Invalid or expired reset token"}


@pytest.mark.asyncio
async def test_reset_with_expired_token(client, member, db_session):
    await UserStore(db_session).create_reset_token(
        member.id, "expired-token", datetime.now(timezone.utc) - timedelta(minutes=1)
    )
    r = await client.post(
        "/api/auth/reset-password", json={"token": "expired-token", "password": "whatever"}
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid or expired reset token"}

    # Password unchanged
    login = await client.post(
        "/api/auth/login", json={"email": member.email, "password": member.password}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_reset_missing_fields(client):
    r = await client.post("/api/auth/reset-password", json={"token": "abc"})
    assert r.status_code == 400
    assert r.json() == {"error": "Token and new password are required"}


@pytest.mark.asyncio
async def test_approve_out_of_range_id(client, admin):
    """An id the database can't hold is a 400, in the usual error shape."""
    r = await client.put("/api/auth/approve/99999999999999999999", headers=admin.headers)
    assert r.status_code == 400
    assert r.json()["error"].startswith("Invalid user_id")


# ═══════════════════════════════════════════════════════════
# Signup race
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_signup_race_caught_by_unique_index(client, db_session, monkeypatch):
    """A duplicate that slips past the email lookup is stopped at insert."""
    email, r1 = await _signup(client)
    assert r1.status_code == 201

    # The second request sees no existing account, as if both lookups
    # ran before either insert committed.
    async def nobody(self, email):
        return None

    monkeypatch.setattr(UserStore, "find_by_email", nobody)

    _, r2 = await _signup(client, email=email)
    assert r2.status_code == 400
    assert r2.json() == {"error": "User already exists"}

    count = await db_session.scalar(
        select(func.count()).select_from(User).where(User.email == email)
    )
    assert count == 1
