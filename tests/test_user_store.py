"""Credential store tests — uniqueness and single-use reset tokens."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from teamhub.auth.password import hash_password, verify_password
from teamhub.db.models import ResetToken, User
from teamhub.errors import DuplicateKey, NotFound
from teamhub.services.user_store import UserStore


def _user(email="store@example.com", **kwargs):
    defaults = dict(
        email=email,
        password_hash=hash_password("pw"),
        name="Store User",
        role="user",
        status="pending",
    )
    defaults.update(kwargs)
    return User(**defaults)


@pytest.mark.asyncio
async def test_create_and_find(db_session):
    store = UserStore(db_session)
    user_id = await store.create(_user())

    assert (await store.find_by_id(user_id)).email == "store@example.com"
    assert (await store.find_by_email("store@example.com")).id == user_id
    assert await store.find_by_email("nobody@example.com") is None


@pytest.mark.asyncio
async def test_duplicate_email_raises(db_session):
    store = UserStore(db_session)
    await store.create(_user())

    with pytest.raises(DuplicateKey):
        await store.create(_user())

    count = await db_session.scalar(select(func.count()).select_from(User))
    assert count == 1


@pytest.mark.asyncio
async def test_update_profile_unknown_user(db_session):
    with pytest.raises(NotFound):
        await UserStore(db_session).update_profile(999, name="x", skills="y", linkedin_url=None)


@pytest.mark.asyncio
async def test_reset_token_lookup_respects_expiry(db_session):
    store = UserStore(db_session)
    user_id = await store.create(_user())
    now = datetime.now(timezone.utc)

    await store.create_reset_token(user_id, "fresh", now + timedelta(hours=1))
    await store.create_reset_token(user_id, "stale", now - timedelta(seconds=1))

    assert (await store.find_valid_reset_token("fresh", now)).user_id == user_id
    assert await store.find_valid_reset_token("stale", now) is None
    assert await store.find_valid_reset_token("missing", now) is None


@pytest.mark.asyncio
async def test_delete_reset_token_reports_rowcount(db_session):
    store = UserStore(db_session)
    user_id = await store.create(_user())
    await store.create_reset_token(
        user_id, "once", datetime.now(timezone.utc) + timedelta(hours=1)
    )

    assert await store.delete_reset_token("once") is True
    assert await store.delete_reset_token("once") is False


@pytest.mark.asyncio
async def test_consume_reset_token_is_single_use(db_session):
    store = UserStore(db_session)
    user_id = await store.create(_user())
    now = datetime.now(timezone.utc)
    await store.create_reset_token(user_id, "tok", now + timedelta(hours=1))

    assert await store.consume_reset_token("tok", hash_password("new-pw"), now) == user_id
    assert await store.consume_reset_token("tok", hash_password("other"), now) is None

    db_session.expire_all()
    user = await store.find_by_id(user_id)
    assert verify_password("new-pw", user.password_hash)
    remaining = await db_session.scalar(select(func.count()).select_from(ResetToken))
    assert remaining == 0
