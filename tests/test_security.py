from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import insert, select, func

from database.authkey import AuthKey
from database.user import User
from errors import AuthError
from handlers import SessionAuthority, hash_pass


def test_hash_pass_is_deterministic_and_keyed():
    assert hash_pass("pw", "k1") == hash_pass("pw", "k1")
    assert hash_pass("pw", "k1") != hash_pass("pw", "k2")
    assert hash_pass("pw", "k1") != hash_pass("pw2", "k1")
    assert len(hash_pass("pw", "k1")) == 64


async def _user(db, name="carol") -> int:
    res = await db.execute(insert(User).values(username=name, email=None, password_digest="d"))
    return res.inserted_id


@pytest.mark.asyncio
async def test_issued_token_authorizes_owner(db, authority):
    uid = await _user(db)
    token = await authority.issue_token(uid)
    assert await authority.authorize(token) == uid


@pytest.mark.asyncio
async def test_each_issue_mints_a_new_token(db, authority):
    uid = await _user(db)
    t1 = await authority.issue_token(uid)
    t2 = await authority.issue_token(uid)
    assert t1 != t2
    assert await authority.authorize(t1) == uid
    assert await authority.authorize(t2) == uid


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "not-a-real-token"])
async def test_unknown_or_absent_token_fails_closed(authority, token):
    with pytest.raises(AuthError) as exc:
        await authority.authorize(token)
    assert exc.value.message == "Authorization failed."


@pytest.mark.asyncio
async def test_ttl_expires_and_purges_old_tokens(db):
    uid = await _user(db)
    fresh = SessionAuthority(db, ttl_days=1)
    token = await fresh.issue_token(uid)
    assert await fresh.authorize(token) == uid

    # negative ttl: every existing key is already past its cutoff
    stale = SessionAuthority(db, ttl_days=-1)
    with pytest.raises(AuthError):
        await stale.authorize(token)
    assert await stale.purge_expired() == 1

    res = await db.execute(select(func.count().label("n")).select_from(AuthKey))
    assert res.rows == [{"n": 0}]


@pytest.mark.asyncio
async def test_purge_is_noop_without_ttl(db, authority):
    await authority.issue_token(await _user(db))
    assert await authority.purge_expired() == 0


@pytest.mark.asyncio
async def test_authkey_age_is_measured_in_utc(db):
    uid = await _user(db)
    authority = SessionAuthority(db, ttl_days=1)
    fresh = await authority.issue_token(uid)

    res = await db.execute(select(AuthKey.created_at).where(AuthKey.authkey == fresh))
    created = res.rows[0]["created_at"].replace(tzinfo=None)
    now_utc = datetime.now(timezone.utc).replace(tzinfo=None)
    assert abs(created - now_utc) < timedelta(minutes=1)

    old = now_utc - timedelta(days=2)
    await db.execute(insert(AuthKey).values(uid=uid, authkey="old-key", created_at=old))
    assert await authority.authorize(fresh) == uid
    with pytest.raises(AuthError):
        await authority.authorize("old-key")
    assert await authority.purge_expired() == 1
