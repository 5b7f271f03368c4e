from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, insert, select

from database.authkey import AuthKey
from database.post import Post
from database.post_like import PostLike
from database.user import User

if TYPE_CHECKING:
    from database.executor import QueryExecutor


# ───────────────────────────────  USERS  ──────────────────────────────────
async def find_user_id(db: QueryExecutor, username: str, password_digest: str) -> int | None:
    res = await db.execute(
        select(User.id)
        .where(User.username == username, User.password_digest == password_digest)
        .limit(1)
    )
    row = res.first()
    return row["id"] if row else None


async def username_taken(db: QueryExecutor, username: str) -> bool:
    res = await db.execute(select(User.id).where(User.username == username).limit(1))
    return bool(res.rows)


async def create_user(db: QueryExecutor, username: str, email: str | None,
                      password_digest: str) -> int | None:
    """
    INSERT seul, l'appelant vérifie username_taken() avant (check-then-insert).
    Deux inscriptions simultanées du même pseudo : la contrainte UNIQUE
    de users.username fait échouer la seconde (QueryError / IntegrityError).
    """
    res = await db.execute(
        insert(User).values(username=username, email=email, password_digest=password_digest)
    )
    if res.rowcount < 1:
        return None
    return res.inserted_id


# ───────────────────────────────  AUTHKEYS  ───────────────────────────────
def _utcnow() -> datetime:
    # UTC naive, posé côté Python : ne dépend pas du fuseau de la session SQL
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _ttl_cutoff(ttl_days: float) -> datetime:
    return _utcnow() - timedelta(days=ttl_days)


async def get_authkey_uid(db: QueryExecutor, authkey: str,
                          ttl_days: float | None = None) -> int | None:
    stmt = select(AuthKey.uid).where(AuthKey.authkey == authkey)
    if ttl_days is not None:
        stmt = stmt.where(AuthKey.created_at >= _ttl_cutoff(ttl_days))
    res = await db.execute(stmt.limit(1))
    row = res.first()
    return row["uid"] if row else None


async def add_authkey(db: QueryExecutor, uid: int, authkey: str) -> int:
    res = await db.execute(insert(AuthKey).values(uid=uid, authkey=authkey, created_at=_utcnow()))
    return res.rowcount


async def purge_authkeys(db: QueryExecutor, ttl_days: float) -> int:
    res = await db.execute(delete(AuthKey).where(AuthKey.created_at < _ttl_cutoff(ttl_days)))
    return res.rowcount


# ───────────────────────────────  POSTS  ──────────────────────────────────
async def list_posts(db: QueryExecutor) -> list[dict[str, Any]]:
    res = await db.execute(
        select(Post.id, Post.title, Post.description, Post.pic, User.username)
        .join(User, User.id == Post.uid)
        .order_by(Post.id.desc())
    )
    return res.rows


async def create_post(db: QueryExecutor, uid: int, title: str, description: str,
                      location: str) -> int | None:
    res = await db.execute(
        insert(Post).values(uid=uid, title=title, description=description, location=location)
    )
    if res.rowcount < 1:
        return None
    return res.inserted_id


async def get_post_detail(db: QueryExecutor, post_id: int, uid: int) -> dict[str, Any] | None:
    """Un post + nombre de likes + « est-ce que uid l'a liké », en une requête."""
    likes = (
        select(func.count())
        .select_from(PostLike)
        .where(PostLike.pid == Post.id)
        .scalar_subquery()
    )
    i_liked = select(PostLike.uid).where(PostLike.pid == Post.id, PostLike.uid == uid).exists()
    res = await db.execute(
        select(
            Post.id, Post.title, Post.description, Post.location, Post.pic,
            User.username,
            likes.label("likes"),
            i_liked.label("i_liked"),
        )
        .join(User, User.id == Post.uid)
        .where(Post.id == post_id)
        .limit(1)
    )
    row = res.first()
    if row is None:
        return None
    row["likes"] = int(row["likes"] or 0)
    row["i_liked"] = bool(row["i_liked"])
    return row


# ───────────────────────────────  LIKES  ──────────────────────────────────
async def add_like(db: QueryExecutor, uid: int, post_id: int) -> None:
    # doublon (uid, pid) ignoré : like idempotent
    await db.execute(db.insert_ignore(PostLike, uid=uid, pid=post_id))


async def remove_like(db: QueryExecutor, uid: int, post_id: int) -> None:
    await db.execute(delete(PostLike).where(PostLike.uid == uid, PostLike.pid == post_id))


async def count_likes(db: QueryExecutor, post_id: int) -> int:
    res = await db.execute(
        select(func.count().label("likes")).select_from(PostLike).where(PostLike.pid == post_id)
    )
    row = res.first()
    return int(row["likes"]) if row else 0
