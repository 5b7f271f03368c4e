# handlers/dispatcher.py
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError

from database import utils as db_utils
from database.executor import QueryExecutor
from errors import AuthError, QueryError, RequestError
from handlers.actions import (
    Like, ListPosts, Login, NewPost, Register, Show, Unlike, parse_request,
)
from handlers.reply import ReplyChannel
from handlers.security import SessionAuthority, hash_pass


class Dispatcher:
    """
    Message brut -> une action -> exactement une réponse.

    handle() est le seul point de sortie : chaque branche renvoie un
    payload ou lève une RequestError, et seul handle() appelle le ReplyChannel.
    """

    def __init__(self, db: QueryExecutor, authority: SessionAuthority, secret_key: str):
        self.db = db
        self.authority = authority
        self.secret_key = secret_key
        self._handlers = {
            Login: self.login,
            Register: self.register,
            ListPosts: self.list_posts,
            NewPost: self.new_post,
            Show: self.show,
            Like: self.like,
            Unlike: self.unlike,
        }

    async def handle(self, raw: str | bytes, reply: ReplyChannel) -> bool:
        try:
            req = parse_request(raw)
            payload = await self._handlers[type(req)](req)
        except RequestError as e:
            if isinstance(e, QueryError):
                logging.warning("Database error for %s: %s", reply.peer, e.__cause__)
            return await reply.error(e.message)
        except Exception:
            logging.exception("Unexpected error while processing request from %s", reply.peer)
            return await reply.error("Internal server error.")
        return await reply.send(payload)

    # ───────────────────────────────  AUTH  ───────────────────────────────
    async def _token_reply(self, uid: int) -> dict[str, Any]:
        authkey = await self.authority.issue_token(uid)
        return {"status": "ok", "authkey": authkey}

    async def login(self, req: Login) -> dict[str, Any]:
        uid = await db_utils.find_user_id(self.db, req.uname, hash_pass(req.password, self.secret_key))
        if uid is None:
            raise AuthError("Login failed.")
        return await self._token_reply(uid)

    async def register(self, req: Register) -> dict[str, Any]:
        taken = {"status": "error", "message": "Username is taken."}
        if await db_utils.username_taken(self.db, req.uname):
            return taken
        try:
            uid = await db_utils.create_user(
                self.db, req.uname, req.email, hash_pass(req.password, self.secret_key)
            )
        except QueryError as e:
            # perdu la course check-then-insert contre une inscription simultanée
            if isinstance(e.__cause__, IntegrityError):
                return taken
            raise
        if uid is None:
            raise RequestError("Unable to insert user object.")
        return await self._token_reply(uid)

    # ───────────────────────────────  POSTS  ──────────────────────────────
    async def list_posts(self, req: ListPosts) -> list[dict[str, Any]]:
        await self.authority.authorize(req.authkey)
        return await db_utils.list_posts(self.db)

    async def new_post(self, req: NewPost) -> dict[str, Any]:
        uid = await self.authority.authorize(req.authkey)
        post_id = await db_utils.create_post(self.db, uid, req.title, req.description, req.location)
        if post_id is None:
            raise RequestError("Row could not be inserted.")
        return {"status": "ok", "id": post_id}

    async def show(self, req: Show) -> dict[str, Any]:
        uid = await self.authority.authorize(req.authkey)
        return await db_utils.get_post_detail(self.db, req.post_id, uid) or {}

    # ───────────────────────────────  LIKES  ──────────────────────────────
    async def like(self, req: Like) -> dict[str, Any]:
        uid = await self.authority.authorize(req.authkey)
        await db_utils.add_like(self.db, uid, req.post_id)
        return {"status": "liked", "likes": await db_utils.count_likes(self.db, req.post_id)}

    async def unlike(self, req: Unlike) -> dict[str, Any]:
        uid = await self.authority.authorize(req.authkey)
        await db_utils.remove_like(self.db, uid, req.post_id)
        return {"status": "unliked", "likes": await db_utils.count_likes(self.db, req.post_id)}
