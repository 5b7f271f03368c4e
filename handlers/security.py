# handlers/security.py
from __future__ import annotations

import hashlib
import hmac
import logging
from uuid import uuid4

from database.executor import QueryExecutor
from database.utils import add_authkey, get_authkey_uid, purge_authkeys
from errors import AuthError


def hash_pass(password: str, secret_key: str) -> str:
    return hmac.new(secret_key.encode(), password.encode(), hashlib.sha256).hexdigest()


class SessionAuthority:
    """
    Authkeys opaques (uuid4) -> uid.
    Sans ttl_days les clés n'expirent jamais ; avec, authorize() ignore
    les clés trop vieilles et purge_expired() les supprime.
    """

    def __init__(self, db: QueryExecutor, ttl_days: float | None = None):
        self.db = db
        self.ttl_days = ttl_days

    async def authorize(self, authkey: str | None) -> int:
        if not authkey:
            raise AuthError("Authorization failed.")
        uid = await get_authkey_uid(self.db, authkey, self.ttl_days)
        if uid is None:
            raise AuthError("Authorization failed.")
        return uid

    async def issue_token(self, uid: int) -> str:
        authkey = str(uuid4())
        if await add_authkey(self.db, uid, authkey) < 1:
            raise AuthError("Could not insert unique authkey.")
        return authkey

    async def purge_expired(self) -> int:
        if self.ttl_days is None:
            return 0
        n = await purge_authkeys(self.db, self.ttl_days)
        logging.info("Purged %s expired authkeys", n)
        return n
