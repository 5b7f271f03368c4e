# server.py
from __future__ import annotations

import asyncio
import logging

import aiocron
from aiohttp import web

from config import (
    HOST, APP_PORT, DB_PATH, SECRET_KEY, LOG_LEVEL,
    POOL_SIZE, POOL_TIMEOUT, AUTHKEY_TTL_DAYS, AUTHKEY_PURGE_CRON,
)
from database.database import make_engine
from database.executor import QueryExecutor
from handlers import Dispatcher, SessionAuthority, Supervisor

logging.basicConfig(level=LOG_LEVEL)

db_key = web.AppKey("db", QueryExecutor)
authority_key = web.AppKey("authority", SessionAuthority)


# ───────────────────────────  Application
def create_app(db: QueryExecutor, secret_key: str, ttl_days: float | None = None) -> web.Application:
    authority = SessionAuthority(db, ttl_days=ttl_days)
    dispatcher = Dispatcher(db, authority, secret_key)

    app = web.Application()
    app[db_key] = db
    app[authority_key] = authority
    Supervisor(dispatcher).setup(app)

    async def close_pool(_app: web.Application) -> None:
        await db.dispose()
        logging.info("Pool closed")

    app.on_cleanup.append(close_pool)
    return app


# ───────────────────────────  Cron : purge des authkeys expirées
def schedule_authkey_purge(authority: SessionAuthority, cron_expr: str):
    if authority.ttl_days is None:
        return None

    async def purge_authkeys_job():
        try:
            await authority.purge_expired()
        except Exception as e:
            logging.warning("Authkey purge failed: %s", e)

    return aiocron.crontab(cron_expr, func=purge_authkeys_job, start=True)


# ───────────────────────────  Main
async def main():
    logging.info("Creating pool (%s connections max)", POOL_SIZE)
    db = QueryExecutor(make_engine(DB_PATH, pool_size=POOL_SIZE, pool_timeout=POOL_TIMEOUT))
    app = create_app(db, SECRET_KEY, ttl_days=AUTHKEY_TTL_DAYS)
    cron = schedule_authkey_purge(app[authority_key], AUTHKEY_PURGE_CRON)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, HOST, APP_PORT)
    await site.start()
    logging.info("Listening on %s:%s", HOST, APP_PORT)

    try:
        await asyncio.Event().wait()
    finally:
        if cron is not None:
            cron.stop()
        await runner.cleanup()

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
