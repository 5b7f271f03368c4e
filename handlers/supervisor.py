# handlers/supervisor.py
from __future__ import annotations

import asyncio
import logging

from aiohttp import WSMsgType, web

from handlers.dispatcher import Dispatcher
from handlers.reply import ReplyChannel


class Supervisor:
    """Accepte les WebSockets et lance une tâche Dispatcher par message."""

    def __init__(self, dispatcher: Dispatcher):
        self.dispatcher = dispatcher
        self.connections = 0

    async def handle(self, request: web.Request) -> web.StreamResponse:
        ws = web.WebSocketResponse()
        if not ws.can_prepare(request).ok:
            # requête HTTP simple sur le même port
            return web.Response(text="Found.")

        await ws.prepare(request)
        peer = request.remote or "?"
        self.connections += 1
        logging.info("Client connected: %s (%s open)", peer, self.connections)

        tasks: set[asyncio.Task] = set()
        try:
            async for msg in ws:
                if msg.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                    self._spawn(tasks, msg.data, ws, peer)
                elif msg.type == WSMsgType.ERROR:
                    logging.warning("Connection error from %s: %s", peer, ws.exception())
        finally:
            self.connections -= 1
            logging.info("Client disconnected: %s (%s open)", peer, self.connections)
        return ws

    def _spawn(self, tasks: set[asyncio.Task], raw: str | bytes,
               ws: web.WebSocketResponse, peer: str) -> None:
        # une tâche indépendante par requête : pas d'ordre garanti entre réponses
        reply = ReplyChannel(ws.send_str, peer)
        task = asyncio.create_task(self.dispatcher.handle(raw, reply))
        tasks.add(task)
        task.add_done_callback(tasks.discard)

    def setup(self, app: web.Application) -> None:
        app.add_routes([web.route("*", "/{tail:.*}", self.handle)])
