# handlers/reply.py
from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable

from errors import TransportError


class ReplyChannel:
    """Une requête = un ReplyChannel = au plus un envoi."""

    def __init__(self, send_str: Callable[[str], Awaitable[Any]], peer: str = "?"):
        self._send_str = send_str
        self.peer = peer
        self.sent = False

    async def send(self, payload: Any) -> bool:
        if self.sent:
            logging.warning("Second reply to %s dropped: %s", self.peer, payload)
            return False
        self.sent = True
        try:
            await self._deliver(json.dumps(payload, default=str))
        except TransportError as e:
            logging.warning("Client %s disconnected while processing request: %s", self.peer, e)
            return False
        return True

    async def error(self, message: str) -> bool:
        return await self.send({"status": "error", "message": message})

    async def _deliver(self, data: str) -> None:
        try:
            await self._send_str(data)
        except (ConnectionError, RuntimeError) as e:
            # aiohttp : ClientConnectionResetError / socket déjà fermé
            raise TransportError(str(e)) from e
