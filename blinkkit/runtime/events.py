from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Literal
import asyncio, logging, websockets, time

log = logging.getLogger(__name__)


class Diagnostics(BaseModel):
    avg_ear: float = 0.0
    fps: int = 0
    blink_count: int = 0
    is_running: bool = False


class BlinkEvent(BaseModel):
    ts: float = Field(default_factory=lambda: time.time())
    type: Literal["blink"] = "blink"
    count: int
    avg_ear: float = 0.0


async def ws_broadcast(queue: "asyncio.Queue[str]", host="0.0.0.0", port=8765):
    """Send every queued JSON line to all connected clients."""
    clients = set()

    async def handler(websocket):
        clients.add(websocket)
        try:
            await websocket.wait_closed()
        finally:
            clients.discard(websocket)

    async def pump():
        while True:
            msg = await queue.get()
            for c in list(clients):
                try:
                    await c.send(msg)
                except websockets.ConnectionClosed:
                    clients.discard(c)

    async with websockets.serve(handler, host, port):
        log.info("broadcasting blink events on ws://%s:%d", host, port)
        await pump()
