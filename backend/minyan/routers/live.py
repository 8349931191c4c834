"""Bridge from a subscription hub to a WebSocket connection."""
import asyncio
import logging
from typing import Any, Callable, Hashable

from fastapi import WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from minyan.services.realtime import SubscriptionHub

logger = logging.getLogger(__name__)


async def stream_updates(
    websocket: WebSocket,
    db: Session,
    hub: SubscriptionHub,
    key: Hashable,
    encode: Callable[[Any], Any],
) -> None:
    """Accept, send the current snapshot, then every update until either side goes away.

    The session is only used for the first snapshot and is closed before
    anything is sent, so an idle viewer holds no pooled connection.
    """
    await websocket.accept()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    # Writers notify from worker threads
    def on_update(snapshot: Any) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, snapshot)

    unsubscribe = await run_in_threadpool(hub.subscribe, db, key, on_update)
    await run_in_threadpool(db.close)
    logger.info("Live viewer connected to %s", key)

    async def pump() -> None:
        while True:
            snapshot = await queue.get()
            await websocket.send_json(encode(snapshot))

    async def drain() -> None:
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass

    sender = asyncio.create_task(pump())
    receiver = asyncio.create_task(drain())
    try:
        done, _ = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
        if sender in done and not sender.cancelled() and sender.exception() is not None:
            logger.warning("Live feed for %s stopped: %s", key, sender.exception())
    finally:
        sender.cancel()
        receiver.cancel()
        unsubscribe()
        logger.info("Live viewer disconnected from %s", key)
