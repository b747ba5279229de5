"""WebSocket relay for order change notifications"""

import asyncio

from fastapi import APIRouter, Depends, WebSocket
import structlog

from ayoo.orders.fanout import OrderEventHub, get_event_hub

router = APIRouter()
logger = structlog.get_logger()


@router.websocket("/sync")
async def sync_stream(
    websocket: WebSocket,
    hub: OrderEventHub = Depends(get_event_hub),
):
    """
    Push a SYNC hint whenever orders change.
    
    Notifications arriving while a send is in flight collapse into one;
    clients re-fetch whatever view they are showing.
    """
    await websocket.accept()
    changed = asyncio.Event()
    unsubscribe = hub.subscribe(changed.set)
    logger.info("Sync client connected", subscribers=hub.subscriber_count)
    
    async def push_changes():
        while True:
            await changed.wait()
            changed.clear()
            await websocket.send_json({"type": "SYNC"})
    
    async def wait_for_disconnect():
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return
    
    tasks = {
        asyncio.create_task(push_changes()),
        asyncio.create_task(wait_for_disconnect()),
    }
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.info("Sync stream closed", error=str(task.exception()))
    finally:
        unsubscribe()
        logger.info("Sync client disconnected", subscribers=hub.subscriber_count)
