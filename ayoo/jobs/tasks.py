"""Background job tasks"""

import json
import time

import redis
import structlog

from ayoo.jobs.celery_app import celery_app
from ayoo.config import settings

logger = structlog.get_logger()

TICK_ORIGIN = "scheduler"


def build_tick_message() -> dict:
    return {
        "type": "SYNC",
        "origin": TICK_ORIGIN,
        "reason": "tick",
        "order_id": None,
        "timestamp": int(time.time() * 1000),
    }


@celery_app.task(name="broadcast_sync_tick")
def broadcast_sync_tick() -> int:
    """
    Periodic SYNC hint so views that missed a notification catch up.
    Returns the number of listeners that received it.
    """
    client = redis.Redis.from_url(settings.redis_url)
    try:
        receivers = client.publish(settings.sync_channel, json.dumps(build_tick_message()))
    finally:
        client.close()
    
    logger.debug("Sync tick broadcast", channel=settings.sync_channel, receivers=receivers)
    return receivers
