"""Tests for the order event hub"""

import pytest

from ayoo.orders.fanout import OrderEventHub


class RecordingBroadcaster:
    def __init__(self, fail=False):
        self.messages = []
        self.fail = fail
    
    async def broadcast(self, message):
        if self.fail:
            raise ConnectionError("redis unavailable")
        self.messages.append(message)
    
    async def listen(self, hub):
        return None
    
    async def close(self):
        return None


@pytest.mark.asyncio
async def test_subscribe_and_unsubscribe():
    hub = OrderEventHub()
    calls = []
    
    unsubscribe = hub.subscribe(lambda: calls.append("tick"))
    await hub.publish("order.placed")
    unsubscribe()
    await hub.publish("order.transition")
    
    assert calls == ["tick"]
    assert hub.subscriber_count == 0


@pytest.mark.asyncio
async def test_unsubscribe_twice_is_harmless():
    hub = OrderEventHub()
    unsubscribe = hub.subscribe(lambda: None)
    
    unsubscribe()
    unsubscribe()
    
    assert hub.subscriber_count == 0


@pytest.mark.asyncio
async def test_async_callbacks_are_awaited():
    hub = OrderEventHub()
    calls = []
    
    async def refresh():
        calls.append("refreshed")
    
    hub.subscribe(refresh)
    await hub.publish("order.transition")
    
    assert calls == ["refreshed"]


@pytest.mark.asyncio
async def test_failing_subscriber_does_not_starve_others():
    hub = OrderEventHub()
    calls = []
    
    def broken():
        raise RuntimeError("view crashed")
    
    hub.subscribe(broken)
    hub.subscribe(lambda: calls.append("ok"))
    await hub.publish("order.transition")
    
    assert calls == ["ok"]


@pytest.mark.asyncio
async def test_publish_broadcasts_sync_hint():
    broadcaster = RecordingBroadcaster()
    hub = OrderEventHub(broadcaster=broadcaster)
    
    await hub.publish("order.transition", order_id="AYO-1")
    
    [message] = broadcaster.messages
    assert message["type"] == "SYNC"
    assert message["origin"] == hub.origin
    assert message["order_id"] == "AYO-1"


@pytest.mark.asyncio
async def test_broadcast_failure_is_not_raised():
    hub = OrderEventHub(broadcaster=RecordingBroadcaster(fail=True))
    calls = []
    hub.subscribe(lambda: calls.append("local"))
    
    await hub.publish("order.transition")
    
    assert calls == ["local"]


@pytest.mark.asyncio
async def test_remote_messages_notify_but_own_echo_is_ignored():
    hub = OrderEventHub()
    calls = []
    hub.subscribe(lambda: calls.append("tick"))
    
    await hub.handle_remote({"type": "SYNC", "origin": hub.origin})
    await hub.handle_remote({"type": "SYNC", "origin": "another-tab"})
    
    assert calls == ["tick"]


@pytest.mark.asyncio
async def test_callback_may_unsubscribe_during_notification():
    hub = OrderEventHub()
    calls = []
    
    def once():
        calls.append("once")
        unsubscribe()
    
    unsubscribe = hub.subscribe(once)
    await hub.publish("order.placed")
    await hub.publish("order.placed")
    
    assert calls == ["once"]
