"""Tests for dispatch projections"""

from datetime import datetime, timedelta

import pytest

from ayoo.config import settings
from ayoo.models.order import OrderStatus
from ayoo.orders import dispatch
from ayoo.orders.repository import OrderRepository


@pytest.fixture
def repo(test_db, hub):
    return OrderRepository(test_db, hub)


@pytest.mark.asyncio
async def test_market_only_lists_unassigned_pickups(repo, order_factory):
    open_order = await order_factory(status=OrderStatus.READY_FOR_PICKUP)
    await order_factory(status=OrderStatus.PREPARING)
    for status in OrderStatus:
        await order_factory(status=status, rider_email="rico@example.com")
    
    market = await dispatch.open_market(repo)
    
    assert [order.id for order in market] == [open_order.id]
    assert all(order.rider_email is None for order in market)


@pytest.mark.asyncio
async def test_market_zone_is_advisory_by_default(repo, order_factory):
    await order_factory(status=OrderStatus.READY_FOR_PICKUP, delivery_address="Lahug, Cebu City")
    
    market = await dispatch.open_market(repo, zone="Iligan City")
    
    assert len(market) == 1


@pytest.mark.asyncio
async def test_market_zone_filter_when_enabled(repo, order_factory, monkeypatch):
    monkeypatch.setattr(settings, "market_zone_filter", True)
    iligan = await order_factory(status=OrderStatus.READY_FOR_PICKUP)
    await order_factory(status=OrderStatus.READY_FOR_PICKUP, delivery_address="Lahug, Cebu City")
    
    market = await dispatch.open_market(repo, zone="iligan city")
    
    assert [order.id for order in market] == [iligan.id]


@pytest.mark.asyncio
async def test_duty_queue_splits_active_and_history(repo, order_factory):
    active = await order_factory(status=OrderStatus.OUT_FOR_DELIVERY, rider_email="rico@example.com")
    done = await order_factory(status=OrderStatus.DELIVERED, rider_email="rico@example.com")
    await order_factory(status=OrderStatus.OUT_FOR_DELIVERY, rider_email="other@example.com")
    
    queue = await dispatch.rider_duty_queue(repo, "Rico@Example.com")
    
    assert [order.id for order in queue.active] == [active.id]
    assert [order.id for order in queue.history] == [done.id]


@pytest.mark.asyncio
async def test_merchant_queue_returns_every_status_for_the_restaurant(repo, order_factory):
    mine = [await order_factory(status=status) for status in OrderStatus]
    await order_factory(restaurant_name="Mang Inasal Tibanga")
    
    queue = await dispatch.merchant_queue(repo, "Jollibee Iligan")
    
    assert {order.id for order in queue} == {order.id for order in mine}


@pytest.mark.asyncio
async def test_live_orders_exclude_terminal(repo, order_factory):
    for status in OrderStatus:
        await order_factory(status=status)
    
    live = await dispatch.live_orders(repo)
    
    assert {order.status for order in live} == {
        "PENDING",
        "ACCEPTED",
        "PREPARING",
        "READY_FOR_PICKUP",
        "OUT_FOR_DELIVERY",
    }


@pytest.mark.asyncio
async def test_live_order_for_customer_prefers_newest(repo, order_factory):
    now = datetime.utcnow()
    await order_factory(status=OrderStatus.PREPARING, created_at=now - timedelta(minutes=30))
    newest = await order_factory(status=OrderStatus.PENDING, created_at=now)
    await order_factory(status=OrderStatus.DELIVERED, created_at=now + timedelta(minutes=5))
    
    live = await dispatch.live_order_for_customer(repo, "juan@example.com")
    
    assert live.id == newest.id


@pytest.mark.asyncio
async def test_live_order_for_customer_is_none_when_all_closed(repo, order_factory):
    await order_factory(status=OrderStatus.DELIVERED)
    await order_factory(status=OrderStatus.CANCELLED)
    
    assert await dispatch.live_order_for_customer(repo, "juan@example.com") is None


@pytest.mark.asyncio
async def test_merchant_queue_keeps_namesakes_apart(repo, order_factory):
    first = await order_factory(merchant_id="jollibee-tibanga")
    await order_factory(merchant_id="jollibee-pala-o")
    legacy = await order_factory()
    
    queue = await dispatch.merchant_queue(repo, "Jollibee Iligan", "jollibee-tibanga")
    
    assert {order.id for order in queue} == {first.id, legacy.id}
