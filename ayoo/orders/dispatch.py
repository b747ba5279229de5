"""Read-only projections over the order repository"""

from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import and_, func, or_

from ayoo.config import settings
from ayoo.models.order import Order, OrderStatus, TERMINAL_STATUSES
from ayoo.orders.accounts import normalize_email
from ayoo.orders.repository import OrderRepository

TERMINAL_VALUES = [status.value for status in TERMINAL_STATUSES]


@dataclass
class DutyQueue:
    active: List[Order] = field(default_factory=list)
    history: List[Order] = field(default_factory=list)


async def open_market(repo: OrderRepository, zone: Optional[str] = None) -> List[Order]:
    """Unassigned orders waiting for a rider"""
    criteria = [
        Order.status == OrderStatus.READY_FOR_PICKUP.value,
        Order.rider_email.is_(None),
    ]
    # Zone is advisory unless hard filtering is switched on
    if zone and settings.market_zone_filter:
        criteria.append(func.lower(Order.delivery_address).contains(zone.strip().lower()))
    return await repo.find(*criteria)


async def orders_for_rider(repo: OrderRepository, rider_email: str) -> List[Order]:
    return await repo.find(Order.rider_email == normalize_email(rider_email))


async def rider_duty_queue(repo: OrderRepository, rider_email: str) -> DutyQueue:
    queue = DutyQueue()
    for order in await orders_for_rider(repo, rider_email):
        if order.is_terminal:
            queue.history.append(order)
        else:
            queue.active.append(order)
    return queue


async def merchant_queue(
    repo: OrderRepository,
    restaurant_name: str,
    merchant_id: Optional[str] = None,
) -> List[Order]:
    """Every order for a restaurant, any status"""
    if merchant_id:
        # Name matches only orders placed without a stable merchant id
        return await repo.find(
            or_(
                Order.merchant_id == merchant_id,
                and_(Order.merchant_id.is_(None), Order.restaurant_name == restaurant_name),
            )
        )
    return await repo.find(Order.restaurant_name == restaurant_name)


async def live_orders(repo: OrderRepository) -> List[Order]:
    return await repo.find(Order.status.not_in(TERMINAL_VALUES))


async def orders_for_customer(repo: OrderRepository, customer_email: str) -> List[Order]:
    return await repo.find(Order.customer_email == normalize_email(customer_email))


async def live_order_for_customer(repo: OrderRepository, customer_email: str) -> Optional[Order]:
    """Most recently placed non-terminal order, if any"""
    orders = await repo.find(
        Order.customer_email == normalize_email(customer_email),
        Order.status.not_in(TERMINAL_VALUES),
    )
    return orders[0] if orders else None
