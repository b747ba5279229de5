"""
Order state machine.

    PENDING -> ACCEPTED -> PREPARING -> READY_FOR_PICKUP
            -> OUT_FOR_DELIVERY -> DELIVERED

CANCELLED is reachable from any non-terminal state. Every mutation of an
order after placement goes through `transition`, which persists, settles
on the first delivery and then fires the fan-out.
"""

from datetime import datetime
from typing import Any, Mapping, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ayoo.config import settings
from ayoo.models.account import Account
from ayoo.models.audit import AuditLog
from ayoo.models.order import Order, OrderStatus, TERMINAL_STATUSES
from ayoo.orders.accounts import AccountRegistry, normalize_email
from ayoo.orders.errors import (
    InvalidPatch,
    InvalidTransition,
    OrderAlreadyClaimed,
    StaleOrder,
)
from ayoo.orders.fanout import OrderEventHub
from ayoo.orders.repository import OrderRepository
from ayoo.orders.settlement import SettlementEngine, SettlementReport

logger = structlog.get_logger()

PROGRESSION = [
    OrderStatus.PENDING,
    OrderStatus.ACCEPTED,
    OrderStatus.PREPARING,
    OrderStatus.READY_FOR_PICKUP,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]

RIDER_FIELDS = frozenset({"rider_email", "rider_name"})
FEEDBACK_FIELDS = frozenset({"rating", "comment"})
PATCH_FIELDS = RIDER_FIELDS | FEEDBACK_FIELDS | {"tip_cents"}


def check_transition(previous: OrderStatus, target: OrderStatus) -> None:
    """Forward-only progression; raises InvalidTransition otherwise"""
    if target == previous:
        return
    if previous in TERMINAL_STATUSES:
        raise InvalidTransition(f"Order is already {previous.value}")
    if target == OrderStatus.CANCELLED:
        return
    if PROGRESSION.index(target) < PROGRESSION.index(previous):
        raise InvalidTransition(f"Cannot move order from {previous.value} back to {target.value}")


def _clean_patch(extra: Optional[Mapping[str, Any]]) -> dict:
    if not extra:
        return {}
    patch = {key: value for key, value in extra.items() if value is not None}
    unknown = set(patch) - PATCH_FIELDS
    if unknown:
        raise InvalidPatch(f"Fields cannot be changed by a transition: {', '.join(sorted(unknown))}")
    if "rider_email" in patch:
        patch["rider_email"] = normalize_email(patch["rider_email"])
    if patch.get("tip_cents", 0) < 0:
        raise InvalidPatch("Tip cannot be negative")
    if "rating" in patch and not 1 <= patch["rating"] <= 5:
        raise InvalidPatch("Rating must be between 1 and 5")
    return patch


class OrderStateMachine:
    """Validates and applies status transitions"""
    
    def __init__(
        self,
        db: AsyncSession,
        hub: Optional[OrderEventHub] = None,
        strict: Optional[bool] = None,
    ):
        self.db = db
        self.orders = OrderRepository(db, hub)
        self.accounts = AccountRegistry(db)
        self.settlement = SettlementEngine(db, self.accounts)
        self.strict = settings.strict_transitions if strict is None else strict
        self.last_settlement: Optional[SettlementReport] = None
    
    async def transition(
        self,
        order_id: str,
        target: OrderStatus,
        extra: Optional[Mapping[str, Any]] = None,
        actor: Optional[Account] = None,
        expected_version: Optional[int] = None,
    ) -> Order:
        target = OrderStatus(target)
        patch = _clean_patch(extra)
        order = await self.orders.get(order_id, for_update=True)
        previous = OrderStatus(order.status)
        
        if expected_version is not None and order.version != expected_version:
            raise StaleOrder(
                f"Order {order_id} is at version {order.version}, expected {expected_version}"
            )
        if self.strict:
            check_transition(previous, target)
        
        self._apply_patch(order, previous, patch)
        
        order.status = target.value
        order.version = (order.version or 0) + 1
        now = datetime.utcnow()
        
        self.last_settlement = None
        if target == OrderStatus.DELIVERED and previous != OrderStatus.DELIVERED:
            order.delivered_at = now
            self.last_settlement = await self.settlement.settle(
                order, rider_email_hint=patch.get("rider_email")
            )
        elif target == OrderStatus.CANCELLED and previous != OrderStatus.CANCELLED:
            order.cancelled_at = now
        
        self.db.add(
            AuditLog(
                actor_email=actor.email if actor else None,
                actor_role=actor.role.value if actor else None,
                action="order.transition",
                resource_id=order.id,
                data_json={"from": previous.value, "to": target.value, "fields": sorted(patch)},
            )
        )
        await self.orders.save("order.transition", order_id=order.id)
        
        logger.info(
            "Order transitioned",
            order_id=order.id,
            previous=previous.value,
            status=target.value,
            version=order.version,
        )
        return order
    
    def _apply_patch(self, order: Order, previous: OrderStatus, patch: dict) -> None:
        if previous not in TERMINAL_STATUSES:
            for field, value in patch.items():
                setattr(order, field, value)
            return
        
        # Closed orders only take the one-time rating and comment
        for field in FEEDBACK_FIELDS & set(patch):
            if getattr(order, field) is None:
                setattr(order, field, patch[field])
        ignored = sorted(set(patch) - FEEDBACK_FIELDS)
        if ignored:
            logger.info("Ignoring fields on closed order", order_id=order.id, fields=ignored)
    
    async def force_assign(
        self,
        order_id: str,
        rider_email: str,
        rider_name: Optional[str] = None,
        actor: Optional[Account] = None,
    ) -> Order:
        """Assign a rider and accept the order in one step"""
        order = await self.orders.get(order_id)
        current = OrderStatus(order.status)
        if current in TERMINAL_STATUSES:
            raise InvalidTransition(f"Cannot assign a rider to a {current.value} order")
        
        target = OrderStatus.ACCEPTED
        if PROGRESSION.index(current) > PROGRESSION.index(OrderStatus.ACCEPTED):
            target = current
        
        return await self.transition(
            order_id,
            target,
            {"rider_email": rider_email, "rider_name": rider_name},
            actor=actor,
        )
    
    async def claim(
        self,
        order_id: str,
        rider_email: str,
        rider_name: Optional[str] = None,
        actor: Optional[Account] = None,
    ) -> Order:
        """Rider takes an unassigned pickup-ready order from the market"""
        order = await self.orders.get(order_id)
        if order.rider_email and order.rider_email != normalize_email(rider_email):
            raise OrderAlreadyClaimed(f"Order {order_id} is already assigned to another rider")
        if OrderStatus(order.status) != OrderStatus.READY_FOR_PICKUP:
            raise InvalidTransition(f"Order {order_id} is not ready for pickup")
        
        return await self.transition(
            order_id,
            OrderStatus.OUT_FOR_DELIVERY,
            {"rider_email": rider_email, "rider_name": rider_name},
            actor=actor,
        )
    
    async def submit_feedback(
        self,
        order_id: str,
        rating: Optional[int] = None,
        comment: Optional[str] = None,
        tip_cents: Optional[int] = None,
        actor: Optional[Account] = None,
    ) -> Order:
        return await self.transition(
            order_id,
            OrderStatus.DELIVERED,
            {"rating": rating, "comment": comment, "tip_cents": tip_cents},
            actor=actor,
        )
    
    async def cancel(self, order_id: str, actor: Optional[Account] = None) -> Order:
        return await self.transition(order_id, OrderStatus.CANCELLED, actor=actor)
