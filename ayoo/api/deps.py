"""Shared dependencies for order endpoints"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ayoo.config import settings
from ayoo.database import get_db
from ayoo.orders.checkout import CheckoutService
from ayoo.orders.fanout import OrderEventHub, get_event_hub
from ayoo.orders.lifecycle import OrderStateMachine
from ayoo.orders.repository import OrderRepository
from ayoo.payments.base import PaymentGateway
from ayoo.payments.simulated import SimulatedGateway


def get_payment_gateway(db: AsyncSession = Depends(get_db)) -> PaymentGateway:
    return SimulatedGateway(
        db,
        latency_seconds=settings.payment_latency_seconds,
        fault_rate=settings.payment_fault_rate,
    )


def get_order_repository(
    db: AsyncSession = Depends(get_db),
    hub: OrderEventHub = Depends(get_event_hub),
) -> OrderRepository:
    return OrderRepository(db, hub)


def get_state_machine(
    db: AsyncSession = Depends(get_db),
    hub: OrderEventHub = Depends(get_event_hub),
) -> OrderStateMachine:
    return OrderStateMachine(db, hub)


def get_checkout_service(
    db: AsyncSession = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
    hub: OrderEventHub = Depends(get_event_hub),
) -> CheckoutService:
    return CheckoutService(db, gateway, hub)
