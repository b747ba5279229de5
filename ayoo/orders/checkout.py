"""Order placement"""

import secrets
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ayoo.models.account import Account
from ayoo.models.audit import AuditLog
from ayoo.models.ledger import LedgerEntryType
from ayoo.models.order import Order, OrderStatus
from ayoo.orders.fanout import OrderEventHub
from ayoo.orders.fees import read_delivery_fee
from ayoo.orders.ledger import LedgerStore
from ayoo.orders.pricing import get_voucher, quote
from ayoo.orders.repository import OrderRepository
from ayoo.payments.base import PaymentGateway
from ayoo.schemas.order import CheckoutRequest

logger = structlog.get_logger()


def new_order_id() -> str:
    return f"AYO-{secrets.token_hex(5).upper()}"


class CheckoutService:
    """Prices a cart, charges it and persists the PENDING order"""
    
    def __init__(
        self,
        db: AsyncSession,
        gateway: PaymentGateway,
        hub: Optional[OrderEventHub] = None,
    ):
        self.db = db
        self.gateway = gateway
        self.orders = OrderRepository(db, hub)
        self.ledger = LedgerStore(db)
    
    async def place_order(self, customer: Account, request: CheckoutRequest) -> Order:
        items = [item.model_dump() for item in request.items]
        voucher = get_voucher(request.voucher_code)
        delivery_fee = await read_delivery_fee(self.db)
        priced = quote(items, delivery_fee, voucher)
        order_id = new_order_id()
        
        # Raises before anything is written, so a denial leaves no trace
        charge = await self.gateway.charge(
            customer.email,
            request.payment_method_id,
            priced.total_cents,
            f"Ayoo order {order_id}",
        )
        
        order = Order(
            id=order_id,
            restaurant_name=request.restaurant_name,
            merchant_id=request.merchant_id,
            customer_email=customer.email,
            customer_name=customer.name,
            delivery_address=request.delivery_address,
            items_json=items,
            subtotal_cents=priced.subtotal_cents,
            delivery_fee_cents=priced.delivery_fee_cents,
            discount_cents=priced.discount_cents,
            voucher_code=priced.voucher_code,
            total_cents=priced.total_cents,
            points_earned=priced.points_earned,
            payment_reference=charge.reference,
            status=OrderStatus.PENDING.value,
            version=1,
        )
        self.orders.add(order)
        
        if charge.method != "COD":
            self.ledger.append(
                customer.email,
                LedgerEntryType.DEBIT,
                charge.amount_cents,
                f"Order {order_id} at {request.restaurant_name}",
                charge.reference,
            )
        
        self.db.add(
            AuditLog(
                actor_email=customer.email,
                actor_role=customer.role.value,
                action="order.placed",
                resource_id=order_id,
                data_json={"to": OrderStatus.PENDING.value, "total_cents": priced.total_cents},
            )
        )
        await self.orders.save("order.placed", order_id=order_id)
        
        logger.info(
            "Order placed",
            order_id=order_id,
            restaurant_name=request.restaurant_name,
            total_cents=priced.total_cents,
            points_reserved=priced.points_earned,
        )
        return order
