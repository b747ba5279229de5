"""
Settlement of delivered orders.

Runs once per order inside the delivering transition. Each party is
credited independently: a merchant or rider that cannot be found is
logged and skipped, never an error.
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ayoo.models.ledger import LedgerEntryType
from ayoo.models.order import Order
from ayoo.orders.accounts import AccountRegistry
from ayoo.orders.fees import read_delivery_fee
from ayoo.orders.ledger import LedgerStore

logger = structlog.get_logger()

MERCHANT_SHARE_PERCENT = 85  # flat 15% platform commission


def merchant_cut_for(total_cents: int) -> int:
    return (total_cents * MERCHANT_SHARE_PERCENT + 50) // 100


def rider_cut_for(delivery_fee_cents: int, tip_cents: Optional[int]) -> int:
    return delivery_fee_cents + (tip_cents or 0)


@dataclass
class SettlementReport:
    order_id: str
    delivery_fee_cents: int
    merchant_cut_cents: int
    rider_cut_cents: int
    merchant_credited: bool = False
    rider_credited: bool = False
    customer_credited: bool = False


class SettlementEngine:
    """Applies merchant, rider and customer effects of a delivery"""
    
    def __init__(
        self,
        db: AsyncSession,
        accounts: Optional[AccountRegistry] = None,
        ledger: Optional[LedgerStore] = None,
    ):
        self.db = db
        self.accounts = accounts or AccountRegistry(db)
        self.ledger = ledger or LedgerStore(db)
    
    async def settle(self, order: Order, rider_email_hint: Optional[str] = None) -> SettlementReport:
        """Credit all parties; the caller owns the transaction"""
        delivery_fee = await read_delivery_fee(self.db)
        report = SettlementReport(
            order_id=order.id,
            delivery_fee_cents=delivery_fee,
            merchant_cut_cents=merchant_cut_for(order.total_cents),
            rider_cut_cents=rider_cut_for(delivery_fee, order.tip_cents),
        )
        
        merchant = await self.accounts.find_merchant(order.merchant_id, order.restaurant_name)
        if merchant is None:
            logger.warning(
                "Settlement skipped merchant",
                order_id=order.id,
                restaurant_name=order.restaurant_name,
            )
        else:
            self.accounts.credit(merchant, earnings_cents=report.merchant_cut_cents)
            self.ledger.append(
                merchant.email,
                LedgerEntryType.CREDIT,
                report.merchant_cut_cents,
                f"Order {order.id} payout",
                order.id,
            )
            report.merchant_credited = True
        
        rider_email = order.rider_email or rider_email_hint
        rider = await self.accounts.get_by_email(rider_email)
        if rider is None:
            logger.warning("Settlement skipped rider", order_id=order.id, rider_email=rider_email)
        else:
            self.accounts.credit(rider, earnings_cents=report.rider_cut_cents)
            self.ledger.append(
                rider.email,
                LedgerEntryType.CREDIT,
                report.rider_cut_cents,
                f"Delivery fee and tip for {order.id}",
                order.id,
            )
            report.rider_credited = True
        
        customer = await self.accounts.get_by_email(order.customer_email)
        if customer is None:
            logger.warning("Settlement skipped customer", order_id=order.id)
        else:
            self.accounts.credit(
                customer,
                points=order.points_earned or 0,
                xp=order.total_cents // 100,
            )
            # Tips are handed to the rider in cash; the gateway never sees them
            if order.tip_cents:
                self.ledger.append(
                    customer.email,
                    LedgerEntryType.DEBIT,
                    order.tip_cents,
                    f"Cash tip for {order.id}, paid to rider",
                    order.id,
                )
            report.customer_credited = True
        
        logger.info(
            "Order settled",
            order_id=order.id,
            merchant_cut_cents=report.merchant_cut_cents,
            rider_cut_cents=report.rider_cut_cents,
            merchant_credited=report.merchant_credited,
            rider_credited=report.rider_credited,
        )
        return report
