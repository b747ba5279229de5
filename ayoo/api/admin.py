"""Admin panel API endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ayoo.api.auth import require_role
from ayoo.api.deps import get_state_machine
from ayoo.database import get_db
from ayoo.models.account import Account, AccountRole
from ayoo.orders.accounts import AccountRegistry
from ayoo.orders.errors import AccountNotFound
from ayoo.orders.fees import read_delivery_fee, set_delivery_fee
from ayoo.orders.lifecycle import OrderStateMachine
from ayoo.schemas.order import AssignRequest, DeliveryFeeConfig, OrderResponse

router = APIRouter()
logger = structlog.get_logger()


@router.post("/orders/{order_id}/assign", response_model=OrderResponse)
async def force_assign(
    order_id: str,
    request: AssignRequest,
    current_user: Account = Depends(require_role(AccountRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
    machine: OrderStateMachine = Depends(get_state_machine),
):
    """Assign a rider to an order regardless of the market"""
    rider = await AccountRegistry(db).require_by_email(request.rider_email)
    if rider.role != AccountRole.RIDER:
        raise AccountNotFound(request.rider_email)
    
    order = await machine.force_assign(order_id, rider.email, rider.name, actor=current_user)
    logger.info("Rider force-assigned", order_id=order_id, rider_email=rider.email)
    return order


@router.get("/config/delivery-fee", response_model=DeliveryFeeConfig)
async def get_delivery_fee(
    current_user: Account = Depends(require_role(AccountRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Current flat delivery fee"""
    return DeliveryFeeConfig(delivery_fee_cents=await read_delivery_fee(db))


@router.put("/config/delivery-fee", response_model=DeliveryFeeConfig)
async def update_delivery_fee(
    request: DeliveryFeeConfig,
    current_user: Account = Depends(require_role(AccountRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Change the delivery fee for future checkouts and settlements"""
    fee = await set_delivery_fee(db, request.delivery_fee_cents, updated_by=current_user.email)
    logger.info("Delivery fee updated", delivery_fee_cents=fee, updated_by=current_user.email)
    return DeliveryFeeConfig(delivery_fee_cents=fee)
