"""Dispatch board API endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from ayoo.api.auth import require_role
from ayoo.api.deps import get_order_repository
from ayoo.models.account import Account, AccountRole
from ayoo.orders import dispatch
from ayoo.orders.repository import OrderRepository
from ayoo.schemas.order import DutyQueueResponse, OrderResponse

router = APIRouter()


@router.get("/market", response_model=List[OrderResponse])
async def get_open_market(
    zone: Optional[str] = None,
    current_user: Account = Depends(require_role(AccountRole.RIDER)),
    repo: OrderRepository = Depends(get_order_repository),
):
    """Unassigned orders ready for pickup"""
    return await dispatch.open_market(repo, zone or current_user.preferred_city)


@router.get("/duty", response_model=DutyQueueResponse)
async def get_duty_queue(
    current_user: Account = Depends(require_role(AccountRole.RIDER)),
    repo: OrderRepository = Depends(get_order_repository),
):
    """Orders assigned to the calling rider"""
    queue = await dispatch.rider_duty_queue(repo, current_user.email)
    return DutyQueueResponse(
        active=[OrderResponse.model_validate(order) for order in queue.active],
        history=[OrderResponse.model_validate(order) for order in queue.history],
    )


@router.get("/merchant", response_model=List[OrderResponse])
async def get_merchant_queue(
    current_user: Account = Depends(require_role(AccountRole.MERCHANT)),
    repo: OrderRepository = Depends(get_order_repository),
):
    """All orders for the calling merchant's restaurant"""
    return await dispatch.merchant_queue(repo, current_user.name, current_user.merchant_id)


@router.get("/live", response_model=List[OrderResponse])
async def get_live_orders(
    current_user: Account = Depends(require_role(AccountRole.ADMIN)),
    repo: OrderRepository = Depends(get_order_repository),
):
    """Every order that has not been delivered or cancelled"""
    return await dispatch.live_orders(repo)
