"""Order lifecycle API endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
import structlog

from ayoo.api.auth import get_current_active_user, require_role
from ayoo.api.deps import get_checkout_service, get_order_repository, get_state_machine
from ayoo.models.account import Account, AccountRole
from ayoo.models.order import Order, OrderStatus
from ayoo.orders import dispatch
from ayoo.orders.checkout import CheckoutService
from ayoo.orders.lifecycle import OrderStateMachine
from ayoo.orders.repository import OrderRepository
from ayoo.schemas.order import (
    CheckoutRequest,
    FeedbackRequest,
    OrderResponse,
    TransitionRequest,
)

router = APIRouter()
logger = structlog.get_logger()

MERCHANT_TARGETS = frozenset({
    OrderStatus.ACCEPTED,
    OrderStatus.PREPARING,
    OrderStatus.READY_FOR_PICKUP,
    OrderStatus.CANCELLED,
})
RIDER_TARGETS = frozenset({OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED})


def is_merchant_of(account: Account, order: Order) -> bool:
    if account.role != AccountRole.MERCHANT:
        return False
    if account.merchant_id and order.merchant_id:
        return account.merchant_id == order.merchant_id
    return account.name == order.restaurant_name


def can_view(account: Account, order: Order) -> bool:
    return (
        account.role == AccountRole.ADMIN
        or order.customer_email == account.email
        or order.rider_email == account.email
        or is_merchant_of(account, order)
    )


def authorize_transition(account: Account, order: Order, target: OrderStatus) -> None:
    """Scope status changes to the actor's role"""
    if account.role == AccountRole.ADMIN:
        return
    if is_merchant_of(account, order) and target in MERCHANT_TARGETS:
        return
    if (
        account.role == AccountRole.RIDER
        and order.rider_email == account.email
        and target in RIDER_TARGETS
    ):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Not allowed to move this order to {target.value}",
    )


def authorize_feedback(account: Account, order: Order, request: TransitionRequest) -> None:
    """Tip, rating and comment belong to the order's customer"""
    given = [
        name
        for name in ("tip_cents", "rating", "comment")
        if getattr(request, name) is not None
    ]
    if not given:
        return
    if account.role == AccountRole.ADMIN or order.customer_email == account.email:
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Only the customer can set {', '.join(given)}",
    )


@router.post("", response_model=OrderResponse, status_code=201)
async def place_order(
    request: CheckoutRequest,
    current_user: Account = Depends(require_role(AccountRole.CUSTOMER)),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """Checkout the cart and place a PENDING order"""
    return await checkout.place_order(current_user, request)


@router.get("/live", response_model=Optional[OrderResponse])
async def get_live_order(
    current_user: Account = Depends(get_current_active_user),
    repo: OrderRepository = Depends(get_order_repository),
):
    """Customer's current non-terminal order, or null"""
    return await dispatch.live_order_for_customer(repo, current_user.email)


@router.get("/history", response_model=List[OrderResponse])
async def get_history(
    current_user: Account = Depends(get_current_active_user),
    repo: OrderRepository = Depends(get_order_repository),
):
    """Customer's orders, newest first"""
    return await dispatch.orders_for_customer(repo, current_user.email)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    current_user: Account = Depends(get_current_active_user),
    repo: OrderRepository = Depends(get_order_repository),
):
    """Get order details"""
    order = await repo.get(order_id)
    if not can_view(current_user, order):
        raise HTTPException(status_code=403, detail="Access denied to this order")
    return order


@router.post("/{order_id}/transition", response_model=OrderResponse)
async def transition_order(
    order_id: str,
    request: TransitionRequest,
    current_user: Account = Depends(get_current_active_user),
    repo: OrderRepository = Depends(get_order_repository),
    machine: OrderStateMachine = Depends(get_state_machine),
):
    """Advance an order through its lifecycle"""
    order = await repo.get(order_id)
    authorize_transition(current_user, order, request.status)
    authorize_feedback(current_user, order, request)
    
    return await machine.transition(
        order_id,
        request.status,
        {
            "tip_cents": request.tip_cents,
            "rating": request.rating,
            "comment": request.comment,
        },
        actor=current_user,
        expected_version=request.expected_version,
    )


@router.post("/{order_id}/claim", response_model=OrderResponse)
async def claim_order(
    order_id: str,
    current_user: Account = Depends(require_role(AccountRole.RIDER)),
    machine: OrderStateMachine = Depends(get_state_machine),
):
    """Rider picks up an order from the open market"""
    return await machine.claim(
        order_id,
        current_user.email,
        current_user.name,
        actor=current_user,
    )


@router.post("/{order_id}/feedback", response_model=OrderResponse)
async def submit_feedback(
    order_id: str,
    request: FeedbackRequest,
    current_user: Account = Depends(get_current_active_user),
    repo: OrderRepository = Depends(get_order_repository),
    machine: OrderStateMachine = Depends(get_state_machine),
):
    """Confirm delivery with rating, comment and tip"""
    order = await repo.get(order_id)
    if order.customer_email != current_user.email and current_user.role != AccountRole.ADMIN:
        raise HTTPException(status_code=403, detail="Only the customer can rate this order")
    if OrderStatus(order.status) not in (OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED):
        raise HTTPException(status_code=409, detail="Order has not been dispatched yet")
    
    return await machine.submit_feedback(
        order_id,
        rating=request.rating,
        comment=request.comment,
        tip_cents=request.tip_cents,
        actor=current_user,
    )


@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    current_user: Account = Depends(get_current_active_user),
    repo: OrderRepository = Depends(get_order_repository),
    machine: OrderStateMachine = Depends(get_state_machine),
):
    """Customer withdraws an order the restaurant has not accepted yet"""
    order = await repo.get(order_id)
    if current_user.role != AccountRole.ADMIN:
        if order.customer_email != current_user.email:
            raise HTTPException(status_code=403, detail="Access denied to this order")
        if OrderStatus(order.status) != OrderStatus.PENDING:
            raise HTTPException(status_code=409, detail="Only pending orders can be cancelled")
    
    return await machine.cancel(order_id, actor=current_user)
