"""Wallet and payment method API endpoints"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ayoo.api.auth import get_current_active_user
from ayoo.database import get_db
from ayoo.models.account import Account
from ayoo.models.payment import PaymentMethod
from ayoo.orders.ledger import LedgerStore
from ayoo.schemas.account import (
    LedgerEntryResponse,
    LedgerResponse,
    PaymentMethodCreate,
    PaymentMethodResponse,
)

router = APIRouter()


@router.get("/me/ledger", response_model=LedgerResponse)
async def get_ledger(
    current_user: Account = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Settled earnings and transaction history"""
    entries = await LedgerStore(db).entries_for(current_user.email)
    return LedgerResponse(
        earnings_cents=current_user.earnings_cents,
        entries=[LedgerEntryResponse.model_validate(entry) for entry in entries],
    )


@router.get("/me/payment-methods", response_model=List[PaymentMethodResponse])
async def list_payment_methods(
    current_user: Account = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Stored payment methods"""
    result = await db.execute(
        select(PaymentMethod)
        .where(PaymentMethod.account_email == current_user.email)
        .order_by(PaymentMethod.created_at)
    )
    return result.scalars().all()


@router.post("/me/payment-methods", response_model=PaymentMethodResponse, status_code=201)
async def add_payment_method(
    request: PaymentMethodCreate,
    current_user: Account = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Link a card or e-wallet"""
    method = PaymentMethod(account_email=current_user.email, **request.model_dump())
    db.add(method)
    await db.commit()
    await db.refresh(method)
    return method
