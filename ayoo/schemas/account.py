"""Account, ledger and payment method schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field

from ayoo.models.ledger import LedgerEntryType, LedgerEntryStatus


class LedgerEntryResponse(BaseModel):
    """Ledger entry"""
    id: UUID
    entry_type: LedgerEntryType
    amount_cents: int
    description: Optional[str]
    reference: Optional[str]
    status: LedgerEntryStatus
    created_at: datetime

    class Config:
        from_attributes = True


class LedgerResponse(BaseModel):
    """Wallet view"""
    earnings_cents: int
    entries: List[LedgerEntryResponse]


class PaymentMethodCreate(BaseModel):
    """Add payment method request"""
    kind: str = Field(..., pattern="^(VISA|MASTERCARD|GCASH|MAYA)$")
    last4: Optional[str] = Field(None, pattern=r"^\d{4}$")
    expiry: Optional[str] = None
    balance_cents: Optional[int] = Field(None, ge=0)


class PaymentMethodResponse(BaseModel):
    """Payment method"""
    id: UUID
    kind: str
    last4: Optional[str]
    expiry: Optional[str]
    balance_cents: Optional[int]
    is_active: bool

    class Config:
        from_attributes = True
