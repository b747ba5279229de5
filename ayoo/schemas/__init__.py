"""Pydantic schemas for request/response validation"""

from ayoo.schemas.auth import (
    Token,
    RefreshRequest,
    AccountCreate,
    ProfileUpdate,
    AccountResponse,
)
from ayoo.schemas.order import (
    OrderItem,
    CheckoutRequest,
    TransitionRequest,
    FeedbackRequest,
    AssignRequest,
    OrderResponse,
    DutyQueueResponse,
    DeliveryFeeConfig,
)
from ayoo.schemas.account import (
    LedgerEntryResponse,
    LedgerResponse,
    PaymentMethodCreate,
    PaymentMethodResponse,
)

__all__ = [
    "Token",
    "RefreshRequest",
    "AccountCreate",
    "ProfileUpdate",
    "AccountResponse",
    "OrderItem",
    "CheckoutRequest",
    "TransitionRequest",
    "FeedbackRequest",
    "AssignRequest",
    "OrderResponse",
    "DutyQueueResponse",
    "DeliveryFeeConfig",
    "LedgerEntryResponse",
    "LedgerResponse",
    "PaymentMethodCreate",
    "PaymentMethodResponse",
]
