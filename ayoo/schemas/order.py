"""Order schemas"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from ayoo.models.order import OrderStatus


class OrderItem(BaseModel):
    """Line item snapshot"""
    name: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    price_cents: int = Field(..., ge=0)


class CheckoutRequest(BaseModel):
    """Place order request"""
    restaurant_name: str = Field(..., min_length=1)
    merchant_id: Optional[str] = None
    delivery_address: str = Field(..., min_length=1)
    items: List[OrderItem] = Field(..., min_length=1)
    voucher_code: Optional[str] = None
    payment_method_id: Optional[str] = None


class TransitionRequest(BaseModel):
    """Advance an order"""
    status: OrderStatus
    tip_cents: Optional[int] = Field(None, ge=0)
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None
    expected_version: Optional[int] = None


class FeedbackRequest(BaseModel):
    """Customer feedback at delivery"""
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None
    tip_cents: Optional[int] = Field(None, ge=0)


class AssignRequest(BaseModel):
    """Admin force-assign"""
    rider_email: str


class OrderResponse(BaseModel):
    """Order response"""
    id: str
    restaurant_name: str
    merchant_id: Optional[str]
    customer_email: str
    customer_name: str
    delivery_address: str
    items: List[OrderItem]
    subtotal_cents: int
    delivery_fee_cents: int
    discount_cents: int
    voucher_code: Optional[str]
    total_cents: int
    points_earned: int
    payment_reference: Optional[str]
    status: OrderStatus
    version: int
    rider_name: Optional[str]
    rider_email: Optional[str]
    tip_cents: Optional[int]
    rating: Optional[int]
    comment: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]
    delivered_at: Optional[datetime]
    cancelled_at: Optional[datetime]

    class Config:
        from_attributes = True


class DutyQueueResponse(BaseModel):
    """Rider's orders split into active and history"""
    active: List[OrderResponse]
    history: List[OrderResponse]


class DeliveryFeeConfig(BaseModel):
    """Flat delivery fee used in checkout and settlement"""
    delivery_fee_cents: int = Field(..., ge=0)
