"""Order model"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON, Text, Integer
import enum

from ayoo.database import Base


class OrderStatus(str, enum.Enum):
    """Delivery lifecycle states, in forward order"""
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    PREPARING = "PREPARING"
    READY_FOR_PICKUP = "READY_FOR_PICKUP"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


class Order(Base):
    """Delivery orders"""
    __tablename__ = "orders"
    
    id = Column(String(20), primary_key=True)
    
    # Routing and identity, fixed at placement
    restaurant_name = Column(String(255), nullable=False, index=True)
    merchant_id = Column(String(64), index=True)
    customer_email = Column(String(255), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    delivery_address = Column(Text, nullable=False)
    
    # Line items captured by value
    # [{"name": "Chickenjoy", "quantity": 2, "price_cents": 9900}, ...]
    items_json = Column(JSON, nullable=False)
    
    # Pricing
    subtotal_cents = Column(Integer, nullable=False, default=0)
    delivery_fee_cents = Column(Integer, nullable=False, default=0)
    discount_cents = Column(Integer, nullable=False, default=0)
    voucher_code = Column(String(50))
    total_cents = Column(Integer, nullable=False, default=0)
    points_earned = Column(Integer, nullable=False, default=0)
    payment_reference = Column(String(50))
    
    # Status
    status = Column(String(30), nullable=False, default=OrderStatus.PENDING.value, index=True)
    version = Column(Integer, nullable=False, default=1)
    
    # Rider assignment
    rider_name = Column(String(255))
    rider_email = Column(String(255), index=True)
    
    # Feedback, set at or after delivery
    tip_cents = Column(Integer)
    rating = Column(Integer)
    comment = Column(Text)
    
    # Timing
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    delivered_at = Column(DateTime)
    cancelled_at = Column(DateTime)
    
    @property
    def items(self) -> list:
        return list(self.items_json or [])
    
    @property
    def is_terminal(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATUSES
