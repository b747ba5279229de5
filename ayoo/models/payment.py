"""Stored payment methods"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Integer
from sqlalchemy.dialects.postgresql import UUID

from ayoo.database import Base


class PaymentMethod(Base):
    """Customer payment methods"""
    __tablename__ = "payment_methods"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    account_email = Column(String(255), nullable=False, index=True)
    
    kind = Column(String(20), nullable=False)  # VISA, MASTERCARD, GCASH, MAYA
    last4 = Column(String(4))
    expiry = Column(String(7))
    
    # Debit-based methods carry a balance; None means no balance check
    balance_cents = Column(Integer)
    
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
