"""Account model shared by customers, merchants, riders and admins"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Integer, Enum
from sqlalchemy.dialects.postgresql import UUID
import enum

from ayoo.database import Base


XP_PER_LEVEL = 5000


def level_for_xp(xp: int) -> int:
    """Loyalty level derived from accumulated XP"""
    return max(xp, 0) // XP_PER_LEVEL + 1


class AccountRole(str, enum.Enum):
    """Account roles"""
    CUSTOMER = "CUSTOMER"
    MERCHANT = "MERCHANT"
    RIDER = "RIDER"
    ADMIN = "ADMIN"


class Account(Base):
    """Customer, merchant, rider or admin identity"""
    __tablename__ = "accounts"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    
    # Authentication (email is stored lower-cased)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    
    # Profile; for merchants `name` is the restaurant display name
    name = Column(String(255), nullable=False, index=True)
    avatar = Column(String(500))
    preferred_city = Column(String(100))
    
    # Role
    role = Column(Enum(AccountRole), nullable=False, default=AccountRole.CUSTOMER)
    merchant_id = Column(String(64), unique=True)
    
    # Loyalty and payouts, only moved by settlement
    points = Column(Integer, nullable=False, default=0)
    xp = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    earnings_cents = Column(Integer, nullable=False, default=0)
    
    # Status
    is_active = Column(Boolean, default=True)
    
    # Tokens
    refresh_token = Column(String(500))
    
    # Timestamps
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def recompute_level(self) -> int:
        self.level = level_for_xp(self.xp or 0)
        return self.level
