"""Platform-wide configuration rows"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer

from ayoo.database import Base


class PlatformConfig(Base):
    """Admin-editable numeric settings keyed by name"""
    __tablename__ = "platform_config"
    
    key = Column(String(100), primary_key=True)  # delivery_fee_cents, ...
    value = Column(Integer, nullable=False)
    updated_by = Column(String(255))
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
