"""Ledger entry model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Enum
from sqlalchemy.dialects.postgresql import UUID
import enum

from ayoo.database import Base


class LedgerEntryType(str, enum.Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class LedgerEntryStatus(str, enum.Enum):
    PENDING = "PENDING"
    SETTLED = "SETTLED"


class LedgerEntry(Base):
    """Immutable record of one monetary movement against an account"""
    __tablename__ = "ledger_entries"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    account_email = Column(String(255), nullable=False, index=True)
    
    entry_type = Column(Enum(LedgerEntryType), nullable=False)
    amount_cents = Column(Integer, nullable=False)
    description = Column(String(255))
    reference = Column(String(50), index=True)  # order id or transaction id
    status = Column(Enum(LedgerEntryStatus), nullable=False, default=LedgerEntryStatus.SETTLED)
    
    # No updated_at: entries are never edited
    created_at = Column(DateTime, default=datetime.utcnow)
