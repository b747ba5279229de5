"""Audit log model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.dialects.postgresql import UUID

from ayoo.database import Base


class AuditLog(Base):
    """Audit trail for order placement and status changes"""
    __tablename__ = "audit_logs"
    
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    
    # Actor information
    actor_email = Column(String(255))  # null for system
    actor_role = Column(String(50))
    
    # Action details
    action = Column(String(100), nullable=False)  # order.placed, order.transition, order.assigned
    resource_type = Column(String(50), default="order")
    resource_id = Column(String(50), index=True)
    
    # Change data
    data_json = Column(JSON)  # {"from": "PENDING", "to": "ACCEPTED"}
    
    created_at = Column(DateTime, default=datetime.utcnow)
