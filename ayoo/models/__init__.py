"""Database models"""

from ayoo.models.account import Account, AccountRole, level_for_xp
from ayoo.models.order import Order, OrderStatus, TERMINAL_STATUSES
from ayoo.models.ledger import LedgerEntry, LedgerEntryType, LedgerEntryStatus
from ayoo.models.payment import PaymentMethod
from ayoo.models.platform import PlatformConfig
from ayoo.models.audit import AuditLog

__all__ = [
    "Account",
    "AccountRole",
    "level_for_xp",
    "Order",
    "OrderStatus",
    "TERMINAL_STATUSES",
    "LedgerEntry",
    "LedgerEntryType",
    "LedgerEntryStatus",
    "PaymentMethod",
    "PlatformConfig",
    "AuditLog",
]
