"""Payment gateway implementations"""

from ayoo.payments.base import ChargeResult, PaymentGateway
from ayoo.payments.simulated import SimulatedGateway

__all__ = [
    "ChargeResult",
    "PaymentGateway",
    "SimulatedGateway",
]
