"""Base payment gateway interface"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ChargeResult:
    reference: str
    amount_cents: int
    method: str


class PaymentGateway(ABC):
    """Abstract base class for payment gateways"""
    
    @abstractmethod
    async def charge(
        self,
        account_email: str,
        method_id: Optional[str],
        amount_cents: int,
        description: str,
    ) -> ChargeResult:
        """
        Charge a stored payment method.
        
        Raises InsufficientFunds when a debit-based method cannot cover the
        amount and GatewayFault for any other failure.
        """
        pass
