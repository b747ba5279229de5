"""Simulated payment gateway backed by stored payment methods"""

import asyncio
import random
import secrets
import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ayoo.models.payment import PaymentMethod
from ayoo.orders.accounts import normalize_email
from ayoo.orders.errors import GatewayFault, InsufficientFunds
from ayoo.payments.base import ChargeResult, PaymentGateway

logger = structlog.get_logger()


def new_transaction_reference() -> str:
    return f"TXN-{secrets.token_hex(5).upper()}"


class SimulatedGateway(PaymentGateway):
    """Gateway that answers after an artificial round-trip delay"""
    
    def __init__(
        self,
        db: AsyncSession,
        latency_seconds: float = 0.0,
        fault_rate: float = 0.0,
        rng: Optional[random.Random] = None,
    ):
        self.db = db
        self.latency_seconds = latency_seconds
        self.fault_rate = fault_rate
        self.rng = rng or random.Random()
    
    async def charge(
        self,
        account_email: str,
        method_id: Optional[str],
        amount_cents: int,
        description: str,
    ) -> ChargeResult:
        if self.latency_seconds:
            await asyncio.sleep(self.latency_seconds)
        
        if method_id is None:
            return ChargeResult(
                reference=f"COD-{secrets.token_hex(5).upper()}",
                amount_cents=amount_cents,
                method="COD",
            )
        
        if self.fault_rate and self.rng.random() < self.fault_rate:
            logger.warning("Simulated gateway fault", account_email=account_email)
            raise GatewayFault("Payment could not be processed. Please try again.")
        
        method = await self._get_method(account_email, method_id)
        if method is None or not method.is_active:
            raise GatewayFault("Payment method was declined.")
        
        if method.balance_cents is not None:
            if method.balance_cents < amount_cents:
                logger.info(
                    "Payment denied for insufficient funds",
                    account_email=account_email,
                    method=method.kind,
                    amount_cents=amount_cents,
                )
                raise InsufficientFunds(f"{method.kind} balance is not enough for this order.")
            method.balance_cents -= amount_cents
        
        reference = new_transaction_reference()
        logger.info(
            "Payment captured",
            account_email=account_email,
            method=method.kind,
            amount_cents=amount_cents,
            reference=reference,
            description=description,
        )
        return ChargeResult(reference=reference, amount_cents=amount_cents, method=method.kind)
    
    async def _get_method(self, account_email: str, method_id: str) -> Optional[PaymentMethod]:
        try:
            method_uuid = uuid.UUID(str(method_id))
        except ValueError:
            return None
        result = await self.db.execute(
            select(PaymentMethod).where(
                PaymentMethod.id == method_uuid,
                PaymentMethod.account_email == normalize_email(account_email),
            )
        )
        return result.scalar_one_or_none()
