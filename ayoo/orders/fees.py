"""Delivery fee configuration"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ayoo.config import settings
from ayoo.models.platform import PlatformConfig

DELIVERY_FEE_KEY = "delivery_fee_cents"


async def read_delivery_fee(db: AsyncSession) -> int:
    """Current flat delivery fee in centavos"""
    row = await db.get(PlatformConfig, DELIVERY_FEE_KEY)
    if row is None:
        return settings.default_delivery_fee_cents
    return row.value


async def set_delivery_fee(db: AsyncSession, fee_cents: int, updated_by: Optional[str] = None) -> int:
    if fee_cents < 0:
        raise ValueError("Delivery fee cannot be negative")
    row = await db.get(PlatformConfig, DELIVERY_FEE_KEY)
    if row is None:
        row = PlatformConfig(key=DELIVERY_FEE_KEY, value=fee_cents, updated_by=updated_by)
        db.add(row)
    else:
        row.value = fee_cents
        row.updated_by = updated_by
    await db.commit()
    return fee_cents
