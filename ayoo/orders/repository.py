"""Order repository over the async session"""

from typing import List, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ayoo.models.order import Order
from ayoo.orders.errors import OrderNotFound
from ayoo.orders.fanout import OrderEventHub, hub as default_hub

logger = structlog.get_logger()


class OrderRepository:
    """
    Durable collection of orders keyed by id.
    
    Reads are always newest-first. `save` commits the unit of work and
    then fires the fan-out, so every successful write is announced.
    """
    
    def __init__(self, db: AsyncSession, hub: Optional[OrderEventHub] = None):
        self.db = db
        self.hub = hub or default_hub
    
    async def get(self, order_id: str, for_update: bool = False) -> Order:
        query = select(Order).where(Order.id == order_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        order = result.scalar_one_or_none()
        if order is None:
            raise OrderNotFound(order_id)
        return order
    
    async def find(self, *criteria) -> List[Order]:
        query = select(Order).where(*criteria).order_by(Order.created_at.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())
    
    async def list_all(self) -> List[Order]:
        return await self.find()
    
    def add(self, order: Order) -> None:
        self.db.add(order)
    
    async def save(self, reason: str, order_id: Optional[str] = None) -> None:
        await self.db.commit()
        logger.debug("Order repository committed", reason=reason, order_id=order_id)
        await self.hub.publish(reason, order_id=order_id)
