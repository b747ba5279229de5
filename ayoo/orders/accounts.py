"""Account registry used by settlement and dispatch"""

from typing import Optional

import structlog
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ayoo.models.account import Account, AccountRole
from ayoo.orders.errors import AccountNotFound

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountRegistry:
    """Indexed account lookups and balance credits"""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def get_by_email(self, email: Optional[str]) -> Optional[Account]:
        if not email:
            return None
        result = await self.db.execute(
            select(Account).where(func.lower(Account.email) == normalize_email(email))
        )
        return result.scalar_one_or_none()
    
    async def require_by_email(self, email: str) -> Account:
        account = await self.get_by_email(email)
        if account is None:
            raise AccountNotFound(email)
        return account
    
    async def find_merchant(
        self,
        merchant_id: Optional[str],
        restaurant_name: Optional[str],
    ) -> Optional[Account]:
        """
        Resolve the merchant paid for an order.
        
        A stable merchant id wins when both sides carry one; otherwise the
        restaurant display name is matched against merchant account names.
        Two merchants sharing a name resolve to the oldest account.
        """
        if merchant_id:
            result = await self.db.execute(
                select(Account).where(Account.merchant_id == merchant_id)
            )
            account = result.scalar_one_or_none()
            if account is not None:
                return account
        
        if not restaurant_name:
            return None
        
        result = await self.db.execute(
            select(Account)
            .where(
                Account.name == restaurant_name,
                Account.role == AccountRole.MERCHANT,
            )
            .order_by(Account.created_at)
        )
        return result.scalars().first()
    
    async def merchant_name_taken(self, name: str, exclude: Optional[Account] = None) -> bool:
        """True when another merchant account already trades under `name`"""
        query = select(Account.id).where(
            func.lower(Account.name) == name.strip().lower(),
            Account.role == AccountRole.MERCHANT,
        )
        if exclude is not None:
            query = query.where(Account.id != exclude.id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def find_by_identifier(self, identifier: str) -> Optional[Account]:
        """Email for riders and customers, display name for merchants"""
        if "@" in identifier:
            return await self.get_by_email(identifier)
        return await self.find_merchant(None, identifier)
    
    def credit(
        self,
        account: Account,
        earnings_cents: int = 0,
        points: int = 0,
        xp: int = 0,
    ) -> Account:
        """Apply deltas in place; the caller commits"""
        account.earnings_cents = (account.earnings_cents or 0) + earnings_cents
        account.points = (account.points or 0) + points
        account.xp = (account.xp or 0) + xp
        account.recompute_level()
        return account
    
    async def credit_account(
        self,
        identifier: str,
        earnings_cents: int = 0,
        points: int = 0,
        xp: int = 0,
    ) -> Account:
        account = await self.find_by_identifier(identifier)
        if account is None:
            raise AccountNotFound(identifier)
        return self.credit(account, earnings_cents=earnings_cents, points=points, xp=xp)
