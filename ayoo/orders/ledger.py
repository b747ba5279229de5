"""Append-only ledger store"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ayoo.models.ledger import LedgerEntry, LedgerEntryType, LedgerEntryStatus
from ayoo.orders.accounts import normalize_email


class LedgerStore:
    """Writes and reads ledger entries. There is no update or delete."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    def append(
        self,
        account_email: str,
        entry_type: LedgerEntryType,
        amount_cents: int,
        description: str,
        reference: str,
        status: LedgerEntryStatus = LedgerEntryStatus.SETTLED,
    ) -> LedgerEntry:
        entry = LedgerEntry(
            account_email=normalize_email(account_email),
            entry_type=entry_type,
            amount_cents=amount_cents,
            description=description,
            reference=reference,
            status=status,
        )
        self.db.add(entry)
        return entry
    
    async def entries_for(self, account_email: str) -> List[LedgerEntry]:
        result = await self.db.execute(
            select(LedgerEntry)
            .where(LedgerEntry.account_email == normalize_email(account_email))
            .order_by(LedgerEntry.created_at.desc())
        )
        return list(result.scalars().all())
