#!/usr/bin/env python3
"""
Seed script to create demo accounts, payment methods and delivery fee
"""

import asyncio
import uuid

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select
    
    from ayoo.database import SessionLocal, engine, Base
    from ayoo.models.account import Account, AccountRole
    from ayoo.models.payment import PaymentMethod
    from ayoo.orders.fees import set_delivery_fee
    
    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    async with SessionLocal() as db:
        # Check if demo merchant already exists
        result = await db.execute(
            select(Account).where(Account.email == "jollibee@ayoo.ph")
        )
        existing = result.scalar_one_or_none()
        
        if existing:
            print("Demo data already exists. Skipping...")
            return
        
        print("Creating demo accounts...")
        
        accounts = [
            Account(
                id=uuid.uuid4(),
                email="admin@ayoo.ph",
                hashed_password=pwd_context.hash("admin123"),
                name="Ayoo Ops",
                role=AccountRole.ADMIN,
            ),
            Account(
                id=uuid.uuid4(),
                email="jollibee@ayoo.ph",
                hashed_password=pwd_context.hash("merchant123"),
                name="Jollibee Iligan",
                role=AccountRole.MERCHANT,
                merchant_id="jollibee-iligan",
                preferred_city="Iligan City",
            ),
            Account(
                id=uuid.uuid4(),
                email="rico@ayoo.ph",
                hashed_password=pwd_context.hash("rider123"),
                name="Rico",
                role=AccountRole.RIDER,
                preferred_city="Iligan City",
            ),
            Account(
                id=uuid.uuid4(),
                email="juan@ayoo.ph",
                hashed_password=pwd_context.hash("customer123"),
                name="Juan Dela Cruz",
                role=AccountRole.CUSTOMER,
                preferred_city="Iligan City",
            ),
        ]
        for account in accounts:
            account.points = 0
            account.xp = 0
            account.level = 1
            account.earnings_cents = 0
            db.add(account)
        
        print("Creating payment methods...")
        
        db.add(PaymentMethod(account_email="juan@ayoo.ph", kind="VISA", last4="4242", expiry="12/28"))
        db.add(PaymentMethod(account_email="juan@ayoo.ph", kind="GCASH", balance_cents=150000))
        
        await db.commit()
        await set_delivery_fee(db, 4500, updated_by="seed")
        
        print("""
Demo data created successfully!

Accounts:
  Admin:     admin@ayoo.ph / admin123
  Merchant:  jollibee@ayoo.ph / merchant123 (Jollibee Iligan)
  Rider:     rico@ayoo.ph / rider123
  Customer:  juan@ayoo.ph / customer123 (VISA, GCash ₱1,500.00)

Delivery fee: ₱45.00
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
