"""Test configuration and fixtures"""

import os

os.environ.setdefault("SYNC_BROADCAST_ENABLED", "false")
os.environ.setdefault("PAYMENT_LATENCY_SECONDS", "0")
os.environ.setdefault("LOG_FORMAT", "console")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from uuid import uuid4

from ayoo.main import app
from ayoo.database import Base, get_db
from ayoo.models.account import Account, AccountRole
from ayoo.models.order import Order, OrderStatus
from ayoo.models.payment import PaymentMethod
from ayoo.api.auth import get_password_hash, create_access_token
from ayoo.api.deps import get_payment_gateway
from ayoo.orders.fanout import OrderEventHub, get_event_hub
from ayoo.orders.lifecycle import OrderStateMachine
from ayoo.payments.simulated import SimulatedGateway


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

RESTAURANT = "Jollibee Iligan"


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    
    async with session_factory() as session:
        yield session
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    
    await engine.dispose()


@pytest.fixture
def hub():
    """Isolated fan-out hub without a broadcaster"""
    return OrderEventHub()


@pytest.fixture
def machine(test_db, hub):
    return OrderStateMachine(test_db, hub, strict=True)


async def make_account(db, email, name, role, **fields) -> Account:
    account = Account(
        id=uuid4(),
        email=email,
        hashed_password=get_password_hash("secret123"),
        name=name,
        role=role,
        points=0,
        xp=0,
        level=1,
        earnings_cents=0,
        is_active=True,
        **fields,
    )
    db.add(account)
    await db.commit()
    return account


@pytest.fixture
async def customer(test_db):
    return await make_account(test_db, "juan@example.com", "Juan Dela Cruz", AccountRole.CUSTOMER)


@pytest.fixture
async def merchant(test_db):
    return await make_account(test_db, "jollibee@example.com", RESTAURANT, AccountRole.MERCHANT)


@pytest.fixture
async def rider(test_db):
    return await make_account(test_db, "rico@example.com", "Rico", AccountRole.RIDER)


@pytest.fixture
async def admin(test_db):
    return await make_account(test_db, "ops@example.com", "Ayoo Ops", AccountRole.ADMIN)


@pytest.fixture
async def gcash(test_db, customer):
    """Debit-based payment method with ₱500.00"""
    method = PaymentMethod(account_email=customer.email, kind="GCASH", balance_cents=50000)
    test_db.add(method)
    await test_db.commit()
    return method


@pytest.fixture
def order_factory(test_db):
    """Insert orders directly, bypassing checkout"""
    async def create(
        status=OrderStatus.PENDING,
        restaurant_name=RESTAURANT,
        customer_email="juan@example.com",
        total_cents=100000,
        rider_email=None,
        **fields,
    ) -> Order:
        order = Order(
            id=f"AYO-{uuid4().hex[:10].upper()}",
            restaurant_name=restaurant_name,
            customer_email=customer_email,
            customer_name="Juan Dela Cruz",
            delivery_address=fields.pop("delivery_address", "Tibanga, Iligan City"),
            items_json=[{"name": "Chickenjoy Bucket", "quantity": 1, "price_cents": total_cents}],
            subtotal_cents=total_cents,
            delivery_fee_cents=0,
            discount_cents=0,
            total_cents=total_cents,
            points_earned=total_cents // 1000,
            status=OrderStatus(status).value,
            version=1,
            rider_email=rider_email,
            **fields,
        )
        test_db.add(order)
        await test_db.commit()
        return order
    
    return create


@pytest.fixture
async def client(test_db, hub):
    """Create test client with overridden database, hub and gateway"""
    async def override_get_db():
        yield test_db
    
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_event_hub] = lambda: hub
    app.dependency_overrides[get_payment_gateway] = lambda: SimulatedGateway(test_db)
    
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Authenticated request headers for an account"""
    def headers(account: Account) -> dict:
        return {"Authorization": f"Bearer {create_access_token(account)}"}
    
    return headers


@pytest.fixture
def account_factory(test_db):
    """Create extra accounts inside a test"""
    async def create(email, name, role, **fields) -> Account:
        return await make_account(test_db, email, name, role, **fields)
    
    return create
