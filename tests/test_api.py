"""HTTP tests for the order lifecycle endpoints"""

import pytest

from ayoo.models.account import AccountRole
from ayoo.models.order import OrderStatus
from ayoo.models.payment import PaymentMethod

CART = [{"name": "Chickenjoy 2pc", "quantity": 2, "price_cents": 15000}]


def checkout_body(**overrides) -> dict:
    body = {
        "restaurant_name": "Jollibee Iligan",
        "delivery_address": "Tibanga, Iligan City",
        "items": CART,
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_register_and_login(client):
    response = await client.post(
        "/auth/register",
        json={"email": "Maria@Example.com", "password": "secret123", "name": "Maria"},
    )
    assert response.status_code == 201
    assert response.json()["email"] == "maria@example.com"
    assert response.json()["role"] == "CUSTOMER"
    
    response = await client.post(
        "/auth/login",
        data={"username": "maria@example.com", "password": "secret123"},
    )
    assert response.status_code == 200
    token = response.json()["access_token"]
    
    response = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["name"] == "Maria"


@pytest.mark.asyncio
async def test_admin_cannot_self_register(client):
    response = await client.post(
        "/auth/register",
        json={"email": "root@example.com", "password": "secret123", "name": "Root", "role": "ADMIN"},
    )
    
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_duplicate_registration(client, customer):
    response = await client.post(
        "/auth/register",
        json={"email": "JUAN@example.com", "password": "secret123", "name": "Juan"},
    )
    
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_requires_authentication(client):
    response = await client.get("/orders/history")
    
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_full_delivery_flow(client, auth_headers, customer, merchant, rider):
    response = await client.post("/orders", json=checkout_body(), headers=auth_headers(customer))
    assert response.status_code == 201
    order = response.json()
    assert order["status"] == "PENDING"
    assert order["total_cents"] == 34500
    assert order["points_earned"] == 34
    order_id = order["id"]
    
    response = await client.get("/orders/live", headers=auth_headers(customer))
    assert response.json()["id"] == order_id
    
    for target in ("ACCEPTED", "PREPARING", "READY_FOR_PICKUP"):
        response = await client.post(
            f"/orders/{order_id}/transition",
            json={"status": target},
            headers=auth_headers(merchant),
        )
        assert response.status_code == 200
        assert response.json()["status"] == target
    
    response = await client.get("/dispatch/market", headers=auth_headers(rider))
    assert [o["id"] for o in response.json()] == [order_id]
    
    response = await client.post(f"/orders/{order_id}/claim", headers=auth_headers(rider))
    assert response.status_code == 200
    assert response.json()["status"] == "OUT_FOR_DELIVERY"
    assert response.json()["rider_email"] == "rico@example.com"
    
    response = await client.get("/dispatch/market", headers=auth_headers(rider))
    assert response.json() == []
    
    response = await client.get("/dispatch/duty", headers=auth_headers(rider))
    assert [o["id"] for o in response.json()["active"]] == [order_id]
    
    response = await client.post(
        f"/orders/{order_id}/feedback",
        json={"rating": 5, "comment": "Mainit pa!", "tip_cents": 2000},
        headers=auth_headers(customer),
    )
    assert response.status_code == 200
    delivered = response.json()
    assert delivered["status"] == "DELIVERED"
    assert delivered["rating"] == 5
    assert delivered["tip_cents"] == 2000
    assert delivered["total_cents"] == 34500
    
    response = await client.get("/auth/me", headers=auth_headers(merchant))
    assert response.json()["earnings_cents"] == 29325
    
    response = await client.get("/accounts/me/ledger", headers=auth_headers(rider))
    ledger = response.json()
    assert ledger["earnings_cents"] == 6500
    assert [entry["entry_type"] for entry in ledger["entries"]] == ["CREDIT"]
    
    response = await client.get("/auth/me", headers=auth_headers(customer))
    assert response.json()["points"] == 34
    assert response.json()["xp"] == 345
    
    response = await client.get("/orders/live", headers=auth_headers(customer))
    assert response.json() is None


@pytest.mark.asyncio
async def test_unknown_order_returns_typed_404(client, auth_headers, customer):
    response = await client.get("/orders/AYO-MISSING", headers=auth_headers(customer))
    
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_insufficient_funds_returns_reference(client, auth_headers, test_db, customer):
    wallet = PaymentMethod(account_email=customer.email, kind="MAYA", balance_cents=1000)
    test_db.add(wallet)
    await test_db.commit()
    
    response = await client.post(
        "/orders",
        json=checkout_body(payment_method_id=str(wallet.id)),
        headers=auth_headers(customer),
    )
    
    assert response.status_code == 402
    body = response.json()
    assert body["code"] == "INSUFFICIENT_FUNDS"
    assert body["reference"].startswith("REF-")
    
    response = await client.get("/orders/history", headers=auth_headers(customer))
    assert response.json() == []


@pytest.mark.asyncio
async def test_invalid_voucher(client, auth_headers, customer):
    response = await client.post(
        "/orders",
        json=checkout_body(voucher_code="FREEFOOD"),
        headers=auth_headers(customer),
    )
    
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_VOUCHER"


@pytest.mark.asyncio
async def test_other_restaurant_cannot_advance(client, auth_headers, order_factory, account_factory):
    order = await order_factory()
    outsider = await account_factory("mang@example.com", "Mang Inasal Tibanga", AccountRole.MERCHANT)
    
    response = await client.post(
        f"/orders/{order.id}/transition",
        json={"status": "ACCEPTED"},
        headers=auth_headers(outsider),
    )
    
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_customer_cannot_view_someone_elses_order(client, auth_headers, order_factory, account_factory):
    order = await order_factory()
    stranger = await account_factory("pedro@example.com", "Pedro", AccountRole.CUSTOMER)
    
    response = await client.get(f"/orders/{order.id}", headers=auth_headers(stranger))
    
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_backward_transition_is_conflict(client, auth_headers, merchant, order_factory):
    order = await order_factory(status=OrderStatus.PREPARING)
    
    response = await client.post(
        f"/orders/{order.id}/transition",
        json={"status": "ACCEPTED"},
        headers=auth_headers(merchant),
    )
    
    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_TRANSITION"


@pytest.mark.asyncio
async def test_stale_version_is_conflict(client, auth_headers, merchant, order_factory):
    order = await order_factory()
    
    response = await client.post(
        f"/orders/{order.id}/transition",
        json={"status": "ACCEPTED", "expected_version": 7},
        headers=auth_headers(merchant),
    )
    
    assert response.status_code == 409
    assert response.json()["code"] == "STALE_ORDER"


@pytest.mark.asyncio
async def test_second_claim_is_rejected(client, auth_headers, rider, order_factory, account_factory):
    order = await order_factory(status=OrderStatus.READY_FOR_PICKUP)
    other = await account_factory("bea@example.com", "Bea", AccountRole.RIDER)
    
    first = await client.post(f"/orders/{order.id}/claim", headers=auth_headers(rider))
    second = await client.post(f"/orders/{order.id}/claim", headers=auth_headers(other))
    
    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["code"] == "ALREADY_CLAIMED"


@pytest.mark.asyncio
async def test_customer_cancels_pending_order(client, auth_headers, customer, order_factory):
    pending = await order_factory()
    accepted = await order_factory(status=OrderStatus.ACCEPTED)
    
    response = await client.post(f"/orders/{pending.id}/cancel", headers=auth_headers(customer))
    assert response.status_code == 200
    assert response.json()["status"] == "CANCELLED"
    assert response.json()["cancelled_at"] is not None
    
    response = await client.post(f"/orders/{accepted.id}/cancel", headers=auth_headers(customer))
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_feedback_before_dispatch_is_rejected(client, auth_headers, customer, order_factory):
    order = await order_factory(status=OrderStatus.PREPARING)
    
    response = await client.post(
        f"/orders/{order.id}/feedback",
        json={"rating": 4},
        headers=auth_headers(customer),
    )
    
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_admin_force_assign(client, auth_headers, admin, rider, order_factory):
    order = await order_factory()
    
    response = await client.post(
        f"/admin/orders/{order.id}/assign",
        json={"rider_email": "RICO@example.com"},
        headers=auth_headers(admin),
    )
    
    assert response.status_code == 200
    assert response.json()["status"] == "ACCEPTED"
    assert response.json()["rider_name"] == "Rico"


@pytest.mark.asyncio
async def test_force_assign_requires_a_rider(client, auth_headers, admin, customer, order_factory):
    order = await order_factory()
    
    response = await client.post(
        f"/admin/orders/{order.id}/assign",
        json={"rider_email": customer.email},
        headers=auth_headers(admin),
    )
    
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delivery_fee_config(client, auth_headers, admin, customer):
    response = await client.get("/admin/config/delivery-fee", headers=auth_headers(admin))
    assert response.json() == {"delivery_fee_cents": 4500}
    
    response = await client.put(
        "/admin/config/delivery-fee",
        json={"delivery_fee_cents": 6000},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    
    response = await client.post("/orders", json=checkout_body(), headers=auth_headers(customer))
    assert response.json()["delivery_fee_cents"] == 6000
    assert response.json()["total_cents"] == 36000


@pytest.mark.asyncio
async def test_delivery_fee_requires_admin(client, auth_headers, customer):
    response = await client.put(
        "/admin/config/delivery-fee",
        json={"delivery_fee_cents": 0},
        headers=auth_headers(customer),
    )
    
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_live_board(client, auth_headers, admin, order_factory):
    live = await order_factory(status=OrderStatus.PREPARING)
    await order_factory(status=OrderStatus.DELIVERED)
    
    response = await client.get("/dispatch/live", headers=auth_headers(admin))
    
    assert [o["id"] for o in response.json()] == [live.id]


@pytest.mark.asyncio
async def test_payment_methods(client, auth_headers, customer):
    response = await client.post(
        "/accounts/me/payment-methods",
        json={"kind": "VISA", "last4": "4242", "expiry": "12/2028"},
        headers=auth_headers(customer),
    )
    assert response.status_code == 201
    
    response = await client.get("/accounts/me/payment-methods", headers=auth_headers(customer))
    assert [m["kind"] for m in response.json()] == ["VISA"]


@pytest.mark.asyncio
async def test_rider_cannot_set_tip_or_rating(client, auth_headers, rider, order_factory):
    order = await order_factory(status=OrderStatus.OUT_FOR_DELIVERY, rider_email=rider.email)
    
    response = await client.post(
        f"/orders/{order.id}/transition",
        json={"status": "DELIVERED", "tip_cents": 500000, "rating": 5},
        headers=auth_headers(rider),
    )
    
    assert response.status_code == 403
    assert rider.earnings_cents == 0
    assert order.status == OrderStatus.OUT_FOR_DELIVERY.value


@pytest.mark.asyncio
async def test_merchant_cannot_rate_while_advancing(client, auth_headers, merchant, order_factory):
    order = await order_factory(status=OrderStatus.ACCEPTED)
    
    response = await client.post(
        f"/orders/{order.id}/transition",
        json={"status": "PREPARING", "tip_cents": 9999, "rating": 1},
        headers=auth_headers(merchant),
    )
    
    assert response.status_code == 403
    assert order.rating is None
    assert order.tip_cents is None


@pytest.mark.asyncio
async def test_rider_delivery_without_feedback_pays_fee_only(client, auth_headers, rider, order_factory):
    order = await order_factory(status=OrderStatus.OUT_FOR_DELIVERY, rider_email=rider.email)
    
    response = await client.post(
        f"/orders/{order.id}/transition",
        json={"status": "DELIVERED"},
        headers=auth_headers(rider),
    )
    
    assert response.status_code == 200
    assert rider.earnings_cents == 4500


@pytest.mark.asyncio
async def test_merchant_board_hides_namesake_orders(client, auth_headers, order_factory, account_factory):
    await account_factory(
        "tibanga@example.com", "Jollibee Iligan", AccountRole.MERCHANT, merchant_id="m1"
    )
    namesake = await account_factory(
        "palao@example.com", "Jollibee Iligan", AccountRole.MERCHANT, merchant_id="m2"
    )
    theirs = await order_factory(merchant_id="m1")
    mine = await order_factory(merchant_id="m2")
    
    response = await client.get("/dispatch/merchant", headers=auth_headers(namesake))
    
    assert [o["id"] for o in response.json()] == [mine.id]
    response = await client.post(
        f"/orders/{theirs.id}/transition",
        json={"status": "ACCEPTED"},
        headers=auth_headers(namesake),
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_customer_cannot_become_an_existing_restaurant(client, auth_headers, customer, merchant, order_factory):
    order = await order_factory()
    
    response = await client.patch(
        "/auth/me",
        json={"role": "MERCHANT", "name": "Jollibee Iligan"},
        headers=auth_headers(customer),
    )
    assert response.status_code == 403
    
    response = await client.post(
        f"/orders/{order.id}/transition",
        json={"status": "CANCELLED"},
        headers=auth_headers(customer),
    )
    assert response.status_code == 403
    assert order.status == OrderStatus.PENDING.value


@pytest.mark.asyncio
async def test_merchant_cannot_rename_to_another_restaurant(client, auth_headers, merchant, account_factory):
    other = await account_factory("mang@example.com", "Mang Inasal Tibanga", AccountRole.MERCHANT)
    
    response = await client.patch(
        "/auth/me",
        json={"name": "Jollibee Iligan"},
        headers=auth_headers(other),
    )
    
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_restaurant_name_cannot_be_registered_twice(client, merchant):
    response = await client.post(
        "/auth/register",
        json={
            "email": "copycat@example.com",
            "password": "secret123",
            "name": "jollibee iligan",
            "role": "MERCHANT",
        },
    )
    
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_refresh_rotates_tokens(client, customer):
    response = await client.post(
        "/auth/login",
        data={"username": "juan@example.com", "password": "secret123"},
    )
    refresh = response.json()["refresh_token"]
    
    response = await client.post("/auth/refresh", json={"refresh_token": refresh})
    assert response.status_code == 200
    
    response = await client.post("/auth/refresh", json={"refresh_token": "not-a-token"})
    assert response.status_code == 401
