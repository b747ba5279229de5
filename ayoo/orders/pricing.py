"""Cart pricing and voucher catalog"""

from dataclasses import dataclass
from typing import Iterable, Optional

from ayoo.orders.errors import InvalidVoucher

CENTS_PER_POINT = 1000  # one point per ₱10 of total


@dataclass(frozen=True)
class Voucher:
    code: str
    discount: int  # percent for "percent", centavos for "fixed"
    kind: str
    description: str
    
    def discount_for(self, subtotal_cents: int) -> int:
        if self.kind == "percent":
            amount = (subtotal_cents * self.discount + 50) // 100
        else:
            amount = self.discount
        return min(amount, subtotal_cents)


VOUCHERS = {
    voucher.code: voucher
    for voucher in (
        Voucher("AYOO2025", 10000, "fixed", "₱100 off on your first order of the year!"),
        Voucher("ILIGANPRIDE", 15, "percent", "15% discount for local food lovers."),
        Voucher("SQUADGOALS", 5000, "fixed", "₱50 off for group orders."),
    )
}


def get_voucher(code: Optional[str]) -> Optional[Voucher]:
    if not code:
        return None
    voucher = VOUCHERS.get(code.strip().upper())
    if voucher is None:
        raise InvalidVoucher(f"Voucher {code} is not valid")
    return voucher


def points_for_total(total_cents: int) -> int:
    return max(total_cents, 0) // CENTS_PER_POINT


@dataclass(frozen=True)
class Quote:
    subtotal_cents: int
    delivery_fee_cents: int
    discount_cents: int
    total_cents: int
    points_earned: int
    voucher_code: Optional[str] = None


def quote(items: Iterable[dict], delivery_fee_cents: int, voucher: Optional[Voucher] = None) -> Quote:
    """Price a cart: subtotal + delivery fee - voucher discount"""
    subtotal = sum(item["price_cents"] * item["quantity"] for item in items)
    discount = voucher.discount_for(subtotal) if voucher else 0
    total = subtotal + delivery_fee_cents - discount
    return Quote(
        subtotal_cents=subtotal,
        delivery_fee_cents=delivery_fee_cents,
        discount_cents=discount,
        total_cents=total,
        points_earned=points_for_total(total),
        voucher_code=voucher.code if voucher else None,
    )
