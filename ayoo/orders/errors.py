"""Typed failures raised by the order core"""

import secrets
from typing import Optional


def new_reference_code(prefix: str = "REF") -> str:
    """Support reference shown to the user alongside a denial"""
    return f"{prefix}-{secrets.token_hex(4).upper()}"


class OrderError(Exception):
    """Base class for failures surfaced at the API boundary"""
    status_code = 400
    code = "ORDER_ERROR"
    
    def __init__(self, message: str, reference: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reference = reference
    
    def to_dict(self) -> dict:
        body = {"detail": self.message, "code": self.code}
        if self.reference:
            body["reference"] = self.reference
        return body


class OrderNotFound(OrderError):
    status_code = 404
    code = "NOT_FOUND"
    
    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class AccountNotFound(OrderError):
    status_code = 404
    code = "NOT_FOUND"
    
    def __init__(self, identifier: str):
        super().__init__(f"Account {identifier} not found")
        self.identifier = identifier


class InvalidTransition(OrderError):
    status_code = 409
    code = "INVALID_TRANSITION"


class InvalidPatch(OrderError):
    status_code = 422
    code = "INVALID_PATCH"


class OrderAlreadyClaimed(OrderError):
    status_code = 409
    code = "ALREADY_CLAIMED"


class StaleOrder(OrderError):
    status_code = 409
    code = "STALE_ORDER"


class InvalidVoucher(OrderError):
    status_code = 400
    code = "INVALID_VOUCHER"


class PaymentError(OrderError):
    """Checkout denial; always carries a reference code"""
    
    def __init__(self, message: str, reference: Optional[str] = None):
        super().__init__(message, reference=reference or new_reference_code())


class InsufficientFunds(PaymentError):
    status_code = 402
    code = "INSUFFICIENT_FUNDS"


class GatewayFault(PaymentError):
    status_code = 502
    code = "GATEWAY_FAULT"
