"""Order lifecycle, settlement, dispatch and fan-out"""

from ayoo.orders.fanout import OrderEventHub, get_event_hub
from ayoo.orders.lifecycle import OrderStateMachine
from ayoo.orders.repository import OrderRepository
from ayoo.orders.settlement import SettlementEngine, SettlementReport

__all__ = [
    "OrderEventHub",
    "get_event_hub",
    "OrderStateMachine",
    "OrderRepository",
    "SettlementEngine",
    "SettlementReport",
]
