from enum import Enum
from typing import Optional

# confirmed, preparing, out_for_delivery, delivered, cancelled
class OrderStatus(str, Enum):
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Forward sequence driven by the lifecycle clock
FORWARD_SEQUENCE = (
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def parse_status(value) -> Optional[OrderStatus]:
    """Returns the matching OrderStatus, or None for values this build does not know."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).lower())
    except ValueError:
        return None


def is_terminal(value) -> bool:
    return parse_status(value) in TERMINAL_STATUSES


def forward_index(value) -> Optional[int]:
    status = parse_status(value)
    if status not in FORWARD_SEQUENCE:
        return None
    return FORWARD_SEQUENCE.index(status)
