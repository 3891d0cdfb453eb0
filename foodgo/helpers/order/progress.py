from dataclasses import dataclass

from foodgo.enums.order_status import OrderStatus, parse_status


@dataclass(frozen=True)
class StatusStep:
    status: OrderStatus
    label: str
    description: str
    progress: int


STATUS_STEPS = {
    OrderStatus.CONFIRMED: StatusStep(OrderStatus.CONFIRMED, "Order Confirmed", "Your order has been confirmed", 25),
    OrderStatus.PREPARING: StatusStep(OrderStatus.PREPARING, "Preparing", "Restaurant is preparing your food", 50),
    OrderStatus.OUT_FOR_DELIVERY: StatusStep(OrderStatus.OUT_FOR_DELIVERY, "Out for Delivery", "Driver is on the way", 75),
    OrderStatus.DELIVERED: StatusStep(OrderStatus.DELIVERED, "Delivered", "Order delivered successfully", 100),
    OrderStatus.CANCELLED: StatusStep(OrderStatus.CANCELLED, "Cancelled", "Order has been cancelled", 0),
}

# Unknown statuses render as a freshly confirmed order
FALLBACK_STEP = STATUS_STEPS[OrderStatus.CONFIRMED]


def status_step(status) -> StatusStep:
    return STATUS_STEPS.get(parse_status(status), FALLBACK_STEP)


def progress_percent(status) -> int:
    return status_step(status).progress


def status_label(status) -> str:
    return status_step(status).label


def status_headline(status) -> str:
    parsed = parse_status(status)
    if parsed == OrderStatus.DELIVERED:
        return "Delivered!"
    if parsed == OrderStatus.CANCELLED:
        return "Cancelled"
    return "Estimated 25-35 min"
