from collections import defaultdict
import logging
from typing import Callable, Dict, List

from foodgo.models.order.order import Order

OrderListener = Callable[[Order], None]


class OrderChangeNotifier:
    """Fans out order row updates to whoever subscribed to that order id."""

    def __init__(self):
        self._listeners: Dict[str, List[OrderListener]] = defaultdict(list)

    def subscribe(self, order_id: str, on_change: OrderListener) -> Callable[[], None]:
        self._listeners[order_id].append(on_change)

        def unsubscribe():
            listeners = self._listeners.get(order_id)
            if listeners and on_change in listeners:
                listeners.remove(on_change)
                if not listeners:
                    del self._listeners[order_id]

        return unsubscribe

    def subscriber_count(self, order_id: str) -> int:
        return len(self._listeners.get(order_id, []))

    def publish(self, order: Order) -> None:
        for listener in list(self._listeners.get(order.id, [])):
            try:
                listener(order)
            except Exception as e:
                # One broken observer must not stop the others
                logging.error(f"LIFECYCLE >>> Order change listener failed for {order.id} -> {e}")
