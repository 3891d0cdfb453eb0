from datetime import datetime
import logging
from typing import Callable, Dict, Optional

from foodgo.database.order_store import OrderStore
from foodgo.functions.lifecycle.clock import LifecycleClock
from foodgo.functions.lifecycle.schedule import LifecycleSchedule
from foodgo.functions.lifecycle.tracker import OrderTracker, utcnow
from foodgo.functions.notification.relay import NotificationRelay


class OrderTrackingService:
    """Owns one OrderTracker per tracked order id."""

    def __init__(
        self,
        store: OrderStore,
        schedule: LifecycleSchedule,
        relay: NotificationRelay,
        clock: Optional[LifecycleClock] = None,
        now: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.schedule = schedule
        self.relay = relay
        self.clock = clock or LifecycleClock()
        self.now = now
        self.trackers: Dict[str, OrderTracker] = {}

    def track(self, order_id: str, user_name: str = "") -> OrderTracker:
        tracker = self.trackers.get(order_id)
        if tracker is not None:
            if user_name and not tracker.user_name:
                tracker.user_name = user_name
            return tracker

        # Raises NotFoundError before anything is scheduled
        self.store.fetch_order(order_id)

        tracker = OrderTracker(
            order_id,
            self.store,
            self.schedule,
            self.relay,
            clock=self.clock,
            now=self.now,
            user_name=user_name,
        )
        self.trackers[order_id] = tracker
        logging.info(f"LIFECYCLE >>> Tracking order {order_id}")
        return tracker.attach()

    def get(self, order_id: str) -> Optional[OrderTracker]:
        return self.trackers.get(order_id)

    def release(self, order_id: str) -> bool:
        tracker = self.trackers.pop(order_id, None)
        if tracker is None:
            return False
        tracker.release()
        return True

    def tick_all(self) -> None:
        """Safety sweep: re-evaluates every tracker in case a date job was lost."""
        for order_id, tracker in list(self.trackers.items()):
            if tracker.settled:
                self.release(order_id)
                continue
            tracker.tick()
            tracker.refresh_countdown()

    def shutdown(self) -> None:
        for order_id in list(self.trackers):
            self.release(order_id)
