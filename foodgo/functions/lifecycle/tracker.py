"""Live tracking of a single order.

An ``OrderTracker`` keeps the last observed order row, drives the
auto-advance timer and the cancellation countdown for it, and exposes the
derived display values. Its state only changes inside ``reconcile``,
``tick`` and ``refresh_countdown``; those run as jobs on the lifecycle
scheduler, so trackers need no locking of their own. Change notifications
arriving from request threads are turned into reconcile jobs.
"""
from datetime import datetime, timezone
import logging
from typing import Any, Callable, Dict, List, Optional

from foodgo.core.exceptions.order_errors import (
    BackendUnavailableError,
    CancelTerminalStateError,
    CancelWindowClosedError,
    NotFoundError,
    TransitionConflictError,
)
from foodgo.database.order_store import OrderStore
from foodgo.enums.order_status import OrderStatus, is_terminal, parse_status
from foodgo.functions.lifecycle.clock import CancelWindow, LifecycleClock
from foodgo.functions.lifecycle.schedule import LifecycleSchedule
from foodgo.functions.notification.relay import NotificationRelay
from foodgo.helpers.order.formatters import format_item_summary
from foodgo.helpers.order.progress import progress_percent, status_headline, status_step
from foodgo.models.order.order import Order
from foodgo.models.order.order_item import OrderItem


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderTracker:
    def __init__(
        self,
        order_id: str,
        store: OrderStore,
        schedule: LifecycleSchedule,
        relay: NotificationRelay,
        clock: Optional[LifecycleClock] = None,
        now: Callable[[], datetime] = utcnow,
        user_name: str = "",
    ):
        self.order_id = order_id
        self.store = store
        self.schedule = schedule
        self.relay = relay
        self.clock = clock or LifecycleClock()
        self.now = now
        self.user_name = user_name

        self.order: Optional[Order] = None
        self.items: List[OrderItem] = []
        self.cancel_window = CancelWindow(can_cancel=False, seconds_left=0)

        self._unsubscribe: Optional[Callable[[], None]] = None
        self._released = False
        self._listeners: List[Callable[[Dict[str, Any]], None]] = []

    # -------------------- attach / release --------------------

    def attach(self) -> "OrderTracker":
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe_to_order_changes(self.order_id, self._on_order_changed)
        self.schedule.enqueue(self.order_id, self.reconcile)
        return self

    def release(self) -> None:
        """Stops all background work for this order.

        Job teardown is queued on the scheduler worker so it lands after any
        reconcile already running there; the flag makes later jobs no-ops.
        """
        self._released = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()
        self.schedule.enqueue(self.order_id, lambda: self.schedule.release(self.order_id))
        logging.info(f"LIFECYCLE >>> Stopped tracking order {self.order_id}")

    def add_listener(self, listener: Callable[[Dict[str, Any]], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    @property
    def released(self) -> bool:
        return self._released

    @property
    def settled(self) -> bool:
        """Terminal and nobody watching: nothing left to drive or push."""
        return self.order is not None and is_terminal(self.order.status) and not self._listeners

    def _on_order_changed(self, order: Order) -> None:
        if self._released:
            return
        self.schedule.enqueue(self.order_id, lambda: self.reconcile(order))

    # -------------------- lifecycle --------------------

    def reconcile(self, order: Optional[Order] = None) -> None:
        """Adopts the authoritative order row and rebuilds every timer from it."""
        if self._released:
            return
        if order is None:
            try:
                order = self.store.fetch_order(self.order_id)
            except (BackendUnavailableError, NotFoundError) as e:
                logging.warning(f"LIFECYCLE >>> Could not load order {self.order_id} -> {e.detail}")
                return

        previous_status = self.order.status if self.order is not None else None
        self.order = order

        if not self.items:
            try:
                self.items = self.store.fetch_order_items(self.order_id)
            except BackendUnavailableError as e:
                logging.warning(f"LIFECYCLE >>> Could not load items of order {self.order_id} -> {e.detail}")

        self.schedule.observe(self.order_id, order.created_at_utc, order.status)

        if is_terminal(order.status):
            self.cancel_window = CancelWindow(can_cancel=False, seconds_left=0)
            if previous_status is not None and not is_terminal(previous_status):
                self._notify_terminal(order.status)
            self._publish()
            return

        self._refresh_window()
        if self.cancel_window.can_cancel:
            self.schedule.start_countdown(self.order_id, self.refresh_countdown)

        deadline = self.clock.advance_deadline(order.created_at_utc, order.status)
        if deadline is not None:
            if self.now() >= deadline:
                # Deadline already passed when observed: apply now instead of waiting
                self._advance(self.clock.next_status(order.status))
            else:
                self.schedule.schedule_advance(self.order_id, deadline, self.tick)

        if self.order is order:
            self._publish()

    def tick(self) -> None:
        """Issues the one transition owed at ``now``, if any."""
        if self._released or self.order is None or is_terminal(self.order.status):
            return
        due = self.clock.due_transition(self.order.created_at_utc, self.order.status, self.now())
        if due is not None:
            self._advance(due)

    def refresh_countdown(self) -> None:
        """Countdown job: pushes a snapshot to listeners whenever the window changes."""
        if self._released or self.order is None:
            return
        if self._refresh_window():
            self._publish()

    def _refresh_window(self) -> bool:
        previous = self.cancel_window
        self.cancel_window = self.clock.cancel_window(self.order.created_at_utc, self.order.status, self.now())
        if not self.cancel_window.can_cancel:
            self.schedule.stop_countdown(self.order_id)
        return self.cancel_window != previous

    def _advance(self, next_status: Optional[OrderStatus]) -> None:
        if self._released or next_status is None:
            return
        logging.info(f"LIFECYCLE >>> Auto-progressing order {self.order_id} to {next_status.value}")
        try:
            self.store.update_order_status(self.order_id, next_status)
        except TransitionConflictError as e:
            logging.warning(f"LIFECYCLE >>> Order {self.order_id} refused {next_status.value} -> {e.detail}")
            self.schedule.enqueue(self.order_id, self.reconcile)
        except (BackendUnavailableError, NotFoundError) as e:
            logging.warning(f"LIFECYCLE >>> Error updating order {self.order_id} status -> {e.detail}")

    def _notify_terminal(self, status: str) -> None:
        parsed = parse_status(status)
        if parsed == OrderStatus.DELIVERED:
            if not self.items:
                logging.info(f"NOTIFY >>> Order {self.order_id} delivered without items, nothing to relay")
                return
            self.relay.notify_delivered(self.user_name, format_item_summary(self.items))
        elif parsed == OrderStatus.CANCELLED:
            self.relay.notify_cancelled(self.user_name)

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logging.error(f"LIFECYCLE >>> Tracking listener failed for order {self.order_id} -> {e}")

    # -------------------- presentation --------------------

    def _current_order(self) -> Order:
        return self.order if self.order is not None else self.store.fetch_order(self.order_id)

    def get_display_status(self) -> str:
        return status_step(self._current_order().status).label

    def get_progress_percent(self) -> int:
        return progress_percent(self._current_order().status)

    def get_cancel_window(self) -> CancelWindow:
        order = self._current_order()
        return self.clock.cancel_window(order.created_at_utc, order.status, self.now())

    def request_cancel(self) -> None:
        """Cancels the order or raises the reason it cannot be cancelled."""
        order = self._current_order()
        if is_terminal(order.status):
            raise CancelTerminalStateError(order.status)
        if not self.clock.can_cancel(order.created_at_utc, order.status, self.now()):
            raise CancelWindowClosedError(self.clock.cancel_window_seconds)

        try:
            self.store.update_order_status(self.order_id, OrderStatus.CANCELLED)
        except TransitionConflictError:
            latest = self.store.fetch_order(self.order_id)
            raise CancelTerminalStateError(latest.status)
        logging.info(f"ORDER >>> Order {self.order_id} cancelled by customer")

    def snapshot(self, order: Optional[Order] = None) -> Dict[str, Any]:
        order = order or self._current_order()
        step = status_step(order.status)
        window = self.clock.cancel_window(order.created_at_utc, order.status, self.now())
        return {
            "order_id": order.id,
            "status": order.status,
            "label": step.label,
            "description": step.description,
            "headline": status_headline(order.status),
            "progress": step.progress,
            "can_cancel": window.can_cancel,
            "seconds_left": window.seconds_left,
        }
