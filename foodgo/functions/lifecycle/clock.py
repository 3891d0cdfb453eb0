"""Deadline math for the order lifecycle.

Everything here is a pure function of the order's creation time, its current
status and ``now``. Nothing is accumulated between calls, so a reload or a
late observer computes exactly the same deadlines as the first one.

    advance deadline for stage i -> i+1:  t0 + cancel_window + i * stage_interval
    cancellation allowed while:          now < t0 + cancel_window
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
import math
from typing import Optional

from foodgo.enums.order_status import FORWARD_SEQUENCE, OrderStatus, forward_index, is_terminal
from foodgo.models.order.order import as_utc

CANCEL_WINDOW_SECONDS = 20
STAGE_INTERVAL_SECONDS = 10


@dataclass(frozen=True)
class CancelWindow:
    can_cancel: bool
    seconds_left: int


@dataclass(frozen=True)
class LifecycleClock:
    cancel_window_seconds: int = CANCEL_WINDOW_SECONDS
    stage_interval_seconds: int = STAGE_INTERVAL_SECONDS

    def cancel_deadline(self, created_at: datetime) -> datetime:
        return as_utc(created_at) + timedelta(seconds=self.cancel_window_seconds)

    def seconds_left(self, created_at: datetime, now: datetime) -> int:
        remaining = (self.cancel_deadline(created_at) - as_utc(now)).total_seconds()
        return max(0, math.ceil(remaining))

    def can_cancel(self, created_at: datetime, status, now: datetime) -> bool:
        return as_utc(now) < self.cancel_deadline(created_at) and not is_terminal(status)

    def cancel_window(self, created_at: datetime, status, now: datetime) -> CancelWindow:
        if is_terminal(status):
            return CancelWindow(can_cancel=False, seconds_left=0)
        seconds = self.seconds_left(created_at, now)
        return CancelWindow(can_cancel=self.can_cancel(created_at, status, now), seconds_left=seconds)

    def next_status(self, status) -> Optional[OrderStatus]:
        index = forward_index(status)
        if index is None or is_terminal(status) or index >= len(FORWARD_SEQUENCE) - 1:
            return None
        return FORWARD_SEQUENCE[index + 1]

    def advance_deadline(self, created_at: datetime, status) -> Optional[datetime]:
        """When the order leaves ``status``, or None if it never advances on its own."""
        if self.next_status(status) is None:
            return None
        index = forward_index(status)
        offset = self.cancel_window_seconds + index * self.stage_interval_seconds
        return as_utc(created_at) + timedelta(seconds=offset)

    def due_transition(self, created_at: datetime, status, now: datetime) -> Optional[OrderStatus]:
        """The single next status owed at ``now``, if any."""
        deadline = self.advance_deadline(created_at, status)
        if deadline is None or as_utc(now) < deadline:
            return None
        return self.next_status(status)
