from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Callable, Dict, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import BaseScheduler


def advance_job_id(order_id: str) -> str:
    return f"order-advance:{order_id}"


def countdown_job_id(order_id: str) -> str:
    return f"order-countdown:{order_id}"


def reconcile_job_id(order_id: str) -> str:
    return f"order-reconcile:{order_id}"


@dataclass
class ScheduleEntry:
    """What is currently scheduled for one order; rebuilt from (t0, status, now) on every observation."""

    order_id: str
    created_at: datetime
    status: str
    advance_at: Optional[datetime] = None
    countdown_active: bool = False


class LifecycleSchedule:
    """Per-order timers on top of an APScheduler scheduler.

    Each order owns at most one pending advance job and one countdown job.
    Both are dropped whenever a new status is observed and recreated from
    the order's creation time, so no history needs replaying.
    """

    def __init__(self, scheduler: BaseScheduler):
        self.scheduler = scheduler
        self.entries: Dict[str, ScheduleEntry] = {}

    def entry(self, order_id: str) -> Optional[ScheduleEntry]:
        return self.entries.get(order_id)

    def observe(self, order_id: str, created_at: datetime, status: str) -> ScheduleEntry:
        self.cancel_timers(order_id)
        entry = ScheduleEntry(order_id=order_id, created_at=created_at, status=status)
        self.entries[order_id] = entry
        return entry

    def schedule_advance(self, order_id: str, run_at: datetime, func: Callable[[], None]) -> None:
        self._remove_job(advance_job_id(order_id))
        self.scheduler.add_job(func, "date", run_date=run_at, id=advance_job_id(order_id))
        entry = self.entries.get(order_id)
        if entry:
            entry.advance_at = run_at
        logging.info(f"LIFECYCLE >>> Order {order_id} advances at {run_at.isoformat()}")

    def start_countdown(self, order_id: str, func: Callable[[], None], seconds: int = 1) -> None:
        self._remove_job(countdown_job_id(order_id))
        self.scheduler.add_job(func, "interval", seconds=seconds, id=countdown_job_id(order_id))
        entry = self.entries.get(order_id)
        if entry:
            entry.countdown_active = True

    def stop_countdown(self, order_id: str) -> None:
        self._remove_job(countdown_job_id(order_id))
        entry = self.entries.get(order_id)
        if entry:
            entry.countdown_active = False

    def enqueue(self, order_id: str, func: Callable[[], None]) -> None:
        """Runs ``func`` on the scheduler worker; inline when the scheduler is not running."""
        if not self.scheduler.running:
            func()
            return
        self.scheduler.add_job(func, id=reconcile_job_id(order_id), replace_existing=True)

    def cancel_timers(self, order_id: str) -> None:
        self._remove_job(advance_job_id(order_id))
        self.stop_countdown(order_id)
        entry = self.entries.get(order_id)
        if entry:
            entry.advance_at = None

    def release(self, order_id: str) -> None:
        self.cancel_timers(order_id)
        self._remove_job(reconcile_job_id(order_id))
        self.entries.pop(order_id, None)

    def _remove_job(self, job_id: str) -> None:
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            pass
