from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.schedulers.background import BackgroundScheduler

from foodgo.functions.lifecycle.service import OrderTrackingService


def build_scheduler() -> BackgroundScheduler:
    # A single worker thread serialises every tracker job
    return BackgroundScheduler(
        timezone="UTC",
        executors={"default": ThreadPoolExecutor(max_workers=1)},
        job_defaults={"coalesce": True, "max_instances": 1, "misfire_grace_time": None},
    )


def start_scheduler(scheduler: BackgroundScheduler, tracking_service: OrderTrackingService, sweep_seconds: int = 5):
    # Catches trackers whose date job was dropped (e.g. clock jumps)
    scheduler.add_job(
        tracking_service.tick_all,
        "interval",
        seconds=sweep_seconds,
        id="lifecycle-sweep",
        replace_existing=True,
    )

    scheduler.start()
