from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from foodgo.configuration.settings import Configuration
from foodgo.database.connection import engine as default_engine, init_db
from foodgo.functions.scheduler.scheduler import build_scheduler, start_scheduler

from foodgo.auth.session import SessionRegistry
from foodgo.core.container import Services
from foodgo.database.order_store import SqlOrderStore
from foodgo.functions.lifecycle.clock import LifecycleClock
from foodgo.functions.lifecycle.schedule import LifecycleSchedule
from foodgo.functions.lifecycle.service import OrderTrackingService
from foodgo.functions.lifecycle.tracker import utcnow
from foodgo.functions.notification.relay import NotificationRelay
from foodgo.tasks.notifier import OrderChangeNotifier

from foodgo.routes.session import SessionRouter
from foodgo.routes.cart.cart import CartRouter
from foodgo.routes.order.order import OrderRouter

from foodgo.tasks.websockets import routes as websocket_routes

configuration = Configuration()

logging.info(f"SYSTEM >>> Environment loaded: {configuration.environment}")

def create_app(engine=None, relay=None, clock=None, now=None, scheduler=None, start_background=True):
    """
    Builds the FastAPI application: database, order lifecycle engine and routes.

    Every collaborator can be injected so tests run against an in-memory
    database, a recording relay and a fixed clock with the scheduler stopped.
    """
    engine = engine if engine is not None else default_engine
    logging.info("SYSTEM >>> Initialising database...")
    init_db(engine)

    notifier = OrderChangeNotifier()
    store = SqlOrderStore(engine, notifier)
    scheduler = scheduler or build_scheduler()
    tracking = OrderTrackingService(
        store,
        LifecycleSchedule(scheduler),
        relay or NotificationRelay(),
        clock=clock or LifecycleClock(configuration.cancel_window_seconds, configuration.stage_interval_seconds),
        now=now or utcnow,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if start_background:
            start_scheduler(scheduler, tracking, configuration.lifecycle_sweep_seconds)
            logging.info("SYSTEM >>> Lifecycle scheduler started")
        yield
        tracking.shutdown()
        if scheduler.running:
            scheduler.shutdown(wait=False)
            logging.info("SYSTEM >>> Lifecycle scheduler stopped")

    app = FastAPI(title="FoodGo", lifespan=lifespan)

    app.state.services = Services(
        store=store,
        tracking=tracking,
        relay=tracking.relay,
        sessions=SessionRegistry(),
        delivery_fee=configuration.default_delivery_fee,
        currency=configuration.currency,
        currency_locale=configuration.currency_locale,
    )
    app.state.scheduler = scheduler

    app.add_middleware(
        CORSMiddleware,
        allow_origins=configuration.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(SessionRouter())
    app.include_router(CartRouter())
    app.include_router(OrderRouter())

    app.include_router(websocket_routes.router)

    @app.get("/health")
    def health():
        return {"status": "ok", "environment": configuration.environment}

    return app
