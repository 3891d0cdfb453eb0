from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest
from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from foodgo.database.connection import init_db
from foodgo.database.order_store import RestaurantSnapshot, SqlOrderStore
from foodgo.functions.lifecycle.clock import LifecycleClock
from foodgo.functions.lifecycle.schedule import LifecycleSchedule
from foodgo.functions.lifecycle.service import OrderTrackingService
from foodgo.functions.notification.relay import NotificationRelay
from foodgo.models.cart.cart_item import CartItem
from foodgo.tasks.notifier import OrderChangeNotifier

WEBHOOK_URL = "http://hooks.test/webhook/order"


class FakeNow:
    """Callable clock the tests move by hand."""

    def __init__(self, start: datetime = None):
        self.current = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def set(self, value: datetime):
        self.current = value

    def at(self, created_at: datetime, seconds: float):
        self.current = created_at + timedelta(seconds=seconds)


class FakeHttp:
    """Stands in for the requests module inside NotificationRelay."""

    def __init__(self, status_code: int = 200, error: Exception = None):
        self.status_code = status_code
        self.error = error
        self.posts = []

    def post(self, url, json=None, timeout=None):
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(status_code=self.status_code)


def _make_item(
    item_id: str = "margherita",
    name: str = "Margherita",
    price: str = "2.000",
    quantity: int = 1,
    restaurant: str = "Pizza Palace",
    special_instructions: str = None,
) -> CartItem:
    return CartItem(
        id=item_id,
        name=name,
        price=Decimal(price),
        quantity=quantity,
        restaurant=restaurant,
        image="https://img.test/pizza.png",
        special_instructions=special_instructions,
    )


@pytest.fixture
def make_item():
    return _make_item


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def notifier():
    return OrderChangeNotifier()


@pytest.fixture
def store(engine, notifier):
    return SqlOrderStore(engine, notifier)


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def relay(http):
    return NotificationRelay(webhook_url=WEBHOOK_URL, timeout=5, http=http)


@pytest.fixture
def scheduler():
    # Never started: enqueued work runs inline and timers only fire via tick()
    return BackgroundScheduler(timezone="UTC")


@pytest.fixture
def schedule(scheduler):
    return LifecycleSchedule(scheduler)


@pytest.fixture
def now():
    return FakeNow()


@pytest.fixture
def clock():
    return LifecycleClock()


@pytest.fixture
def tracking(store, schedule, relay, clock, now):
    return OrderTrackingService(store, schedule, relay, clock=clock, now=now)


@pytest.fixture
def place(store):
    """Creates a confirmed order for the given cart lines."""

    def _place(items=None, user_id: str = "user-1", total: str = "6.000"):
        items = items if items is not None else [_make_item(quantity=2), _make_item("cola", "Cola", "0.500")]
        restaurant = RestaurantSnapshot.from_name(items[0].restaurant, items[0].image)
        return store.create_order(user_id, restaurant, items, Decimal(total), "House 1, Road 2, Block 3, Manama", "card")

    return _place
