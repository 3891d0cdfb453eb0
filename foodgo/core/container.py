from dataclasses import dataclass
from decimal import Decimal

from fastapi import Request

from foodgo.auth.session import SessionRegistry
from foodgo.database.order_store import OrderStore
from foodgo.functions.lifecycle.service import OrderTrackingService
from foodgo.functions.notification.relay import NotificationRelay


@dataclass
class Services:
    store: OrderStore
    tracking: OrderTrackingService
    relay: NotificationRelay
    sessions: SessionRegistry
    delivery_fee: Decimal
    currency: str = "BHD"
    currency_locale: str = "en_US"


def get_services(request: Request) -> Services:
    return request.app.state.services
