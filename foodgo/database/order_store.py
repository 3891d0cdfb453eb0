from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
import logging
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from foodgo.database.connection import get_session
from foodgo.core.exceptions.order_errors import (
    BackendUnavailableError,
    NotFoundError,
    TransitionConflictError,
    ValidationError,
)
from foodgo.enums.order_status import OrderStatus, is_terminal
from foodgo.models.cart.cart_item import CartItem
from foodgo.models.order.order import Order, restaurant_slug
from foodgo.models.order.order_item import OrderItem
from foodgo.tasks.notifier import OrderChangeNotifier, OrderListener


@dataclass(frozen=True)
class RestaurantSnapshot:
    name: str
    id: str
    image: Optional[str] = None

    @classmethod
    def from_name(cls, name: str, image: Optional[str] = None) -> "RestaurantSnapshot":
        return cls(name=name, id=restaurant_slug(name), image=image)


class OrderStore(ABC):
    """Contract of the backend that owns order records."""

    @abstractmethod
    def create_order(
        self,
        user_id: str,
        restaurant: RestaurantSnapshot,
        items: List[CartItem],
        total: Decimal,
        address: str,
        payment_method: str,
    ) -> Order: ...

    @abstractmethod
    def update_order_status(self, order_id: str, new_status: OrderStatus) -> None: ...

    @abstractmethod
    def subscribe_to_order_changes(self, order_id: str, on_change: OrderListener) -> Callable[[], None]: ...

    @abstractmethod
    def fetch_order(self, order_id: str) -> Order: ...

    @abstractmethod
    def fetch_order_items(self, order_id: str) -> List[OrderItem]: ...

    @abstractmethod
    def list_orders(self, user_id: str) -> List[Order]: ...


class SqlOrderStore(OrderStore):
    """OrderStore over a SQLModel engine; publishes every status change after commit."""

    def __init__(self, engine, notifier: Optional[OrderChangeNotifier] = None):
        self.engine = engine
        self.notifier = notifier or OrderChangeNotifier()

    def create_order(self, user_id, restaurant, items, total, address, payment_method) -> Order:
        if not user_id:
            raise ValidationError("Please login to place an order")
        if not items:
            raise ValidationError("Your cart is empty")

        order = Order(
            user_id=user_id,
            restaurant_id=restaurant.id,
            restaurant_name=restaurant.name,
            restaurant_image=restaurant.image,
            total=total,
            status=OrderStatus.CONFIRMED.value,
            delivery_address=address,
            payment_method=payment_method,
        )
        order_items = [
            OrderItem(
                order_id=order.id,
                menu_item_id=item.id,
                item_name=item.name,
                quantity=item.quantity,
                price=item.price,
                restaurant_name=item.restaurant,
                restaurant_image=item.image,
                special_instructions=item.special_instructions,
            )
            for item in items
        ]

        try:
            with get_session(self.engine) as session:
                session.add(order)
                for order_item in order_items:
                    session.add(order_item)
                session.commit()
        except SQLAlchemyError as e:
            logging.error(f"ORDER >>> Failed to create order for user {user_id} -> {e}")
            raise BackendUnavailableError("Failed to place order. Please try again.") from e

        logging.info(f"ORDER >>> Order {order.id} created ({len(order_items)} items, total {order.total})")
        return order

    def update_order_status(self, order_id: str, new_status: OrderStatus) -> None:
        new_value = OrderStatus(new_status).value
        try:
            with get_session(self.engine) as session:
                order = session.get(Order, order_id)
                if not order:
                    raise NotFoundError("Order not found")

                if order.status == new_value:
                    return

                if is_terminal(order.status):
                    raise TransitionConflictError(
                        f"Order {order_id} is already {order.status}; cannot move to {new_value}"
                    )

                previous = order.status
                order.status = new_value
                order.updated_at = datetime.now(timezone.utc)
                session.add(order)
                session.commit()
        except SQLAlchemyError as e:
            logging.error(f"ORDER >>> Failed to update order {order_id} to {new_value} -> {e}")
            raise BackendUnavailableError("Could not reach the order service.") from e

        logging.info(f"ORDER >>> Order {order_id}: {previous} -> {new_value}")
        self.notifier.publish(order)

    def subscribe_to_order_changes(self, order_id: str, on_change: OrderListener) -> Callable[[], None]:
        return self.notifier.subscribe(order_id, on_change)

    def fetch_order(self, order_id: str) -> Order:
        try:
            with get_session(self.engine) as session:
                order = session.get(Order, order_id)
        except SQLAlchemyError as e:
            logging.error(f"ORDER >>> Failed to fetch order {order_id} -> {e}")
            raise BackendUnavailableError("Failed to load order details") from e

        if not order:
            raise NotFoundError("Order not found")
        return order

    def fetch_order_items(self, order_id: str) -> List[OrderItem]:
        try:
            with get_session(self.engine) as session:
                return list(session.exec(select(OrderItem).where(OrderItem.order_id == order_id)).all())
        except SQLAlchemyError as e:
            logging.error(f"ORDER >>> Failed to fetch items of order {order_id} -> {e}")
            raise BackendUnavailableError("Failed to load order details") from e

    def list_orders(self, user_id: str) -> List[Order]:
        try:
            with get_session(self.engine) as session:
                stmt = select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc())
                return list(session.exec(stmt).all())
        except SQLAlchemyError as e:
            logging.error(f"ORDER >>> Failed to list orders for user {user_id} -> {e}")
            raise BackendUnavailableError("Failed to load orders") from e
