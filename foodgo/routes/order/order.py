import logging
from typing import List
from fastapi import APIRouter, Depends, Query

from foodgo.auth.session import CustomerSession, get_customer_session
from foodgo.core.container import Services, get_services
from foodgo.core.exceptions.app_exception import AppHttpException
from foodgo.core.exceptions.order_errors import FoodGoError, NotFoundError
from foodgo.enums.order_status import is_terminal
from foodgo.functions.order.checkout import place_order
from foodgo.functions.order.reorder import reorder
from foodgo.helpers.order.formatters import format_currency, format_delivery_address, format_order_date
from foodgo.helpers.order.progress import progress_percent, status_label
from foodgo.models.order.order import Order
from foodgo.models.order.order_item import OrderItem
from foodgo.schemas.order import (
    CheckoutRequest,
    OrderHistory,
    OrderItemRead,
    OrderRead,
    OrderTracking,
    ReorderResult,
)


class OrderRouter(APIRouter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.add_api_route("/orders/checkout", self.checkout, methods=["POST"], response_model=OrderRead)
        self.add_api_route("/orders/", self.get_orders, methods=["GET"], response_model=OrderHistory)
        self.add_api_route("/orders/{order_id}", self.get_order, methods=["GET"], response_model=OrderRead)
        self.add_api_route("/orders/{order_id}/tracking", self.get_tracking, methods=["GET"], response_model=OrderTracking)
        self.add_api_route("/orders/{order_id}/cancel", self.cancel_order, methods=["POST"], response_model=OrderTracking)
        self.add_api_route("/orders/{order_id}/tracking", self.stop_tracking, methods=["DELETE"], response_model=dict)
        self.add_api_route("/orders/{order_id}/reorder", self.reorder_items, methods=["POST"], response_model=ReorderResult)

    # -------------------- helpers --------------------

    def _to_read(self, order: Order, items: List[OrderItem], services: Services) -> OrderRead:
        return OrderRead(
            id=order.id,
            user_id=order.user_id,
            restaurant_id=order.restaurant_id,
            restaurant_name=order.restaurant_name,
            restaurant_image=order.restaurant_image,
            total=order.total,
            total_display=format_currency(order.total, services.currency, services.currency_locale),
            delivery_address=order.delivery_address,
            payment_method=order.payment_method,
            status=order.status,
            status_label=status_label(order.status),
            progress=progress_percent(order.status),
            created_at=order.created_at_utc,
            created_at_display=format_order_date(order.created_at_utc),
            items=[
                OrderItemRead(
                    id=item.id,
                    item_name=item.item_name,
                    quantity=item.quantity,
                    price=item.price,
                    special_instructions=item.special_instructions,
                )
                for item in items
            ],
        )

    def _owned_order(self, order_id: str, customer: CustomerSession, services: Services) -> Order:
        order = services.store.fetch_order(order_id)
        if order.user_id != customer.user_id:
            raise NotFoundError("Order not found")
        return order

    # -------------------- routes --------------------

    def checkout(
        self,
        payload: CheckoutRequest,
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        address = format_delivery_address(
            payload.address.residence_type,
            payload.address.city,
            payload.address.block,
            payload.address.road,
            house_number=payload.address.house_number,
            building_number=payload.address.building_number,
            flat_number=payload.address.flat_number,
            notes=payload.address.notes,
        )
        try:
            order = place_order(
                customer,
                customer.cart,
                services.store,
                address,
                payload.payment_method.value,
                services.delivery_fee,
                restaurant_image=payload.restaurant_image,
            )
            items = services.store.fetch_order_items(order.id)
            services.tracking.track(order.id, customer.first_name)
        except FoodGoError as e:
            raise AppHttpException.from_error(e)

        return self._to_read(order, items, services)

    def get_orders(
        self,
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        try:
            orders = services.store.list_orders(customer.user_id)
            history = OrderHistory()
            for order in orders:
                read = self._to_read(order, services.store.fetch_order_items(order.id), services)
                (history.past if is_terminal(order.status) else history.current).append(read)
        except FoodGoError as e:
            raise AppHttpException.from_error(e)
        return history

    def get_order(
        self,
        order_id: str,
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        try:
            order = self._owned_order(order_id, customer, services)
            items = services.store.fetch_order_items(order_id)
        except FoodGoError as e:
            raise AppHttpException.from_error(e)
        return self._to_read(order, items, services)

    def get_tracking(
        self,
        order_id: str,
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        try:
            self._owned_order(order_id, customer, services)
            tracker = services.tracking.track(order_id, customer.first_name)
            return OrderTracking(**tracker.snapshot())
        except FoodGoError as e:
            raise AppHttpException.from_error(e)

    def cancel_order(
        self,
        order_id: str,
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        try:
            self._owned_order(order_id, customer, services)
            tracker = services.tracking.track(order_id, customer.first_name)
            tracker.request_cancel()
            # The tracker may not have observed the write yet
            return OrderTracking(**tracker.snapshot(services.store.fetch_order(order_id)))
        except FoodGoError as e:
            logging.info(f"ORDER >>> Cancel refused for order {order_id} -> {e.detail}")
            raise AppHttpException.from_error(e)

    def stop_tracking(
        self,
        order_id: str,
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        try:
            self._owned_order(order_id, customer, services)
        except FoodGoError as e:
            raise AppHttpException.from_error(e)
        return {"released": services.tracking.release(order_id)}

    def reorder_items(
        self,
        order_id: str,
        replace: bool = Query(False, description="Confirms clearing a cart that holds another restaurant"),
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        try:
            order = self._owned_order(order_id, customer, services)
            items = services.store.fetch_order_items(order_id)
            added = reorder(customer.cart, order, items, replace=replace)
        except FoodGoError as e:
            raise AppHttpException.from_error(e)
        return ReorderResult(added=added, restaurant=customer.cart.get_current_restaurant())
