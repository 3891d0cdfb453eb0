import logging
from fastapi import APIRouter, Depends, Query

from foodgo.auth.session import CustomerSession, get_customer_session
from foodgo.core.container import Services, get_services
from foodgo.core.exceptions.app_exception import AppHttpException
from foodgo.core.exceptions.order_errors import FoodGoError
from foodgo.helpers.order.formatters import format_currency
from foodgo.schemas.cart import CartItemCreate, CartItemQuantityUpdate, CartRead


class CartRouter(APIRouter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.add_api_route("/cart/", self.get_cart, methods=["GET"], response_model=CartRead)
        self.add_api_route("/cart/items/", self.add_item, methods=["POST"], response_model=CartRead)
        self.add_api_route("/cart/items/{item_id}", self.update_item_quantity, methods=["PATCH"], response_model=CartRead)
        self.add_api_route("/cart/items/{item_id}", self.remove_item, methods=["DELETE"], response_model=CartRead)
        self.add_api_route("/cart/items/", self.clear_cart, methods=["DELETE"], response_model=CartRead)

    def _read(self, customer: CustomerSession, services: Services) -> CartRead:
        return CartRead.from_cart(
            customer.cart,
            services.delivery_fee,
            lambda value: format_currency(value, services.currency, services.currency_locale),
        )

    def get_cart(
        self,
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        return self._read(customer, services)

    def add_item(
        self,
        item: CartItemCreate,
        replace: bool = Query(False, description="Confirms clearing a cart that holds another restaurant"),
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        try:
            if replace:
                customer.cart.replace_with(item.to_cart_item())
                logging.info(f"CART >>> Cart of user {customer.user_id} replaced with '{item.restaurant}'")
            else:
                customer.cart.add_item(item.to_cart_item())
        except FoodGoError as e:
            raise AppHttpException.from_error(e)

        logging.info(f"CART >>> Added {item.quantity} x {item.name} for user {customer.user_id}")
        return self._read(customer, services)

    def update_item_quantity(
        self,
        item_id: str,
        update: CartItemQuantityUpdate,
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        try:
            customer.cart.update_quantity(item_id, update.delta)
        except FoodGoError as e:
            raise AppHttpException.from_error(e)
        return self._read(customer, services)

    def remove_item(
        self,
        item_id: str,
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        customer.cart.remove_item(item_id)
        return self._read(customer, services)

    def clear_cart(
        self,
        customer: CustomerSession = Depends(get_customer_session),
        services: Services = Depends(get_services),
    ):
        customer.cart.clear_cart()
        logging.info(f"CART >>> Cart cleared for user {customer.user_id}")
        return self._read(customer, services)
