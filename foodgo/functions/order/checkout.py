from decimal import Decimal
import logging
from typing import Optional

from foodgo.core.exceptions.order_errors import ValidationError
from foodgo.database.order_store import OrderStore, RestaurantSnapshot
from foodgo.helpers.cart.cart_validate import (
    validate_not_empty,
    validate_payment_method,
    validate_single_restaurant,
)
from foodgo.models.cart.cart import Cart
from foodgo.models.order.order import Order


def place_order(
    customer,
    cart: Cart,
    store: OrderStore,
    address: str,
    payment_method: str,
    delivery_fee: Decimal,
    restaurant_image: Optional[str] = None,
) -> Order:
    """Turns the cart into a confirmed order and empties the cart."""
    validate_not_empty(cart)
    validate_single_restaurant(cart)
    if customer is None or not customer.active or not customer.user_id:
        raise ValidationError("Please login to place an order")
    validate_payment_method(payment_method)
    if not address or not address.strip():
        raise ValidationError("Please add a delivery address")

    restaurant = RestaurantSnapshot.from_name(
        cart.get_current_restaurant(),
        restaurant_image or cart.items[0].image,
    )
    total = cart.get_subtotal() + Decimal(delivery_fee)

    order = store.create_order(
        customer.user_id,
        restaurant,
        list(cart.items),
        total,
        address.strip(),
        payment_method,
    )

    # Cart survives a failed write so the customer can retry
    cart.clear_cart()
    logging.info(f"ORDER >>> Checkout complete for user {customer.user_id} -> order {order.id}")
    return order
