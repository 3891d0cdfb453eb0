import logging
from typing import List

from foodgo.core.exceptions.order_errors import RestaurantConflictError, ValidationError
from foodgo.models.cart.cart import Cart
from foodgo.models.cart.cart_item import CartItem
from foodgo.models.order.order import Order
from foodgo.models.order.order_item import OrderItem


def reorder(cart: Cart, order: Order, items: List[OrderItem], replace: bool = False) -> int:
    """Copies the lines of a past order back into the cart.

    Returns how many lines were added. A cart holding another restaurant
    raises RestaurantConflictError unless ``replace`` is set, in which case
    the cart is cleared first.
    """
    if not items:
        raise ValidationError("No items found in this order")

    restaurant = items[0].restaurant_name or order.restaurant_name
    if any((item.restaurant_name or order.restaurant_name) != restaurant for item in items):
        raise ValidationError("This order mixes items from several restaurants")

    current = cart.get_current_restaurant()
    if current is not None and current != restaurant:
        if not replace:
            raise RestaurantConflictError(current, restaurant)
        cart.clear_cart()

    for item in items:
        cart.add_item(
            CartItem(
                id=item.menu_item_id or item.id,
                name=item.item_name,
                price=item.price,
                quantity=item.quantity,
                restaurant=restaurant,
                image=item.restaurant_image or order.restaurant_image,
                special_instructions=item.special_instructions,
            )
        )

    logging.info(f"CART >>> Reordered {len(items)} items from order {order.id}")
    return len(items)
