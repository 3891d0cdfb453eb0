from decimal import Decimal
import logging
from typing import Optional, List

from foodgo.core.exceptions.order_errors import RestaurantConflictError, ValidationError
from foodgo.models.cart.cart_item import CartItem


class Cart:
    """In-memory cart holding items from a single restaurant.

    The cart is either empty or every line shares the same ``restaurant``.
    Adding an item from another restaurant raises ``RestaurantConflictError``
    and leaves the cart untouched; the caller resolves it explicitly with
    ``replace_with`` (clear then add) once the customer confirms.
    """

    def __init__(self, items: Optional[List[CartItem]] = None):
        self._items: List[CartItem] = []
        for item in items or []:
            self.add_item(item)

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def get_current_restaurant(self) -> Optional[str]:
        if not self._items:
            return None
        return self._items[0].restaurant

    def _find(self, item_id: str) -> Optional[CartItem]:
        return next((i for i in self._items if i.id == item_id), None)

    def add_item(self, item: CartItem) -> CartItem:
        current = self.get_current_restaurant()
        if current is not None and current != item.restaurant:
            logging.info(f"CART >>> Conflict: cart holds '{current}', incoming item from '{item.restaurant}'")
            raise RestaurantConflictError(current, item.restaurant)

        existing = self._find(item.id)
        if existing:
            existing.quantity += item.quantity
            return existing

        line = item.model_copy()
        self._items.append(line)
        return line

    def replace_with(self, item: CartItem) -> CartItem:
        """Clears the cart and adds ``item``; the confirmed side of a restaurant conflict."""
        self.clear_cart()
        return self.add_item(item)

    def update_quantity(self, item_id: str, delta: int) -> Optional[CartItem]:
        item = self._find(item_id)
        if item is None:
            raise ValidationError("Item not found in cart")

        new_quantity = item.quantity + delta
        if new_quantity <= 0:
            self._items.remove(item)
            return None

        item.quantity = new_quantity
        return item

    def remove_item(self, item_id: str) -> None:
        self._items = [i for i in self._items if i.id != item_id]

    def clear_cart(self) -> None:
        self._items = []

    def get_subtotal(self) -> Decimal:
        return sum((item.subtotal for item in self._items), Decimal("0"))

    def get_total_item_count(self) -> int:
        return sum(item.quantity for item in self._items)
