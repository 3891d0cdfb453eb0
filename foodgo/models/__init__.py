# foodgo/models/__init__.py

from .order.order import Order
from .order.order_item import OrderItem
from .cart.cart import Cart
from .cart.cart_item import CartItem
