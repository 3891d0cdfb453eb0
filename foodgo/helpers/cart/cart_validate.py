from foodgo.core.exceptions.order_errors import ValidationError
from foodgo.enums.payment_method import PaymentMethod
from foodgo.models.cart.cart import Cart

def validate_not_empty(cart: Cart):
    if cart.is_empty():
        raise ValidationError("Your cart is empty")

def validate_single_restaurant(cart: Cart):
    restaurants = {item.restaurant for item in cart.items}
    if len(restaurants) != 1 or not cart.get_current_restaurant():
        raise ValidationError("Cart must hold items from exactly one restaurant")

def validate_payment_method(payment_method: str):
    if payment_method not in {method.value for method in PaymentMethod}:
        raise ValidationError("Please select a payment method")
