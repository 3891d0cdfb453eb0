from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from foodgo.models.cart.cart import Cart
from foodgo.models.cart.cart_item import CartItem


class CartItemCreate(BaseModel):
    id: str
    name: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    restaurant: str = Field(min_length=1)
    image: Optional[str] = None
    special_instructions: Optional[str] = Field(default=None, max_length=255)

    def to_cart_item(self) -> CartItem:
        return CartItem(**self.model_dump())


class CartItemQuantityUpdate(BaseModel):
    delta: int


class CartItemRead(BaseModel):
    id: str
    name: str
    price: Decimal
    quantity: int
    restaurant: str
    image: Optional[str] = None
    special_instructions: Optional[str] = None
    subtotal: Decimal
    subtotal_display: str


class CartRead(BaseModel):
    restaurant: Optional[str] = None
    items: List[CartItemRead] = []
    total_items: int
    subtotal: Decimal
    subtotal_display: str
    delivery_fee: Decimal
    total: Decimal
    total_display: str

    @classmethod
    def from_cart(cls, cart: Cart, delivery_fee: Decimal, format_price) -> "CartRead":
        subtotal = cart.get_subtotal()
        # No delivery fee on an empty cart
        fee = delivery_fee if not cart.is_empty() else Decimal("0")
        return cls(
            restaurant=cart.get_current_restaurant(),
            items=[
                CartItemRead(
                    **item.model_dump(),
                    subtotal=item.subtotal,
                    subtotal_display=format_price(item.subtotal),
                )
                for item in cart.items
            ],
            total_items=cart.get_total_item_count(),
            subtotal=subtotal,
            subtotal_display=format_price(subtotal),
            delivery_fee=fee,
            total=subtotal + fee,
            total_display=format_price(subtotal + fee),
        )
