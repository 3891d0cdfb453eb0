from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class CartItem(BaseModel):
    id: str
    name: str
    price: Decimal = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    restaurant: str = Field(min_length=1)
    image: Optional[str] = None
    special_instructions: Optional[str] = Field(default=None, max_length=255)

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity
