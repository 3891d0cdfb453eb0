from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from foodgo.enums.payment_method import PaymentMethod


# --- DELIVERY ADDRESS ---
class DeliveryAddress(BaseModel):
    residence_type: str = Field(pattern="^(house|building)$")
    city: str
    block: str
    road: str
    house_number: Optional[str] = None
    building_number: Optional[str] = None
    flat_number: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_numbers(self):
        if self.residence_type == "house" and not self.house_number:
            raise ValueError("house_number is required for a house")
        if self.residence_type == "building" and not (self.building_number and self.flat_number):
            raise ValueError("building_number and flat_number are required for a building")
        return self


# --- CHECKOUT ---
class CheckoutRequest(BaseModel):
    address: DeliveryAddress
    payment_method: PaymentMethod
    restaurant_image: Optional[str] = None


# --- ORDER ---
class OrderItemRead(BaseModel):
    id: str
    item_name: str
    quantity: int
    price: Decimal
    special_instructions: Optional[str] = None


class OrderRead(BaseModel):
    id: str
    user_id: str
    restaurant_id: str
    restaurant_name: str
    restaurant_image: Optional[str] = None
    total: Decimal
    total_display: str
    delivery_address: str
    payment_method: str
    status: str
    status_label: str
    progress: int
    created_at: datetime
    created_at_display: str
    items: List[OrderItemRead] = []


class OrderHistory(BaseModel):
    current: List[OrderRead] = []
    past: List[OrderRead] = []


class OrderTracking(BaseModel):
    order_id: str
    status: str
    label: str
    description: str
    headline: str
    progress: int
    can_cancel: bool
    seconds_left: int


class ReorderResult(BaseModel):
    added: int
    restaurant: Optional[str] = None
