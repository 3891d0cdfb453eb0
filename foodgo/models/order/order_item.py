from decimal import Decimal
from typing import Optional
import uuid
from sqlmodel import Field, SQLModel
from sqlalchemy import Column, Numeric


class OrderItem(SQLModel, table=True):
    __tablename__ = "tb_order_item"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    order_id: str = Field(foreign_key="tb_order.id", index=True)

    # Menu item the line was added from; reorder merges on it
    menu_item_id: Optional[str] = Field(default=None, index=True)

    item_name: str
    quantity: int = Field(default=1, ge=1)
    price: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(10, 3), nullable=False))

    restaurant_name: Optional[str] = None
    restaurant_image: Optional[str] = None
    special_instructions: Optional[str] = Field(default=None, max_length=255)
