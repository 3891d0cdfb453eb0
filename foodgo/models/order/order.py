from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
import re
import uuid
from sqlmodel import Field, SQLModel
from sqlalchemy import Column, Numeric

from foodgo.enums.order_status import OrderStatus


def generate_order_id() -> str:
    return str(uuid.uuid4())


def restaurant_slug(name: str) -> str:
    """'Burger House' -> 'burger-house'"""
    return re.sub(r"\s+", "-", name.strip().lower())


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Order(SQLModel, table=True):
    __tablename__ = "tb_order"

    id: str = Field(default_factory=generate_order_id, primary_key=True)

    user_id: str = Field(index=True)

    # Restaurant snapshot captured at checkout
    restaurant_id: str
    restaurant_name: str
    restaurant_image: Optional[str] = None

    total: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(10, 3), nullable=False))
    delivery_address: str
    payment_method: str = Field(default="card")

    # Plain text so that statuses added later still load
    status: str = Field(default=OrderStatus.CONFIRMED.value, index=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    @property
    def created_at_utc(self) -> datetime:
        return as_utc(self.created_at)
