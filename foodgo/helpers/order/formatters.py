from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional
from babel.numbers import format_currency as babel_format_currency
from babel.dates import format_datetime as babel_format_datetime

def format_currency(value: Decimal, currency: str = "BHD", locale_str: str = "en_US") -> str:
    return babel_format_currency(value, currency, locale=locale_str)

def format_order_date(date: datetime, locale_str: str = "en_US") -> str:
    return babel_format_datetime(date, "dd/MM/yyyy HH:mm", locale=locale_str)

def format_item_line(quantity: int, name: str, special_instructions: Optional[str] = None) -> str:
    text = f"{quantity} {name}"
    if special_instructions:
        return f"{text} ({special_instructions})"
    return text

def format_item_summary(items: Iterable) -> str:
    """'2 Margherita (no basil), 1 Cola' from order line items."""
    return ", ".join(
        format_item_line(item.quantity, item.item_name, item.special_instructions)
        for item in items
    )

def format_delivery_address(
    residence_type: str,
    city: str,
    block: str,
    road: str,
    house_number: Optional[str] = None,
    building_number: Optional[str] = None,
    flat_number: Optional[str] = None,
    notes: Optional[str] = None,
) -> str:
    if residence_type == "house":
        address = f"House {house_number}, Road {road}, Block {block}, {city}"
    else:
        address = f"Building {building_number}, Flat {flat_number}, Road {road}, Block {block}, {city}"
    if notes:
        address += f" - {notes}"
    return address
