from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

from foodgo.helpers.order.formatters import (
    format_currency,
    format_delivery_address,
    format_item_line,
    format_item_summary,
    format_order_date,
)


def test_item_line_with_and_without_instructions():
    assert format_item_line(2, "Margherita") == "2 Margherita"
    assert format_item_line(1, "Burger", "no onions") == "1 Burger (no onions)"


def test_item_summary_joins_lines():
    items = [
        SimpleNamespace(quantity=2, item_name="Margherita", special_instructions="no basil"),
        SimpleNamespace(quantity=1, item_name="Cola", special_instructions=None),
    ]
    assert format_item_summary(items) == "2 Margherita (no basil), 1 Cola"


def test_house_address():
    assert (
        format_delivery_address("house", "Manama", "338", "3803", house_number="12")
        == "House 12, Road 3803, Block 338, Manama"
    )


def test_building_address_with_notes():
    address = format_delivery_address(
        "building", "Riffa", "901", "12", building_number="7", flat_number="21", notes="Ring twice"
    )
    assert address == "Building 7, Flat 21, Road 12, Block 901, Riffa - Ring twice"


def test_currency_keeps_three_decimals():
    assert "6.000" in format_currency(Decimal("6"), "BHD", "en_US")


def test_order_date():
    date = datetime(2026, 3, 4, 18, 5, tzinfo=timezone.utc)
    assert format_order_date(date) == "04/03/2026 18:05"
