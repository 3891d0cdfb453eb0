"""Tests for checkout, reorder and customer sessions."""

from decimal import Decimal

import pytest

from foodgo.auth.session import SessionRegistry
from foodgo.core.exceptions.order_errors import BackendUnavailableError, RestaurantConflictError, ValidationError
from foodgo.functions.order.checkout import place_order
from foodgo.functions.order.reorder import reorder
from tests.conftest import _make_item

ADDRESS = "House 12, Road 3803, Block 338, Manama"


def _make_customer(*items):
    customer = SessionRegistry().login("user-1", "Sara")
    for item in items:
        customer.cart.add_item(item)
    return customer


class TestPlaceOrder:
    def test_creates_order_and_clears_cart(self, store):
        customer = _make_customer(_make_item(quantity=2), _make_item("cola", "Cola", "0.500"))

        order = place_order(customer, customer.cart, store, ADDRESS, "card", Decimal("2.000"))

        assert order.total == Decimal("6.500")
        assert order.status == "confirmed"
        assert order.restaurant_id == "pizza-palace"
        assert customer.cart.is_empty()
        assert len(store.fetch_order_items(order.id)) == 2

    def test_empty_cart(self, store):
        customer = _make_customer()
        with pytest.raises(ValidationError) as exc:
            place_order(customer, customer.cart, store, ADDRESS, "card", Decimal("2"))
        assert exc.value.detail == "Your cart is empty"

    def test_logged_out_customer(self, store):
        registry = SessionRegistry()
        customer = registry.login("user-1", "Sara")
        cart = customer.cart
        cart.add_item(_make_item())
        registry.logout(customer.token)
        cart.add_item(_make_item())

        with pytest.raises(ValidationError) as exc:
            place_order(customer, cart, store, ADDRESS, "card", Decimal("2"))
        assert exc.value.detail == "Please login to place an order"

    def test_unknown_payment_method(self, store):
        customer = _make_customer(_make_item())
        with pytest.raises(ValidationError) as exc:
            place_order(customer, customer.cart, store, ADDRESS, "bitcoin", Decimal("2"))
        assert exc.value.detail == "Please select a payment method"

    def test_backend_failure_keeps_cart(self, store):
        customer = _make_customer(_make_item())

        def unavailable(*args, **kwargs):
            raise BackendUnavailableError("Failed to place order. Please try again.")

        store.create_order = unavailable
        with pytest.raises(BackendUnavailableError):
            place_order(customer, customer.cart, store, ADDRESS, "cash", Decimal("2"))
        assert not customer.cart.is_empty()


class TestReorder:
    def test_copies_lines_into_empty_cart(self, store, place):
        order = place([_make_item(quantity=2, special_instructions="extra cheese")])
        customer = _make_customer()

        added = reorder(customer.cart, order, store.fetch_order_items(order.id))

        assert added == 1
        [line] = customer.cart.items
        assert line.quantity == 2
        assert line.special_instructions == "extra cheese"
        assert line.restaurant == "Pizza Palace"

    def test_reordered_line_merges_with_menu_add(self, store, place):
        order = place([_make_item(quantity=2)])
        customer = _make_customer()

        reorder(customer.cart, order, store.fetch_order_items(order.id))
        customer.cart.add_item(_make_item())

        [line] = customer.cart.items
        assert line.id == "margherita"
        assert line.quantity == 3

    def test_conflict_without_replace(self, store, place):
        order = place()
        customer = _make_customer(_make_item("burger", "Burger", restaurant="Burger House"))

        with pytest.raises(RestaurantConflictError):
            reorder(customer.cart, order, store.fetch_order_items(order.id))
        assert customer.cart.get_current_restaurant() == "Burger House"

    def test_replace_clears_first(self, store, place):
        order = place()
        customer = _make_customer(_make_item("burger", "Burger", restaurant="Burger House"))

        reorder(customer.cart, order, store.fetch_order_items(order.id), replace=True)
        assert customer.cart.get_current_restaurant() == "Pizza Palace"
        assert customer.cart.get_total_item_count() == 3

    def test_order_without_items(self, place):
        order = place()
        with pytest.raises(ValidationError) as exc:
            reorder(_make_customer().cart, order, [])
        assert exc.value.detail == "No items found in this order"


class TestSessionRegistry:
    def test_login_and_lookup(self):
        registry = SessionRegistry()
        session = registry.login("user-1", "Sara")
        assert registry.get(session.token) is session
        assert registry.get("nope") is None

    def test_logout_invalidates_and_clears_cart(self):
        registry = SessionRegistry()
        session = registry.login("user-1", "Sara")
        session.cart.add_item(_make_item())

        assert registry.logout(session.token) is True
        assert session.active is False
        assert session.cart.is_empty()
        assert registry.get(session.token) is None
