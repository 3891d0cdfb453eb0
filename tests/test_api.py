"""Tests for the HTTP surface."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from foodgo import create_app
from foodgo.tasks.websockets import routes as websocket_routes
from foodgo.tasks.websockets.ws_manager import order_ws_manager

PIZZA = {
    "id": "margherita",
    "name": "Margherita",
    "price": "2.000",
    "quantity": 2,
    "restaurant": "Pizza Palace",
    "image": "https://img.test/pizza.png",
}
BURGER = {"id": "burger", "name": "Burger", "price": "3.500", "restaurant": "Burger House"}
CHECKOUT = {
    "address": {"residence_type": "house", "city": "Manama", "block": "338", "road": "3803", "house_number": "12"},
    "payment_method": "card",
}


@pytest.fixture
def client(engine, relay, scheduler, now):
    now.set(datetime.now(timezone.utc))
    app = create_app(engine=engine, relay=relay, now=now, scheduler=scheduler, start_background=False)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def headers(client):
    response = client.post("/session", json={"user_id": "user-1", "first_name": "Sara"})
    return {"X-Session-Token": response.json()["token"]}


def _checkout(client, headers):
    client.post("/cart/items/", json=PIZZA, headers=headers)
    response = client.post("/orders/checkout", json=CHECKOUT, headers=headers)
    assert response.status_code == 200
    return response.json()


class TestSession:
    def test_cart_requires_session(self, client):
        response = client.get("/cart/")
        assert response.status_code == 401
        assert response.json()["detail"]["detail"] == "Please login to continue"

    def test_logout_invalidates_token(self, client, headers):
        assert client.delete("/session", headers=headers).status_code == 200
        assert client.get("/cart/", headers=headers).status_code == 401

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"


class TestCartRoutes:
    def test_add_and_read(self, client, headers):
        response = client.post("/cart/items/", json=PIZZA, headers=headers)
        body = response.json()
        assert response.status_code == 200
        assert body["restaurant"] == "Pizza Palace"
        assert body["total_items"] == 2
        assert body["subtotal"] == "4.000"

    def test_restaurant_conflict_is_409(self, client, headers):
        client.post("/cart/items/", json=PIZZA, headers=headers)
        response = client.post("/cart/items/", json=BURGER, headers=headers)

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["detail"] == 'A new order will clear your cart with "Pizza Palace"'
        assert detail["errors"] == {"current_restaurant": "Pizza Palace", "incoming_restaurant": "Burger House"}
        assert client.get("/cart/", headers=headers).json()["restaurant"] == "Pizza Palace"

    def test_replace_confirms_clear_and_add(self, client, headers):
        client.post("/cart/items/", json=PIZZA, headers=headers)
        response = client.post("/cart/items/?replace=true", json=BURGER, headers=headers)
        assert response.json()["restaurant"] == "Burger House"
        assert [i["id"] for i in response.json()["items"]] == ["burger"]

    def test_quantity_delta_removes_line(self, client, headers):
        client.post("/cart/items/", json=PIZZA, headers=headers)
        response = client.patch("/cart/items/margherita", json={"delta": -2}, headers=headers)
        assert response.json()["items"] == []
        assert response.json()["total"] == "0"

    def test_unknown_item_quantity_is_422(self, client, headers):
        response = client.patch("/cart/items/ghost", json={"delta": 1}, headers=headers)
        assert response.status_code == 422

    def test_remove_and_clear(self, client, headers):
        client.post("/cart/items/", json=PIZZA, headers=headers)
        assert client.delete("/cart/items/ghost", headers=headers).json()["total_items"] == 2
        assert client.delete("/cart/items/", headers=headers).json()["total_items"] == 0


class TestOrderRoutes:
    def test_checkout_places_and_tracks(self, client, headers):
        order = _checkout(client, headers)
        assert order["status"] == "confirmed"
        assert order["total"] == "6.000"
        assert order["delivery_address"] == "House 12, Road 3803, Block 338, Manama"
        assert client.get("/cart/", headers=headers).json()["total_items"] == 0

        tracking = client.get(f"/orders/{order['id']}/tracking", headers=headers).json()
        assert tracking["label"] == "Order Confirmed"
        assert tracking["progress"] == 25
        assert tracking["can_cancel"] is True

    def test_checkout_empty_cart_is_422(self, client, headers):
        response = client.post("/orders/checkout", json=CHECKOUT, headers=headers)
        assert response.status_code == 422
        assert response.json()["detail"]["detail"] == "Your cart is empty"

    def test_cancel_inside_window(self, client, headers, http):
        order = _checkout(client, headers)
        response = client.post(f"/orders/{order['id']}/cancel", headers=headers)

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["progress"] == 0
        assert http.posts[-1]["json"]["user_name"] == "Sara"

    def test_cancel_after_window_is_409(self, client, headers, now):
        order = _checkout(client, headers)
        tracker = client.app.state.services.tracking.get(order["id"])
        now.at(tracker.order.created_at_utc, 25)

        response = client.post(f"/orders/{order['id']}/cancel", headers=headers)
        assert response.status_code == 409
        assert response.json()["detail"]["detail"] == "You cannot cancel your order after 20 seconds of placement."

    def test_history_splits_current_and_past(self, client, headers):
        first = _checkout(client, headers)
        client.post(f"/orders/{first['id']}/cancel", headers=headers)
        second = _checkout(client, headers)

        history = client.get("/orders/", headers=headers).json()
        assert [o["id"] for o in history["current"]] == [second["id"]]
        assert [o["id"] for o in history["past"]] == [first["id"]]

    def test_foreign_order_is_404(self, client, headers):
        order = _checkout(client, headers)
        token = client.post("/session", json={"user_id": "user-2"}).json()["token"]

        response = client.get(f"/orders/{order['id']}", headers={"X-Session-Token": token})
        assert response.status_code == 404

    def test_stop_tracking(self, client, headers):
        order = _checkout(client, headers)
        assert client.delete(f"/orders/{order['id']}/tracking", headers=headers).json() == {"released": True}
        assert client.delete(f"/orders/{order['id']}/tracking", headers=headers).json() == {"released": False}

    def test_reorder_conflict_then_replace(self, client, headers):
        order = _checkout(client, headers)
        client.post("/cart/items/", json=BURGER, headers=headers)

        conflict = client.post(f"/orders/{order['id']}/reorder", headers=headers)
        assert conflict.status_code == 409

        replaced = client.post(f"/orders/{order['id']}/reorder?replace=true", headers=headers)
        assert replaced.json() == {"added": 1, "restaurant": "Pizza Palace"}


class TestOrderWebSocket:
    def test_sends_current_status_on_connect(self, client, headers):
        order = _checkout(client, headers)
        with client.websocket_connect(f"/ws/orders/{order['id']}") as websocket:
            message = websocket.receive_json()
        assert message["type"] == "order_status"
        assert message["order_id"] == order["id"]
        assert message["status"] == "confirmed"

    def test_closing_the_last_socket_detaches_the_tracker(self, client, headers):
        order = _checkout(client, headers)
        with client.websocket_connect(f"/ws/orders/{order['id']}") as websocket:
            websocket.receive_json()
            assert order_ws_manager.connection_count(order["id"]) == 1

        tracker = client.app.state.services.tracking.get(order["id"])
        assert order_ws_manager.connection_count(order["id"]) == 0
        assert order["id"] not in websocket_routes._bridges
        assert tracker._listeners == []
