"""Unit tests for order API endpoints."""
import pytest

from catering.services.notifications.events import OrderStatusChanged
from catering.services.ordering.status import OrderStatus


@pytest.fixture
def order_payload(seeded):
    """JSON body for a two-line order."""
    return {
        "client_id": seeded.client_id,
        "delivery_date": "2024-07-15",
        "delivery_time": "12:30:00",
        "delivery_address": "45 Market Avenue, Springfield",
        "notes": "Ring the back door",
        "party_size": 12,
        "items": [
            {"menu_item_id": seeded.lasagna_id, "quantity": 2},
            {"menu_item_id": seeded.salad_id, "quantity": 1, "customizations": "dressing apart"},
        ],
    }


@pytest.fixture
def created_order(test_client, order_payload):
    """An order created through the API."""
    response = test_client.post("/api/orders", json=order_payload)
    assert response.status_code == 201
    return response.json()


class TestCreateOrderAPI:
    """Test POST /api/orders."""

    def test_create_order_success(self, test_client, order_payload):
        """Test creating an order returns priced totals."""
        response = test_client.post("/api/orders", json=order_payload)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["order_number"].startswith("ORD-")
        assert data["subtotal"] == "25.50"
        assert data["tax"] == "3.06"
        assert data["discount"] == "0.00"
        assert data["total"] == "28.56"
        assert len(data["items"]) == 2
        assert data["items"][0]["unit_price"] == "10.00"
        assert data["items"][0]["subtotal"] == "20.00"
        assert data["items"][1]["customizations"] == "dressing apart"

    def test_create_order_with_discount(self, test_client, order_payload):
        """Test a discount is subtracted after tax."""
        order_payload["discount"] = "8.56"

        response = test_client.post("/api/orders", json=order_payload)

        assert response.status_code == 201
        assert response.json()["total"] == "20.00"

    def test_create_order_unavailable_item(self, test_client, order_payload, seeded):
        """Test ordering an unavailable item is rejected."""
        order_payload["items"].append({"menu_item_id": seeded.paella_id, "quantity": 1})

        response = test_client.post("/api/orders", json=order_payload)

        assert response.status_code == 400
        assert "seafood paella" in response.json()["detail"]

    def test_create_order_unknown_client(self, test_client, order_payload):
        """Test an unknown client is reported as not found."""
        order_payload["client_id"] = 9999

        response = test_client.post("/api/orders", json=order_payload)

        assert response.status_code == 404

    def test_create_order_unknown_menu_item(self, test_client, order_payload):
        """Test an unknown menu item is reported as not found."""
        order_payload["items"] = [{"menu_item_id": 9999, "quantity": 1}]

        response = test_client.post("/api/orders", json=order_payload)

        assert response.status_code == 404

    def test_create_order_zero_quantity(self, test_client, order_payload):
        """Test quantities must be positive."""
        order_payload["items"][0]["quantity"] = 0

        response = test_client.post("/api/orders", json=order_payload)

        assert response.status_code == 422

    def test_create_order_without_items(self, test_client, order_payload):
        """Test an order needs at least one line."""
        order_payload["items"] = []

        response = test_client.post("/api/orders", json=order_payload)

        assert response.status_code == 422

    def test_create_order_discount_above_total(self, test_client, order_payload):
        """Test a discount larger than subtotal plus tax."""
        order_payload["discount"] = "28.57"

        response = test_client.post("/api/orders", json=order_payload)

        assert response.status_code == 422


class TestReadOrdersAPI:
    """Test order retrieval endpoints."""

    def test_get_order(self, test_client, created_order):
        """Test GET /api/orders/{id}."""
        response = test_client.get(f"/api/orders/{created_order['id']}")

        assert response.status_code == 200
        assert response.json()["order_number"] == created_order["order_number"]

    def test_get_unknown_order(self, test_client, seeded):
        """Test GET for an unknown order returns 404."""
        response = test_client.get("/api/orders/9999")

        assert response.status_code == 404
        assert "detail" in response.json()

    def test_list_orders(self, test_client, created_order):
        """Test GET /api/orders returns a page."""
        response = test_client.get("/api/orders")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["page"] == 1
        assert data["total_pages"] == 1
        assert data["orders"][0]["id"] == created_order["id"]

    def test_list_orders_status_filter(self, test_client, created_order):
        """Test filtering the listing by status."""
        response = test_client.get("/api/orders", params={"status": "delivered"})

        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_list_orders_invalid_status(self, test_client, seeded):
        """Test an unknown status filter is rejected."""
        response = test_client.get("/api/orders", params={"status": "shipped"})

        assert response.status_code == 422

    def test_statistics(self, test_client, created_order):
        """Test GET /api/orders/statistics."""
        response = test_client.get("/api/orders/statistics")

        assert response.status_code == 200
        data = response.json()
        assert data["total_orders"] == 1
        assert data["orders_by_status"] == {"pending": 1}
        assert data["revenue"] == "28.56"
        assert data["top_menu_item"]["name"] == "lasagna tray"
        assert data["top_menu_item"]["quantity"] == 2
        assert len(data["orders_by_day"]) == 1
        assert data["orders_by_day"][0]["orders"] == 1
        assert data["recurring_clients"] == []

    def test_statistics_recurring_clients(self, test_client, test_settings, order_payload, seeded):
        """Test a client with four orders is reported as recurring."""
        # Several orders in one second may draw the same random suffix
        test_settings.order_number_retries = 5
        for _ in range(4):
            assert test_client.post("/api/orders", json=order_payload).status_code == 201

        data = test_client.get("/api/orders/statistics").json()

        assert data["recurring_clients"] == [
            {
                "client_id": seeded.client_id,
                "first_name": "Dana",
                "last_name": "Reyes",
                "orders": 4,
            }
        ]
        assert sum(entry["orders"] for entry in data["orders_by_day"]) == 4


class TestOrderStatusAPI:
    """Test status changes and cancellation."""

    def test_update_status(self, test_client, created_order, order_events):
        """Test PATCH /api/orders/{id}/status publishes one event."""
        response = test_client.patch(
            f"/api/orders/{created_order['id']}/status", json={"status": "confirmed"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"
        assert len(order_events.events) == 1
        event = order_events.events[0]
        assert isinstance(event, OrderStatusChanged)
        assert event.old_status == OrderStatus.PENDING
        assert event.new_status == OrderStatus.CONFIRMED

    def test_update_status_without_value(self, test_client, created_order, order_events):
        """Test an empty status update changes nothing."""
        response = test_client.patch(f"/api/orders/{created_order['id']}/status", json={})

        assert response.status_code == 200
        assert response.json()["status"] == "pending"
        assert order_events.events == []

    def test_update_status_invalid_value(self, test_client, created_order):
        """Test an unknown status value is rejected."""
        response = test_client.patch(
            f"/api/orders/{created_order['id']}/status", json={"status": "shipped"}
        )

        assert response.status_code == 422

    def test_cancel_order(self, test_client, created_order, order_events):
        """Test PATCH /api/orders/{id}/cancel."""
        response = test_client.patch(f"/api/orders/{created_order['id']}/cancel")

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert [event.new_status for event in order_events.events] == [OrderStatus.CANCELLED]

    def test_cancel_delivered_order(self, test_client, created_order, order_events):
        """Test a delivered order cannot be cancelled."""
        order_id = created_order["id"]
        test_client.patch(f"/api/orders/{order_id}/status", json={"status": "delivered"})

        response = test_client.patch(f"/api/orders/{order_id}/cancel")

        assert response.status_code == 400
        assert len(order_events.events) == 1
        assert test_client.get(f"/api/orders/{order_id}").json()["status"] == "delivered"

    def test_cancel_unknown_order(self, test_client, seeded):
        """Test cancelling an unknown order returns 404."""
        response = test_client.patch("/api/orders/9999/cancel")

        assert response.status_code == 404
