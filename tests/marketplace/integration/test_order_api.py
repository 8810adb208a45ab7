"""Integration tests for the order endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from marketplace.api import (
    checkout_router,
    company_router,
    customer_router,
    order_router,
    register_error_handlers,
    store_router,
)


@pytest.fixture()
def client():
    app = FastAPI()
    for router in (checkout_router, order_router, customer_router, store_router, company_router):
        app.include_router(router)
    register_error_handlers(app)
    return TestClient(app)


def _checkout(client, customer_id="cust-1", store_ids=("S1",)):
    payload = {
        "customer_id": customer_id,
        "payment_intent_id": "pi_orders",
        "shipping_address": {
            "name": "Edsger",
            "email": "edsger@example.com",
            "phone": "555-0166",
            "street": "10 Goto Ln",
            "city": "Austin",
            "state": "TX",
            "zip_code": "78701",
            "country": "US",
        },
        "items": [
            {
                "product_id": f"prod-{store_id}",
                "product_name": "Semaphore",
                "store_id": store_id,
                "store_name": store_id,
                "unit_price": 3.0,
                "quantity": 2,
            }
            for store_id in store_ids
        ],
    }
    return client.post("/checkout", json=payload).json()["orders"]


class TestOrderDetail:
    def test_get_order(self, client):
        (placed,) = _checkout(client)
        response = client.get(f"/orders/{placed['id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["order_number"] == placed["order_number"]
        assert data["total"] == 6.0
        assert len(data["items"]) == 1

    def test_unknown_order_is_404(self, client):
        response = client.get("/orders/does-not-exist")
        assert response.status_code == 404
        assert "error" in response.json()


class TestOrderLists:
    def test_customer_orders(self, client):
        _checkout(client, "cust-1", ("S1", "S2"))
        _checkout(client, "cust-2", ("S1",))
        response = client.get("/customers/cust-1/orders")
        assert response.status_code == 200
        assert len(response.json()) == 2

    def test_store_orders_with_status(self, client):
        (first,) = _checkout(client, "cust-1", ("S1",))
        _checkout(client, "cust-2", ("S1",))
        client.put(f"/orders/{first['id']}/status", json={"status": "confirmed"})

        response = client.get("/stores/S1/orders", params={"status": "confirmed"})

        assert [o["id"] for o in response.json()] == [first["id"]]


class TestOrderStatus:
    def test_update_status(self, client):
        (placed,) = _checkout(client)
        response = client.put(f"/orders/{placed['id']}/status", json={"status": "processing"})
        assert response.status_code == 200
        assert response.json() == {"status": "processing"}
        assert client.get(f"/orders/{placed['id']}").json()["status"] == "processing"

    def test_unknown_status_is_422(self, client):
        (placed,) = _checkout(client)
        response = client.put(f"/orders/{placed['id']}/status", json={"status": "misplaced"})
        assert response.status_code == 422
        assert "status" in response.json()["error"]

    def test_cancelled_via_status_is_422(self, client):
        (placed,) = _checkout(client)
        response = client.put(f"/orders/{placed['id']}/status", json={"status": "cancelled"})
        assert response.status_code == 422
        assert client.get(f"/orders/{placed['id']}").json()["status"] == "pending"

    def test_delivery_follows_status(self, client):
        client.post("/delivery-companies", json={"name": "Dijkstra Dispatch"})
        (placed,) = _checkout(client)
        client.put(f"/orders/{placed['id']}/status", json={"status": "out_for_delivery"})
        assert client.get(f"/orders/{placed['id']}").json()["delivery"]["status"] == "in_transit"


class TestCancelOrder:
    def test_cancel(self, client):
        client.post("/delivery-companies", json={"name": "Dijkstra Dispatch"})
        (placed,) = _checkout(client)
        response = client.put(f"/orders/{placed['id']}/cancel", json={"reason": "Duplicate"})
        assert response.status_code == 200

        data = client.get(f"/orders/{placed['id']}").json()
        assert data["status"] == "cancelled"
        assert data["cancel_reason"] == "Duplicate"
        assert data["delivery"]["status"] == "cancelled"

    def test_cancel_delivered_is_422(self, client):
        (placed,) = _checkout(client)
        client.put(f"/orders/{placed['id']}/status", json={"status": "delivered"})
        response = client.put(f"/orders/{placed['id']}/cancel", json={})
        assert response.status_code == 422
