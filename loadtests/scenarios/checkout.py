"""Checkout load test scenario.

One stateful SequentialTaskSet journey: a tenant sets up a delivery company
and two stores, then a customer checks out a cart spanning both stores and
the stores move the resulting orders along.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    cart_line_data,
    checkout_data,
    delivery_company_data,
    store_location_data,
    unique_id,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CheckoutState, MarketplaceState


class CheckoutJourney(SequentialTaskSet):
    """Set up stores -> Checkout -> Read order -> Ready for pickup -> Assign driver.

    Generates events: OrderPlaced (x2), OrderItemsRecorded (x2),
    DeliveryCreated (x2), OrderStatusChanged, DeliveryStatusChanged,
    DriverAssigned.
    """

    def on_start(self):
        self.tenant = MarketplaceState()
        self.state = CheckoutState(customer_id=unique_id("cust"))

    @task
    def register_delivery_company(self):
        with self.client.post(
            "/delivery-companies",
            json=delivery_company_data(),
            catch_response=True,
            name="POST /delivery-companies",
        ) as resp:
            if resp.status_code == 201:
                self.tenant.delivery_company_id = resp.json()["id"]
            else:
                resp.failure(f"Register company failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def set_up_stores(self):
        for _ in range(2):
            store_id = unique_id("store")
            with self.client.post(
                f"/stores/{store_id}/locations",
                json=store_location_data(),
                catch_response=True,
                name="POST /stores/{id}/locations",
            ) as resp:
                if resp.status_code == 201:
                    self.tenant.store_ids.append(store_id)
                    self.tenant.location_ids[store_id] = resp.json()["id"]
                else:
                    resp.failure(f"Add location failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

            self.client.put(
                f"/stores/{store_id}/delivery-preferences",
                json={"delivery_company_id": self.tenant.delivery_company_id, "priority": 1},
                name="PUT /stores/{id}/delivery-preferences",
            )

    @task
    def checkout(self):
        first, second = self.tenant.store_ids
        lines = [
            cart_line_data(first, "First Store", self.tenant.location_ids[first]),
            cart_line_data(first, "First Store", self.tenant.location_ids[first]),
            cart_line_data(second, "Second Store"),
        ]
        with self.client.post(
            "/checkout",
            json=checkout_data(self.state.customer_id, lines),
            catch_response=True,
            name="POST /checkout",
        ) as resp:
            if resp.status_code == 201:
                orders = resp.json()["orders"]
                self.state.order_ids = [order["id"] for order in orders]
                self.state.delivery_ids = [order["delivery_id"] for order in orders if order.get("delivery_id")]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def read_order(self):
        for order_id in self.state.order_ids:
            self.client.get(f"/orders/{order_id}", name="GET /orders/{id}")
        self.client.get(f"/customers/{self.state.customer_id}/orders", name="GET /customers/{id}/orders")

    @task
    def ready_for_pickup(self):
        order_id = random.choice(self.state.order_ids)
        with self.client.put(
            f"/orders/{order_id}/status",
            json={"status": "ready_for_pickup"},
            catch_response=True,
            name="PUT /orders/{id}/status",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Status update failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def assign_driver(self):
        for delivery_id in self.state.delivery_ids:
            with self.client.put(
                f"/deliveries/{delivery_id}/assign",
                json={"driver_id": unique_id("driver")},
                catch_response=True,
                name="PUT /deliveries/{id}/assign",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Assign driver failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class CheckoutUser(HttpUser):
    """Simulates tenants and customers checking out multi-store carts."""

    tasks = [CheckoutJourney]
    wait_time = between(1, 3)
