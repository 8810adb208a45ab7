"""Tests for the Order aggregate — placement, items, status and cancellation."""

import re

import pytest
from marketplace.order.events import OrderCancelled, OrderItemsRecorded, OrderPlaced, OrderStatusChanged
from marketplace.order.order import DeliveryAddress, Order, OrderStatus, PaymentStatus
from protean.exceptions import ValidationError


def _address():
    return {
        "name": "Ada Lovelace",
        "street": "12 Analytical Way",
        "city": "London",
        "state": "LDN",
        "zip_code": "N1 9GU",
        "country": "UK",
        "phone": "+44-20-7946-0000",
        "email": "ada@example.com",
        "notes": "Side door",
    }


def _place(**overrides):
    params = {
        "customer_id": "cust-001",
        "store_id": "store-001",
        "store_location_id": "loc-001",
        "subtotal": 20.0,
        "tax_amount": 2.0,
        "delivery_fee": 4.0,
        "payment_intent_id": "pi_001",
        "delivery_address": _address(),
    }
    params.update(overrides)
    return Order.place(**params)


class TestOrderPlacement:
    def test_total_is_sum_of_amounts(self):
        order = _place()
        assert order.total == 26.0

    def test_placed_order_is_pending_and_paid(self):
        order = _place()
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PAID.value
        assert order.payment_method == "card"
        assert order.fulfillment_type == "delivery"

    def test_order_number_format(self):
        order = _place()
        assert re.fullmatch(r"ORD-\d{8}-[0-9A-F]{8}", order.order_number)

    def test_order_numbers_are_unique(self):
        assert _place().order_number != _place().order_number

    def test_delivery_address_is_snapshotted(self):
        order = _place()
        assert isinstance(order.delivery_address, DeliveryAddress)
        assert order.delivery_address.street == "12 Analytical Way"
        assert order.delivery_address.notes == "Side door"

    def test_location_is_optional(self):
        order = _place(store_location_id=None)
        assert order.store_location_id is None

    def test_raises_order_placed(self):
        order = _place()
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.order_id == str(order.id)
        assert event.order_number == order.order_number
        assert event.total == 26.0

    def test_address_without_street_is_rejected(self):
        address = _address()
        address.pop("street")
        with pytest.raises(ValidationError):
            _place(delivery_address=address)


class TestOrderItems:
    def test_record_items_computes_line_totals(self):
        order = _place()
        order.record_items(
            [
                {
                    "product_id": "prod-1",
                    "inventory_id": "inv-1",
                    "product_name": "Tea",
                    "quantity": 2,
                    "unit_price": 10.0,
                    "tax_amount": 1.0,
                }
            ]
        )
        assert len(order.items) == 1
        assert order.items[0].total_price == 22.0
        assert order.items[0].inventory_id == "inv-1"

    def test_record_items_raises_event(self):
        order = _place()
        order._events.clear()
        order.record_items(
            [
                {"product_id": "prod-1", "product_name": "Tea", "quantity": 1, "unit_price": 3.0},
                {"product_id": "prod-2", "product_name": "Cake", "quantity": 1, "unit_price": 4.0},
            ]
        )
        assert isinstance(order._events[-1], OrderItemsRecorded)
        assert order._events[-1].item_count == 2

    def test_rejected_line_leaves_no_items(self):
        order = _place()
        with pytest.raises(ValidationError):
            order.record_items(
                [
                    {"product_id": "prod-1", "product_name": "Tea", "quantity": 1, "unit_price": 3.0},
                    {"product_id": "prod-2", "product_name": "Cake", "quantity": 0, "unit_price": 4.0},
                ]
            )
        assert len(order.items) == 0


class TestOrderStatus:
    def test_change_status(self):
        order = _place()
        order.change_status("confirmed")
        assert order.status == OrderStatus.CONFIRMED.value
        assert isinstance(order._events[-1], OrderStatusChanged)
        assert order._events[-1].previous_status == "pending"

    def test_status_can_be_set_directly(self):
        order = _place()
        order.change_status("out_for_delivery")
        assert order.status == OrderStatus.OUT_FOR_DELIVERY.value

    def test_unknown_status_rejected(self):
        order = _place()
        with pytest.raises(ValidationError) as exc_info:
            order.change_status("lost")
        assert "status" in exc_info.value.messages

    def test_cancelled_order_is_frozen(self):
        order = _place()
        order.cancel("Changed mind")
        with pytest.raises(ValidationError):
            order.change_status("confirmed")

    def test_cancelled_is_not_a_settable_status(self):
        order = _place()
        with pytest.raises(ValidationError) as exc_info:
            order.change_status("cancelled")
        assert "status" in exc_info.value.messages
        assert order.status == OrderStatus.PENDING.value
        assert order.cancelled_at is None


class TestOrderCancellation:
    def test_cancel_records_reason_and_time(self):
        order = _place()
        order.cancel("Out of stock")
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancel_reason == "Out of stock"
        assert order.cancelled_at is not None
        assert isinstance(order._events[-1], OrderCancelled)

    def test_cancel_without_reason(self):
        order = _place()
        order.cancel()
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancel_reason is None

    @pytest.mark.parametrize("status", ["delivered", "completed"])
    def test_cannot_cancel_after_delivery(self, status):
        order = _place()
        order.change_status(status)
        with pytest.raises(ValidationError):
            order.cancel("Too late")

    def test_cannot_cancel_twice(self):
        order = _place()
        order.cancel()
        with pytest.raises(ValidationError):
            order.cancel()
