"""Tests for the Delivery aggregate — opening, dispatch and status mirroring."""

import pytest
from marketplace.dispatch.delivery import (
    DELIVERY_ESTIMATE,
    PICKUP_ESTIMATE,
    Delivery,
    DeliveryStatus,
)
from marketplace.dispatch.events import DeliveryCreated, DeliveryStatusChanged, DriverAssigned
from protean.exceptions import ValidationError


def _dropoff():
    return {
        "name": "Ada Lovelace",
        "street": "12 Analytical Way",
        "city": "London",
        "state": "LDN",
        "zip_code": "N1 9GU",
        "phone": "+44-20-7946-0000",
    }


def _open(pickup=None):
    return Delivery.open(
        order_id="ord-001",
        delivery_company_id="co-001",
        delivery_fee=4.0,
        pickup_address=pickup,
        dropoff_address=_dropoff(),
        recipient_name="Ada Lovelace",
        customer_notes="Side door",
    )


def _advance_to_in_transit(delivery):
    delivery.assign_driver("drv-001")
    delivery.advance("picked_up")
    delivery.advance("in_transit")
    return delivery


class TestDeliveryOpening:
    def test_opens_pending_with_estimates(self):
        delivery = _open()
        assert delivery.status == DeliveryStatus.PENDING.value
        assert delivery.estimated_pickup_time - delivery.created_at == PICKUP_ESTIMATE
        assert delivery.estimated_delivery_time - delivery.created_at == DELIVERY_ESTIMATE

    def test_pickup_address_is_optional(self):
        assert _open().pickup_address is None

    def test_pickup_address_from_location(self):
        delivery = _open(pickup={"street": "1 Shop St", "city": "London", "state": "LDN", "zip_code": "E1"})
        assert delivery.pickup_address.street == "1 Shop St"

    def test_dropoff_and_notes(self):
        delivery = _open()
        assert delivery.dropoff_address.street == "12 Analytical Way"
        assert delivery.recipient_name == "Ada Lovelace"
        assert delivery.customer_notes == "Side door"
        assert delivery.delivery_fee == 4.0

    def test_raises_delivery_created(self):
        delivery = _open()
        assert isinstance(delivery._events[0], DeliveryCreated)
        assert delivery._events[0].order_id == "ord-001"


class TestDriverAssignment:
    def test_assign_driver(self):
        delivery = _open()
        delivery.assign_driver("drv-001")
        assert delivery.status == DeliveryStatus.ASSIGNED.value
        assert delivery.driver_id == "drv-001"
        assert delivery.assigned_at is not None
        assert isinstance(delivery._events[-1], DriverAssigned)

    def test_reassign_driver(self):
        delivery = _open()
        delivery.assign_driver("drv-001")
        delivery.assign_driver("drv-002")
        assert delivery.driver_id == "drv-002"

    def test_cannot_assign_after_pickup(self):
        delivery = _open()
        delivery.assign_driver("drv-001")
        delivery.advance("picked_up")
        with pytest.raises(ValidationError):
            delivery.assign_driver("drv-002")


class TestDriverProgress:
    def test_full_progression(self):
        delivery = _advance_to_in_transit(_open())
        delivery.advance("delivered")
        assert delivery.status == DeliveryStatus.DELIVERED.value
        assert delivery.picked_up_at is not None
        assert delivery.actual_delivery_time is not None

    def test_failed_delivery(self):
        delivery = _advance_to_in_transit(_open())
        delivery.advance("failed")
        assert delivery.status == DeliveryStatus.FAILED.value
        assert delivery.actual_delivery_time is not None

    def test_cannot_pick_up_unassigned(self):
        with pytest.raises(ValidationError):
            _open().advance("picked_up")

    def test_cannot_skip_transit(self):
        delivery = _open()
        delivery.assign_driver("drv-001")
        delivery.advance("picked_up")
        with pytest.raises(ValidationError):
            delivery.advance("delivered")

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            _open().advance("teleported")

    def test_status_change_event(self):
        delivery = _open()
        delivery.assign_driver("drv-001")
        events = [e for e in delivery._events if isinstance(e, DeliveryStatusChanged)]
        assert events[-1].previous_status == "pending"
        assert events[-1].new_status == "assigned"


class TestOrderStatusMirroring:
    @pytest.mark.parametrize(
        "order_status,expected",
        [
            ("ready_for_pickup", "ready_for_pickup"),
            ("out_for_delivery", "in_transit"),
            ("delivered", "delivered"),
            ("completed", "delivered"),
        ],
    )
    def test_mirrored_statuses(self, order_status, expected):
        delivery = _open()
        assert delivery.follow_order_status(order_status) is True
        assert delivery.status == expected

    def test_delivered_sets_actual_time(self):
        delivery = _open()
        delivery.follow_order_status("delivered")
        assert delivery.actual_delivery_time is not None

    @pytest.mark.parametrize("order_status", ["confirmed", "processing", "pending"])
    def test_other_statuses_leave_delivery_alone(self, order_status):
        delivery = _open()
        assert delivery.follow_order_status(order_status) is False
        assert delivery.status == DeliveryStatus.PENDING.value

    def test_cancelled_delivery_is_not_changed(self):
        delivery = _open()
        delivery.cancel()
        assert delivery.follow_order_status("delivered") is False
        assert delivery.status == DeliveryStatus.CANCELLED.value


class TestDeliveryCancellation:
    def test_cancel_pending(self):
        delivery = _open()
        assert delivery.cancel() is True
        assert delivery.status == DeliveryStatus.CANCELLED.value

    def test_finished_delivery_stays(self):
        delivery = _advance_to_in_transit(_open())
        delivery.advance("delivered")
        assert delivery.cancel() is False
        assert delivery.status == DeliveryStatus.DELIVERED.value
