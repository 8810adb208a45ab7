"""Delivery aggregate (CQRS) — moving one order from a store to the customer.

Exactly zero or one delivery exists per order. It is opened at checkout with
fixed time estimates and handed to the auto-assignment procedure; drivers
and dispatchers move it along afterwards.

State Machine:
    PENDING → ASSIGNED → PICKED_UP → IN_TRANSIT → DELIVERED | FAILED
    READY_FOR_PICKUP → PICKED_UP
    anything not finished → CANCELLED
Order status changes made by the store are mirrored onto the delivery
without passing through the driver state machine.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String, Text, ValueObject

from marketplace.dispatch.events import DeliveryCreated, DeliveryStatusChanged, DriverAssigned
from marketplace.domain import marketplace

PICKUP_ESTIMATE = timedelta(minutes=30)
DELIVERY_ESTIMATE = timedelta(minutes=60)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class DeliveryStatus(Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    READY_FOR_PICKUP = "ready_for_pickup"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    FAILED = "failed"
    CANCELLED = "cancelled"


_DRIVER_TRANSITIONS = {
    DeliveryStatus.ASSIGNED: {DeliveryStatus.PICKED_UP},
    DeliveryStatus.READY_FOR_PICKUP: {DeliveryStatus.PICKED_UP},
    DeliveryStatus.PICKED_UP: {DeliveryStatus.IN_TRANSIT},
    DeliveryStatus.IN_TRANSIT: {DeliveryStatus.DELIVERED, DeliveryStatus.FAILED},
}

_ASSIGNABLE_STATUSES = {
    DeliveryStatus.PENDING,
    DeliveryStatus.ASSIGNED,
    DeliveryStatus.READY_FOR_PICKUP,
}

_FINISHED_STATUSES = {
    DeliveryStatus.DELIVERED,
    DeliveryStatus.FAILED,
    DeliveryStatus.CANCELLED,
}

# Order status -> delivery status mirrored onto the delivery
ORDER_STATUS_CASCADE = {
    "ready_for_pickup": DeliveryStatus.READY_FOR_PICKUP,
    "out_for_delivery": DeliveryStatus.IN_TRANSIT,
    "delivered": DeliveryStatus.DELIVERED,
    "completed": DeliveryStatus.DELIVERED,
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Delivery")
class PickupAddress:
    street = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)


@marketplace.value_object(part_of="Delivery")
class DropoffAddress:
    name = String(max_length=255)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    phone = String(max_length=50)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Delivery:
    order_id = Identifier(required=True)
    delivery_company_id = Identifier(required=True)
    driver_id = Identifier()
    status = String(
        max_length=50,
        choices=DeliveryStatus,
        default=DeliveryStatus.PENDING.value,
    )
    delivery_fee = Float(default=0.0)
    pickup_address = ValueObject(PickupAddress)
    dropoff_address = ValueObject(DropoffAddress)
    recipient_name = String(max_length=255)
    customer_notes = Text()
    estimated_pickup_time = DateTime()
    estimated_delivery_time = DateTime()
    assigned_at = DateTime()
    picked_up_at = DateTime()
    actual_delivery_time = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def open(
        cls,
        order_id: str,
        delivery_company_id: str,
        delivery_fee: float,
        pickup_address: dict | None,
        dropoff_address: dict,
        recipient_name: str | None = None,
        customer_notes: str | None = None,
    ):
        """Open a pending delivery with the fixed pickup and delivery estimates."""
        now = datetime.now(UTC)
        delivery = cls(
            order_id=order_id,
            delivery_company_id=delivery_company_id,
            status=DeliveryStatus.PENDING.value,
            delivery_fee=delivery_fee,
            pickup_address=PickupAddress(**pickup_address) if pickup_address else None,
            dropoff_address=DropoffAddress(**dropoff_address),
            recipient_name=recipient_name,
            customer_notes=customer_notes,
            estimated_pickup_time=now + PICKUP_ESTIMATE,
            estimated_delivery_time=now + DELIVERY_ESTIMATE,
            created_at=now,
            updated_at=now,
        )
        delivery.raise_(
            DeliveryCreated(
                delivery_id=str(delivery.id),
                order_id=str(order_id),
                delivery_company_id=str(delivery_company_id),
                delivery_fee=delivery_fee,
                estimated_pickup_time=delivery.estimated_pickup_time,
                estimated_delivery_time=delivery.estimated_delivery_time,
                created_at=now,
            )
        )
        return delivery

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _set_status(self, target: DeliveryStatus, now: datetime) -> None:
        previous = self.status
        self.status = target.value
        self.updated_at = now
        self.raise_(
            DeliveryStatusChanged(
                delivery_id=str(self.id),
                order_id=str(self.order_id),
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------
    def assign_driver(self, driver_id: str) -> None:
        """Manually hand the delivery to a driver."""
        current = DeliveryStatus(self.status)
        if current not in _ASSIGNABLE_STATUSES:
            raise ValidationError({"status": [f"Cannot assign a driver to a delivery in {current.value} state"]})

        now = datetime.now(UTC)
        self.driver_id = driver_id
        self.assigned_at = now
        self._set_status(DeliveryStatus.ASSIGNED, now)
        self.raise_(
            DriverAssigned(
                delivery_id=str(self.id),
                driver_id=str(driver_id),
                assigned_at=now,
            )
        )

    def advance(self, new_status: str) -> None:
        """Move the delivery along the driver's workflow."""
        try:
            target = DeliveryStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown delivery status: {new_status}"]})

        current = DeliveryStatus(self.status)
        if target not in _DRIVER_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        if target == DeliveryStatus.PICKED_UP:
            self.picked_up_at = now
        elif target in (DeliveryStatus.DELIVERED, DeliveryStatus.FAILED):
            self.actual_delivery_time = now
        self._set_status(target, now)

    # -------------------------------------------------------------------
    # Order-driven changes
    # -------------------------------------------------------------------
    def follow_order_status(self, order_status: str) -> bool:
        """Mirror a store-side order status change.

        Returns True when the delivery changed.
        """
        target = ORDER_STATUS_CASCADE.get(order_status)
        if target is None or DeliveryStatus(self.status) == DeliveryStatus.CANCELLED:
            return False

        now = datetime.now(UTC)
        if target == DeliveryStatus.DELIVERED:
            self.actual_delivery_time = now
        self._set_status(target, now)
        return True

    def cancel(self) -> bool:
        """Cancel the delivery unless it is already finished.

        Returns True when the delivery changed.
        """
        if DeliveryStatus(self.status) in _FINISHED_STATUSES:
            return False
        self._set_status(DeliveryStatus.CANCELLED, datetime.now(UTC))
        return True
