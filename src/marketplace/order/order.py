"""Order aggregate (CQRS) — one store's share of a checkout.

An order is placed once per (store, location) group of a cart. Its money
fields are locked at placement: the total is the sum of subtotal, tax and
delivery fee and is never recomputed. Orders are never deleted, only
cancelled.

Statuses:
    PENDING → CONFIRMED → PROCESSING → READY_FOR_PICKUP → OUT_FOR_DELIVERY
    → DELIVERED → COMPLETED, and CANCELLED from anything not yet delivered.
Status changes other than cancellation are set directly by store staff;
cancellation goes through `cancel` only, and cancelled orders are frozen.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from marketplace.domain import marketplace
from marketplace.order.events import (
    OrderCancelled,
    OrderItemsRecorded,
    OrderPlaced,
    OrderStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    READY_FOR_PICKUP = "ready_for_pickup"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class FulfillmentType(Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


_NON_CANCELLABLE_STATUSES = {
    OrderStatus.DELIVERED,
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED,
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class DeliveryAddress:
    """Snapshot of the shipping address taken at checkout.

    Later changes to the customer's address book never reach a placed order.
    """

    name = String(max_length=255)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    country = String(max_length=100)
    phone = String(max_length=50)
    email = String(max_length=255)
    notes = String(max_length=1000)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    """A cart line captured on the order, with the product name denormalized."""

    product_id = Identifier(required=True)
    inventory_id = Identifier()
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    tax_amount = Float(default=0.0)
    total_price = Float(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    customer_id = Identifier(required=True)
    store_id = Identifier(required=True)
    store_location_id = Identifier()
    order_number = String(required=True, max_length=50)
    status = String(
        max_length=50,
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    subtotal = Float(default=0.0)
    tax_amount = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    total = Float(default=0.0)
    payment_status = String(max_length=50, choices=PaymentStatus, default=PaymentStatus.PAID.value)
    payment_method = String(max_length=50, default="card")
    payment_intent_id = String(max_length=255)
    fulfillment_type = String(
        max_length=50,
        choices=FulfillmentType,
        default=FulfillmentType.DELIVERY.value,
    )
    delivery_address = ValueObject(DeliveryAddress)
    customer_notes = Text()
    items = HasMany(OrderItem)
    cancel_reason = String(max_length=500)
    cancelled_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id: str,
        store_id: str,
        store_location_id: str | None,
        subtotal: float,
        tax_amount: float,
        delivery_fee: float,
        payment_intent_id: str,
        delivery_address: dict,
        customer_notes: str | None = None,
    ):
        """Place a pending, paid order for one store.

        The total is derived here, once, from the three amounts.
        """
        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            store_id=store_id,
            store_location_id=store_location_id,
            order_number=_next_order_number(now),
            status=OrderStatus.PENDING.value,
            subtotal=subtotal,
            tax_amount=tax_amount,
            delivery_fee=delivery_fee,
            total=subtotal + tax_amount + delivery_fee,
            payment_status=PaymentStatus.PAID.value,
            payment_method="card",
            payment_intent_id=payment_intent_id,
            fulfillment_type=FulfillmentType.DELIVERY.value,
            delivery_address=DeliveryAddress(**delivery_address),
            customer_notes=customer_notes,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                store_id=str(store_id),
                store_location_id=str(store_location_id) if store_location_id else None,
                total=order.total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Line items
    # -------------------------------------------------------------------
    def record_items(self, items_data: list[dict]) -> None:
        """Attach the line items of the order.

        All items are built before any is attached, so a rejected line
        leaves the order without items rather than with a partial set.
        """
        items = [
            OrderItem(
                product_id=data["product_id"],
                inventory_id=data.get("inventory_id"),
                product_name=data["product_name"],
                quantity=data["quantity"],
                unit_price=data["unit_price"],
                tax_amount=data.get("tax_amount", 0.0),
                total_price=(data["unit_price"] + data.get("tax_amount", 0.0)) * data["quantity"],
            )
            for data in items_data
        ]
        now = datetime.now(UTC)
        for item in items:
            self.add_items(item)
        self.updated_at = now
        self.raise_(
            OrderItemsRecorded(
                order_id=str(self.id),
                item_count=len(items),
                recorded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Status changes
    # -------------------------------------------------------------------
    def change_status(self, new_status: str) -> None:
        """Move the order to `new_status`."""
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {new_status}"]})

        current = OrderStatus(self.status)
        if current == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Cancelled orders cannot change status"]})
        if target == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Use order cancellation to cancel an order"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    def cancel(self, reason: str | None = None) -> None:
        """Cancel the order (only before it is delivered)."""
        current = OrderStatus(self.status)
        if current in _NON_CANCELLABLE_STATUSES:
            raise ValidationError({"status": [f"Cannot cancel order in {current.value} state"]})

        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.cancel_reason = reason
        self.cancelled_at = now
        self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=current.value,
                reason=reason,
                cancelled_at=now,
            )
        )


def _next_order_number(now: datetime) -> str:
    return f"ORD-{now:%Y%m%d}-{uuid4().hex[:8].upper()}"
