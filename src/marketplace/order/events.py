"""Order domain events — facts about order placement and lifecycle."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """An order was placed for one store as part of a checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    store_id = Identifier(required=True)
    store_location_id = Identifier()
    total = Float()
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderItemsRecorded:
    """The line items of an order were recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_count = Integer(required=True)
    recorded_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """An order moved to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCancelled:
    """An order was cancelled."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = String()
    cancelled_at = DateTime(required=True)
