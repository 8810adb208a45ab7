"""Dispatch domain events — facts about deliveries and their drivers."""

from protean.fields import DateTime, Float, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Delivery")
class DeliveryCreated:
    """A delivery record was opened for an order."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    delivery_company_id = Identifier(required=True)
    delivery_fee = Float()
    estimated_pickup_time = DateTime(required=True)
    estimated_delivery_time = DateTime(required=True)
    created_at = DateTime(required=True)


@marketplace.event(part_of="Delivery")
class DriverAssigned:
    """A driver was assigned to a delivery by a dispatcher."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    driver_id = Identifier(required=True)
    assigned_at = DateTime(required=True)


@marketplace.event(part_of="Delivery")
class DeliveryStatusChanged:
    """A delivery moved to a new status."""

    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
