"""Checkout fan-out: one order per (store, location) group of a cart.

For every group, in the order the groups first appear in the cart:

    resolve location → store order → store items → decrement inventory
    → open delivery (+ auto-assign) → notify

Only a failure to store an order ends the checkout; every later step is
best-effort and logged. The steps are separate writes, not a transaction:
orders stored for earlier groups stay in place when a later group fails,
and a checkout can leave an order without items, stock decrements or a
delivery. Calling it twice with the same cart places two sets of orders.
"""

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from marketplace.checkout.cart import (
    CartLineItem,
    CheckoutResult,
    PlacedOrder,
    ShippingAddress,
    StoreGroup,
    group_line_items,
)
from marketplace.dispatch.dispatcher import dispatch_delivery
from marketplace.location.resolver import resolve_fulfillment_location
from marketplace.notification.emitter import notify_new_order
from marketplace.order.order import Order
from marketplace.procedures import get_procedures
from marketplace.utils.logging import log_context

logger = structlog.get_logger(__name__)

DEFAULT_CHECKOUT_ERROR = "Failed to create orders"


class CheckoutError(Exception):
    """An order could not be stored; the checkout stops here."""


def place_orders(
    items: list[CartLineItem],
    shipping_address: ShippingAddress,
    customer_id: str,
    payment_intent_id: str,
) -> CheckoutResult:
    """Split a paid cart into per-store orders.

    Returns a successful result listing every order created, or a failed
    result carrying a single message when any group's order could not be
    stored.
    """
    if not items:
        logger.info("Checkout with an empty cart, nothing to place", customer_id=customer_id)
        return CheckoutResult(success=True, orders=[])

    groups = group_line_items(items)
    logger.info(
        "Placing orders",
        customer_id=customer_id,
        item_count=len(items),
        group_count=len(groups),
    )

    placed: list[PlacedOrder] = []
    try:
        with log_context(customer_id=customer_id, payment_intent_id=payment_intent_id):
            for group in groups:
                placed.append(_place_group(group, shipping_address, customer_id, payment_intent_id))
    except Exception as exc:
        logger.error(
            "Checkout failed",
            customer_id=customer_id,
            orders_already_placed=[order.id for order in placed],
            error=str(exc),
        )
        return CheckoutResult(success=False, orders=[], error=str(exc) or DEFAULT_CHECKOUT_ERROR)

    return CheckoutResult(success=True, orders=placed)


def _place_group(
    group: StoreGroup,
    shipping_address: ShippingAddress,
    customer_id: str,
    payment_intent_id: str,
) -> PlacedOrder:
    location = resolve_fulfillment_location(
        store_id=group.store_id,
        product_ids=group.product_ids,
        location_id=group.location_id,
        latitude=shipping_address.latitude,
        longitude=shipping_address.longitude,
    )

    order = _store_order(group, location.id if location else None, shipping_address, customer_id, payment_intent_id)
    _store_items(order, group.items)
    _decrement_inventory(group.items)

    delivery_id = None
    try:
        delivery = dispatch_delivery(order, location, shipping_address)
        delivery_id = str(delivery.id) if delivery else None
    except Exception as exc:
        # The order stands; a delivery can still be opened by hand
        logger.error("Error creating delivery", order_id=str(order.id), error=str(exc))

    try:
        notify_new_order(customer_id, order)
    except Exception as exc:
        logger.error("Error creating notification", order_id=str(order.id), error=str(exc))

    return PlacedOrder(
        id=str(order.id),
        order_number=order.order_number,
        store_id=group.store_id,
        store_name=group.store_name,
        total=order.total,
        location_id=str(location.id) if location else None,
        delivery_id=delivery_id,
    )


def _store_order(
    group: StoreGroup,
    location_id: str | None,
    shipping_address: ShippingAddress,
    customer_id: str,
    payment_intent_id: str,
) -> Order:
    try:
        order = Order.place(
            customer_id=customer_id,
            store_id=group.store_id,
            store_location_id=str(location_id) if location_id else None,
            subtotal=group.subtotal,
            tax_amount=group.taxes,
            delivery_fee=group.delivery_fee,
            payment_intent_id=payment_intent_id,
            delivery_address=shipping_address.order_snapshot(),
            customer_notes=shipping_address.delivery_notes or None,
        )
        current_domain.repository_for(Order).add(order)
    except Exception as exc:
        logger.error("Error creating order", store_id=group.store_id, error=str(exc))
        raise CheckoutError(f"Failed to create order for store {group.store_name}: {exc}") from exc

    logger.info(
        "Order created",
        order_id=str(order.id),
        order_number=order.order_number,
        store_id=group.store_id,
        store_location_id=location_id,
        total=order.total,
    )
    return order


def _store_items(order: Order, items: list[CartLineItem]) -> None:
    """Attach the cart lines to the order.

    A rejected item set is logged and the order is kept without items. Any
    other error propagates and ends the checkout.
    """
    try:
        order.record_items(
            [
                {
                    "product_id": item.product_id,
                    "inventory_id": item.inventory_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "tax_amount": item.unit_tax,
                }
                for item in items
            ]
        )
    except ValidationError as exc:
        logger.error("Error creating order items", order_id=str(order.id), error=str(exc.messages))
        return

    current_domain.repository_for(Order).add(order)


def _decrement_inventory(items: list[CartLineItem]) -> None:
    procedures = get_procedures()
    for item in items:
        # Nothing was sold on a line without a positive quantity
        if not item.inventory_id or item.quantity < 1:
            continue
        try:
            procedures.decrement_inventory(item.inventory_id, item.quantity)
        except Exception as exc:
            logger.error(
                "Error decrementing inventory",
                inventory_id=item.inventory_id,
                quantity=item.quantity,
                error=str(exc),
            )
