"""Delivery dispatch — choosing a delivery company and opening the delivery.

Company selection, in order:

    1. the store's enabled preferences, lowest priority first, first whose
       company is active
    2. any active company
    3. nobody: no delivery is opened and None is returned

Once the delivery is stored, the auto_assign_delivery procedure is asked to
find a driver. If that fails the delivery simply stays unassigned until a
dispatcher picks it up by hand.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.checkout.cart import ShippingAddress
from marketplace.dispatch.company import DeliveryCompany, StoreDeliveryPreference
from marketplace.dispatch.delivery import Delivery
from marketplace.location.location import StoreLocation
from marketplace.order.order import Order
from marketplace.procedures import ProcedureError, get_procedures

logger = structlog.get_logger(__name__)


def _preferred_company_id(store_id: str) -> str | None:
    preferences = (
        current_domain.repository_for(StoreDeliveryPreference)
        ._dao.query.filter(store_id=store_id, is_enabled=True)
        .order_by("priority")
        .all()
        .items
    )

    company_repo = current_domain.repository_for(DeliveryCompany)
    for preference in preferences:
        try:
            company = company_repo.get(preference.delivery_company_id)
        except ObjectNotFoundError:
            continue
        if company.is_active:
            return str(preference.delivery_company_id)
    return None


def _any_active_company_id() -> str | None:
    results = current_domain.repository_for(DeliveryCompany)._dao.query.filter(is_active=True).limit(1).all()
    return str(results.first.id) if results.items else None


def select_delivery_company(store_id: str) -> str | None:
    """Return the id of the company that should deliver for this store."""
    return _preferred_company_id(store_id) or _any_active_company_id()


def dispatch_delivery(
    order: Order,
    location: StoreLocation | None,
    shipping_address: ShippingAddress,
) -> Delivery | None:
    """Open the delivery of a freshly placed order.

    Args:
        order: The placed order; its delivery fee is carried over.
        location: The fulfilling location, used as the pickup address.
        shipping_address: The checkout address, used as the drop-off.

    Returns:
        The stored delivery, or None when no delivery company is available.
        Errors while storing the delivery propagate to the caller.
    """
    company_id = select_delivery_company(str(order.store_id))
    if company_id is None:
        logger.warning("No delivery company available for order", order_id=str(order.id))
        return None

    delivery = Delivery.open(
        order_id=str(order.id),
        delivery_company_id=company_id,
        delivery_fee=order.delivery_fee,
        pickup_address=location.pickup_snapshot() if location else None,
        dropoff_address=shipping_address.dropoff_snapshot(),
        recipient_name=shipping_address.name,
        customer_notes=shipping_address.delivery_notes,
    )
    current_domain.repository_for(Delivery).add(delivery)

    logger.info(
        "Delivery created",
        delivery_id=str(delivery.id),
        order_id=str(order.id),
        delivery_company_id=company_id,
    )

    try:
        get_procedures().auto_assign_delivery(str(delivery.id))
    except ProcedureError as exc:
        logger.error(
            "Error auto-assigning delivery",
            delivery_id=str(delivery.id),
            error=str(exc),
        )

    return delivery


def delivery_for_order(order_id: str) -> Delivery | None:
    """Return the delivery of an order, if one was opened."""
    results = current_domain.repository_for(Delivery)._dao.query.filter(order_id=order_id).all()
    return results.first if results.items else None
