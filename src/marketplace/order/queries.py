"""Order read side — order detail and the customer and store order lists."""

from protean.utils.globals import current_domain

from marketplace.dispatch.delivery import Delivery
from marketplace.dispatch.dispatcher import delivery_for_order
from marketplace.order.order import Order


def _address_dict(address) -> dict | None:
    return address.to_dict() if address else None


def order_summary(order: Order) -> dict:
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "store_id": str(order.store_id),
        "store_location_id": str(order.store_location_id) if order.store_location_id else None,
        "status": order.status,
        "payment_status": order.payment_status,
        "subtotal": order.subtotal,
        "tax_amount": order.tax_amount,
        "delivery_fee": order.delivery_fee,
        "total": order.total,
        "created_at": order.created_at.isoformat() if order.created_at else None,
    }


def delivery_detail(delivery: Delivery) -> dict:
    return {
        "id": str(delivery.id),
        "delivery_company_id": str(delivery.delivery_company_id),
        "driver_id": str(delivery.driver_id) if delivery.driver_id else None,
        "status": delivery.status,
        "delivery_fee": delivery.delivery_fee,
        "pickup_address": _address_dict(delivery.pickup_address),
        "dropoff_address": _address_dict(delivery.dropoff_address),
        "estimated_pickup_time": delivery.estimated_pickup_time.isoformat()
        if delivery.estimated_pickup_time
        else None,
        "estimated_delivery_time": delivery.estimated_delivery_time.isoformat()
        if delivery.estimated_delivery_time
        else None,
        "actual_delivery_time": delivery.actual_delivery_time.isoformat() if delivery.actual_delivery_time else None,
    }


def get_order(order_id: str) -> dict:
    """Return an order with its items and delivery.

    Raises ObjectNotFoundError for an unknown id.
    """
    order = current_domain.repository_for(Order).get(order_id)
    delivery = delivery_for_order(str(order.id))

    detail = order_summary(order)
    detail.update(
        {
            "payment_intent_id": order.payment_intent_id,
            "fulfillment_type": order.fulfillment_type,
            "delivery_address": _address_dict(order.delivery_address),
            "customer_notes": order.customer_notes,
            "cancel_reason": order.cancel_reason,
            "items": [
                {
                    "id": str(item.id),
                    "product_id": str(item.product_id),
                    "inventory_id": str(item.inventory_id) if item.inventory_id else None,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "tax_amount": item.tax_amount,
                    "total_price": item.total_price,
                }
                for item in order.items
            ],
            "delivery": delivery_detail(delivery) if delivery else None,
        }
    )
    return detail


def list_customer_orders(customer_id: str, status: str | None = None) -> list[dict]:
    """Orders placed by a customer, newest first."""
    orders = current_domain.repository_for(Order).find_by_customer(customer_id, status=status)
    return [order_summary(order) for order in orders]


def list_store_orders(store_id: str, status: str | None = None) -> list[dict]:
    """Orders received by a store, newest first."""
    orders = current_domain.repository_for(Order).find_by_store(store_id, status=status)
    return [order_summary(order) for order in orders]
