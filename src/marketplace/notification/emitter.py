"""In-app notification emitted when an order is placed.

Goes straight to the create_notification procedure: no retry, no ordering
guarantee. The recipient is the checkout's customer id.
"""

import structlog

from marketplace.order.order import Order
from marketplace.procedures import get_procedures

logger = structlog.get_logger(__name__)

NEW_ORDER_NOTIFICATION_TYPE = "order"
NEW_ORDER_TITLE = "New Order Received"


def notify_new_order(recipient_id: str, order: Order) -> None:
    """Send the "new order" notification. Raises ProcedureError on failure."""
    order_id = str(order.id)
    # TODO: address the store owner instead of the customer once stores carry an owner id
    get_procedures().create_notification(
        user_id=recipient_id,
        notification_type=NEW_ORDER_NOTIFICATION_TYPE,
        title=NEW_ORDER_TITLE,
        body=f"Order #{order.order_number} received for ${order.total:.2f}",
        action_url=f"/dashboard/store/orders/{order_id}",
        data={"orderId": order_id, "orderNumber": order.order_number},
    )
    logger.info("New order notification created", order_id=order_id, recipient_id=recipient_id)
