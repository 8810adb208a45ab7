"""Order status management — commands and handler.

Store staff move orders along by hand. Each change is mirrored onto the
order's delivery, when one was opened at checkout.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.dispatch.delivery import Delivery
from marketplace.dispatch.dispatcher import delivery_for_order
from marketplace.domain import marketplace
from marketplace.order.order import Order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    """Set the status of an order."""

    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)


@marketplace.command(part_of="Order")
class CancelOrder:
    """Cancel an order that has not been delivered yet."""

    order_id = Identifier(required=True)
    reason = String(max_length=500)


@marketplace.command_handler(part_of=Order)
class OrderManagementHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.change_status(command.status)
        repo.add(order)

        delivery = delivery_for_order(str(order.id))
        if delivery is not None and delivery.follow_order_status(order.status):
            current_domain.repository_for(Delivery).add(delivery)
            logger.info(
                "Delivery status follows order",
                order_id=str(order.id),
                delivery_id=str(delivery.id),
                delivery_status=delivery.status,
            )

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel(command.reason)
        repo.add(order)

        delivery = delivery_for_order(str(order.id))
        if delivery is not None and delivery.cancel():
            current_domain.repository_for(Delivery).add(delivery)

        logger.info("Order cancelled", order_id=str(order.id), reason=command.reason)
