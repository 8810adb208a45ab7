"""Driver assignment and driver-side delivery progress — commands and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.dispatch.delivery import Delivery
from marketplace.domain import marketplace


@marketplace.command(part_of="Delivery")
class AssignDriver:
    """Hand a delivery to a driver (manual dispatch)."""

    delivery_id = Identifier(required=True)
    driver_id = Identifier(required=True)


@marketplace.command(part_of="Delivery")
class AdvanceDelivery:
    """Record the driver's progress: picked_up, in_transit, delivered or failed."""

    delivery_id = Identifier(required=True)
    status = String(required=True, max_length=50)


@marketplace.command_handler(part_of=Delivery)
class DeliveryAssignmentHandler:
    @handle(AssignDriver)
    def assign_driver(self, command):
        repo = current_domain.repository_for(Delivery)
        delivery = repo.get(command.delivery_id)
        delivery.assign_driver(str(command.driver_id))
        repo.add(delivery)

    @handle(AdvanceDelivery)
    def advance_delivery(self, command):
        repo = current_domain.repository_for(Delivery)
        delivery = repo.get(command.delivery_id)
        delivery.advance(command.status)
        repo.add(delivery)
