"""Store location management — command and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.location.location import StoreLocation


@marketplace.command(part_of="StoreLocation")
class AddStoreLocation:
    """Register a physical location for a store."""

    store_id = Identifier(required=True)
    name = String(max_length=255)
    address_line1 = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    latitude = Float()
    longitude = Float()
    is_primary = Boolean(default=False)


@marketplace.command_handler(part_of=StoreLocation)
class StoreLocationHandler:
    @handle(AddStoreLocation)
    def add_location(self, command):
        location = StoreLocation.register(
            store_id=command.store_id,
            name=command.name,
            address_line1=command.address_line1,
            city=command.city,
            state=command.state,
            zip_code=command.zip_code,
            latitude=command.latitude,
            longitude=command.longitude,
            is_primary=bool(command.is_primary),
        )
        current_domain.repository_for(StoreLocation).add(location)
        return str(location.id)
