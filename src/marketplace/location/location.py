"""StoreLocation aggregate — a physical store that prepares orders.

Locations are maintained by store admins and only read during checkout,
where one of them is chosen as the pickup point of each order.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Float, Identifier, String

from marketplace.domain import marketplace


@marketplace.aggregate
class StoreLocation:
    store_id = Identifier(required=True)
    name = String(max_length=255)
    address_line1 = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    latitude = Float()
    longitude = Float()
    is_primary = Boolean(default=False)
    created_at = DateTime()

    @classmethod
    def register(
        cls,
        store_id: str,
        address_line1: str,
        city: str,
        state: str | None = None,
        zip_code: str | None = None,
        name: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        is_primary: bool = False,
    ):
        return cls(
            store_id=store_id,
            name=name,
            address_line1=address_line1,
            city=city,
            state=state,
            zip_code=zip_code,
            latitude=latitude,
            longitude=longitude,
            is_primary=is_primary,
            created_at=datetime.now(UTC),
        )

    def pickup_snapshot(self) -> dict:
        """Address fields copied onto a delivery as its pickup point."""
        return {
            "street": self.address_line1,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
        }
