"""Checkout inputs and results.

Cart lines and the shipping address come from the storefront once per
checkout and are never stored as such; the order keeps its own snapshot.
"""

from dataclasses import asdict, dataclass, field

UNKNOWN_STORE_NAME = "Unknown Store"


@dataclass(frozen=True)
class CartLineItem:
    """One cart line, tagged with the store (and optionally the location) selling it."""

    product_id: str
    product_name: str
    store_id: str
    store_name: str
    unit_price: float
    unit_tax: float
    unit_shipping_cost: float
    quantity: int
    location_id: str | None = None
    inventory_id: str | None = None

    @property
    def group_key(self) -> str:
        return f"{self.store_id}:{self.location_id or 'null'}"


@dataclass(frozen=True)
class ShippingAddress:
    name: str
    email: str
    phone: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    delivery_notes: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    def order_snapshot(self) -> dict:
        """Address as stored on the order."""
        return {
            "name": self.name,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "country": self.country,
            "phone": self.phone,
            "email": self.email,
            "notes": self.delivery_notes or None,
        }

    def dropoff_snapshot(self) -> dict:
        """Address as stored on the delivery."""
        return {
            "name": self.name,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "phone": self.phone,
        }


@dataclass
class StoreGroup:
    """Cart lines sharing one (store, location) pair."""

    store_id: str
    location_id: str | None
    items: list[CartLineItem] = field(default_factory=list)

    @property
    def store_name(self) -> str:
        return (self.items[0].store_name if self.items else None) or UNKNOWN_STORE_NAME

    @property
    def product_ids(self) -> list[str]:
        return [item.product_id for item in self.items]

    @property
    def subtotal(self) -> float:
        return sum(item.unit_price * item.quantity for item in self.items)

    @property
    def taxes(self) -> float:
        return sum(item.unit_tax * item.quantity for item in self.items)

    @property
    def delivery_fee(self) -> float:
        return sum(item.unit_shipping_cost * item.quantity for item in self.items)

    @property
    def total(self) -> float:
        return self.subtotal + self.taxes + self.delivery_fee


@dataclass(frozen=True)
class PlacedOrder:
    """Summary of one order created by a checkout."""

    id: str
    order_number: str
    store_id: str
    store_name: str
    total: float
    location_id: str | None = None
    delivery_id: str | None = None


@dataclass
class CheckoutResult:
    success: bool
    orders: list[PlacedOrder] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        result = {"success": self.success, "orders": [asdict(order) for order in self.orders]}
        if self.error is not None:
            result["error"] = self.error
        return result


def group_line_items(items: list[CartLineItem]) -> list[StoreGroup]:
    """Split cart lines by (store, location), keeping first-seen order."""
    groups: dict[str, StoreGroup] = {}
    for item in items:
        group = groups.get(item.group_key)
        if group is None:
            group = groups[item.group_key] = StoreGroup(store_id=item.store_id, location_id=item.location_id)
        group.items.append(item)
    return list(groups.values())
