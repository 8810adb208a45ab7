"""Pydantic API schemas for the marketplace.

These are the external API contracts, separate from domain commands and the
checkout dataclasses. The routes translate between the two.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class CartLineItemRequest(BaseModel):
    product_id: str
    product_name: str
    store_id: str
    store_name: str
    unit_price: float = Field(ge=0)
    unit_tax: float = Field(default=0.0, ge=0)
    unit_shipping_cost: float = Field(default=0.0, ge=0)
    quantity: int = Field(ge=1)
    location_id: str | None = None
    inventory_id: str | None = None


class ShippingAddressRequest(BaseModel):
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


class CheckoutRequest(BaseModel):
    customer_id: str
    payment_intent_id: str
    shipping_address: ShippingAddressRequest
    items: list[CartLineItemRequest] = Field(min_length=1)


class UpdateOrderStatusRequest(BaseModel):
    status: str


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class AssignDriverRequest(BaseModel):
    driver_id: str


class AdvanceDeliveryRequest(BaseModel):
    status: str


class DriverLocationsRequest(BaseModel):
    driver_ids: list[str]


class AddStoreLocationRequest(BaseModel):
    name: str | None = None
    address_line1: str
    city: str
    state: str | None = None
    zip_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    is_primary: bool = False


class RegisterDeliveryCompanyRequest(BaseModel):
    name: str
    tenant_id: str | None = None
    is_active: bool = True


class SetDeliveryCompanyActiveRequest(BaseModel):
    is_active: bool


class SetStoreDeliveryPreferenceRequest(BaseModel):
    delivery_company_id: str
    priority: int = Field(ge=0)
    is_enabled: bool = True


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class PlacedOrderResponse(BaseModel):
    id: str
    order_number: str
    store_id: str
    store_name: str
    total: float
    location_id: str | None = None
    delivery_id: str | None = None


class CheckoutResponse(BaseModel):
    success: bool
    orders: list[PlacedOrderResponse]
    error: str | None = None


class StatusResponse(BaseModel):
    status: str


class IdResponse(BaseModel):
    id: str


class DriverPosition(BaseModel):
    lat: float
    lng: float


class DriverLocationsResponse(BaseModel):
    locations: dict[str, DriverPosition]
