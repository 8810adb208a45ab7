"""FastAPI routes for the marketplace."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    AddStoreLocationRequest,
    AdvanceDeliveryRequest,
    AssignDriverRequest,
    CancelOrderRequest,
    CheckoutRequest,
    CheckoutResponse,
    DriverLocationsRequest,
    DriverLocationsResponse,
    IdResponse,
    RegisterDeliveryCompanyRequest,
    SetDeliveryCompanyActiveRequest,
    SetStoreDeliveryPreferenceRequest,
    StatusResponse,
    UpdateOrderStatusRequest,
)
from marketplace.checkout.cart import CartLineItem, ShippingAddress
from marketplace.checkout.fan_out import place_orders
from marketplace.dispatch.assignment import AdvanceDelivery, AssignDriver
from marketplace.dispatch.company import (
    RegisterDeliveryCompany,
    SetDeliveryCompanyActive,
    SetStoreDeliveryPreference,
)
from marketplace.dispatch.drivers import driver_locations
from marketplace.location.management import AddStoreLocation
from marketplace.order.management import CancelOrder, UpdateOrderStatus
from marketplace.order.queries import get_order, list_customer_orders, list_store_orders

# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=CheckoutResponse)
async def checkout(body: CheckoutRequest):
    """Split a paid cart into one order per store location."""
    result = place_orders(
        items=[CartLineItem(**item.model_dump()) for item in body.items],
        shipping_address=ShippingAddress(**body.shipping_address.model_dump()),
        customer_id=body.customer_id,
        payment_intent_id=body.payment_intent_id,
    )
    if not result.success:
        return JSONResponse(status_code=502, content=result.to_dict())
    return CheckoutResponse(**result.to_dict())


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("/{order_id}")
async def order_detail(order_id: str) -> dict:
    """Return an order with its items and delivery."""
    return get_order(order_id)


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    """Set the order status; the delivery follows where it applies."""
    command = UpdateOrderStatus(order_id=order_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status=body.status)


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    """Cancel an order and its delivery."""
    command = CancelOrder(order_id=order_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="cancelled")


# ---------------------------------------------------------------------------
# Customer Router
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customers", tags=["customers"])


@customer_router.get("/{customer_id}/orders")
async def customer_orders(customer_id: str, status: str | None = None) -> list[dict]:
    """Orders placed by a customer, newest first."""
    return list_customer_orders(customer_id, status=status)


# ---------------------------------------------------------------------------
# Store Router
# ---------------------------------------------------------------------------
store_router = APIRouter(prefix="/stores", tags=["stores"])


@store_router.get("/{store_id}/orders")
async def store_orders(store_id: str, status: str | None = None) -> list[dict]:
    """Orders received by a store, newest first."""
    return list_store_orders(store_id, status=status)


@store_router.post("/{store_id}/locations", status_code=201, response_model=IdResponse)
async def add_store_location(store_id: str, body: AddStoreLocationRequest) -> IdResponse:
    """Register a physical location for a store."""
    command = AddStoreLocation(store_id=store_id, **body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@store_router.put("/{store_id}/delivery-preferences", response_model=IdResponse)
async def set_delivery_preference(store_id: str, body: SetStoreDeliveryPreferenceRequest) -> IdResponse:
    """Rank a delivery company for a store."""
    command = SetStoreDeliveryPreference(store_id=store_id, **body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


# ---------------------------------------------------------------------------
# Delivery Company Router
# ---------------------------------------------------------------------------
company_router = APIRouter(prefix="/delivery-companies", tags=["delivery-companies"])


@company_router.post("", status_code=201, response_model=IdResponse)
async def register_delivery_company(body: RegisterDeliveryCompanyRequest) -> IdResponse:
    """Register a delivery company."""
    command = RegisterDeliveryCompany(**body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@company_router.put("/{company_id}/active", response_model=StatusResponse)
async def set_delivery_company_active(company_id: str, body: SetDeliveryCompanyActiveRequest) -> StatusResponse:
    """Activate or deactivate a delivery company."""
    command = SetDeliveryCompanyActive(delivery_company_id=company_id, is_active=body.is_active)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="active" if body.is_active else "inactive")


# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/deliveries", tags=["deliveries"])


@delivery_router.put("/{delivery_id}/assign", response_model=StatusResponse)
async def assign_driver(delivery_id: str, body: AssignDriverRequest) -> StatusResponse:
    """Hand a delivery to a driver."""
    command = AssignDriver(delivery_id=delivery_id, driver_id=body.driver_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="assigned")


@delivery_router.put("/{delivery_id}/status", response_model=StatusResponse)
async def advance_delivery(delivery_id: str, body: AdvanceDeliveryRequest) -> StatusResponse:
    """Record the driver's progress on a delivery."""
    command = AdvanceDelivery(delivery_id=delivery_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status=body.status)


# ---------------------------------------------------------------------------
# Driver Router
# ---------------------------------------------------------------------------
driver_router = APIRouter(prefix="/drivers", tags=["drivers"])


@driver_router.post("/locations", response_model=DriverLocationsResponse)
async def locate_drivers(body: DriverLocationsRequest) -> DriverLocationsResponse:
    """Last known coordinates of the given drivers."""
    return DriverLocationsResponse(locations=driver_locations(body.driver_ids))
