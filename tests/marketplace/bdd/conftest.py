"""Shared BDD fixtures and step definitions for the marketplace."""

import pytest
from marketplace.checkout.cart import CartLineItem, ShippingAddress
from marketplace.checkout.fan_out import place_orders
from marketplace.dispatch.company import RegisterDeliveryCompany
from marketplace.dispatch.delivery import Delivery
from marketplace.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def ids():
    """Maps names used in scenarios to stored ids."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the shipping address of "{name}"'), target_fixture="shipping_address")
def shipping_address(name):
    return _address(name)


def _address(name):
    return ShippingAddress(
        name=name,
        email="customer@example.com",
        phone="555-0100",
        street="1 Compiler Ct",
        city="Arlington",
        state="VA",
        zip_code="22201",
        country="US",
    )


@given("a placed order with a delivery", target_fixture="placed")
def placed_order_with_delivery():
    current_domain.process(RegisterDeliveryCompany(name="Lifecycle Couriers"), asynchronous=False)
    result = place_orders(
        items=[
            CartLineItem(
                product_id="prod-1",
                product_name="Kettle",
                store_id="S1",
                store_name="Kitchen",
                unit_price=30.0,
                unit_tax=3.0,
                unit_shipping_cost=4.0,
                quantity=1,
            )
        ],
        shipping_address=_address("Katherine Johnson"),
        customer_id="cust-bdd",
        payment_intent_id="pi_bdd",
    )
    return result.orders[0]


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(placed, status):
    assert current_domain.repository_for(Order).get(placed.id).status == status


@then(parsers.cfparse('the delivery status is "{status}"'))
def delivery_status_is(placed, status):
    assert current_domain.repository_for(Delivery).get(placed.delivery_id).status == status


@then("the action fails with a validation error")
def action_fails(error):
    assert error["exc"] is not None
