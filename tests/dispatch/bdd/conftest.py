"""Shared BDD fixtures and step definitions for order dispatch."""

import asyncio

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from dispatch.business.business import Business, NotificationSettings
from dispatch.channel import get_channel
from dispatch.courier.courier import Courier
from dispatch.courier.zone import CoverageZone
from dispatch.notification.router import OrderEventRouter
from dispatch.order.order import Order

ZONES = {
    "Centro": [(-2.2, -79.95), (-2.2, -79.85), (-2.1, -79.85), (-2.1, -79.95)],
}
ZONE_POINTS = {
    "Centro": "-2.15,-79.90",
}


@pytest.fixture()
def world():
    """Names used in the scenario mapped to stored ids."""
    return {"couriers": {}, "order_id": None, "business_id": None, "response": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a business "{name}" with client order emails disabled'))
def business_with_client_mail_off(world, name):
    business = Business(
        name=name,
        email="shop@x.test",
        notification_settings=NotificationSettings(email_order_client=False),
    )
    current_domain.repository_for(Business).add(business)
    world["business_id"] = str(business.id)


@given(parsers.cfparse('an active courier "{name}" covering the "{zone}" zone'))
def courier_covering_zone(world, name, zone):
    courier = Courier(name=name, phone="0991111111", email=f"{name.lower()}@x.test")
    current_domain.repository_for(Courier).add(courier)
    current_domain.repository_for(CoverageZone).add(
        CoverageZone.define(zone, ZONES[zone], assigned_courier_id=str(courier.id))
    )
    world["couriers"][name] = str(courier.id)


@given(parsers.cfparse('a pending delivery order inside the "{zone}" zone'))
def pending_order_in_zone(world, zone):
    order = Order.place(
        business_id=world["business_id"],
        customer={"name": "Ana", "phone": "0980000000"},
        items_data=[{"name": "Burger", "price": 5.0, "quantity": 2}],
        delivery={"type": "delivery", "latlong": ZONE_POINTS[zone]},
        total=10.0,
    )
    current_domain.repository_for(Order).add(order)
    world["order_id"] = str(order.id)


@given(parsers.cfparse('a pending delivery order assigned to "{name}"'))
def pending_order_assigned(world, name):
    order = Order.place(
        business_id=world["business_id"],
        customer={"name": "Ana"},
        items_data=[{"name": "Burger", "price": 5.0}],
        delivery={"type": "delivery", "assigned_courier_id": world["couriers"][name]},
    )
    current_domain.repository_for(Order).add(order)
    world["order_id"] = str(order.id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("no email is sent")
def no_email_sent():
    assert get_channel("email").sent_emails == []


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(world, status):
    assert current_domain.repository_for(Order).get(world["order_id"]).status == status


@then(parsers.cfparse('"{name}" receives {count:d} assignment email'))
def courier_receives_assignment(world, name, count):
    order = current_domain.repository_for(Order).get(world["order_id"])
    document = order.to_document()
    before = document.model_copy(update={"delivery": document.delivery.model_copy(update={"assigned_courier_id": None})})
    asyncio.run(OrderEventRouter().on_order_updated(world["order_id"], before, document))

    mails = [m for m in get_channel("email").sent_to(f"{name.lower()}@x.test") if m["subject"].startswith("Assigned")]
    assert len(mails) == count
