"""BDD tests for order dispatch."""

import asyncio

from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when

from dispatch.action.token import encode_action_token
from dispatch.api.routes import router
from dispatch.documents import OrderDocument
from dispatch.notification.feed import BusinessNotification
from dispatch.notification.router import OrderEventRouter
from dispatch.order.order import Order
from dispatch.order.status import ChangeOrderStatus
from dispatch.utils.query import fetch_all

scenarios("features/order_dispatch.feature")


def _client():
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)


@when("a customer places an order at the business")
def customer_places_order(world):
    order = OrderDocument(
        business_id=world["business_id"],
        customer={"name": "Ana"},
        items=[{"name": "Burger", "price": 5.0}],
        total=5.0,
    )
    asyncio.run(OrderEventRouter().on_order_created("order-bdd-1", order))


@when(parsers.cfparse('the order status changes to "{status}"'))
def order_status_changes(world, status):
    current_domain.process(ChangeOrderStatus(order_id=world["order_id"], status=status), asynchronous=False)


@when(parsers.cfparse('"{name}" follows the "{action}" link'))
def courier_follows_link(world, name, action):
    token = encode_action_token(world["order_id"], action)
    world["response"] = _client().get(
        "/delivery-action", params={"action": action, "token": token}, follow_redirects=False
    )


@when(parsers.cfparse('the "{action}" link is opened with a "{token_action}" token'))
def mismatched_link(world, action, token_action):
    token = encode_action_token(world["order_id"], token_action)
    world["response"] = _client().get(
        "/delivery-action", params={"action": action, "token": token}, follow_redirects=False
    )


@then(parsers.cfparse("the business feed has {count:d} entry"))
def business_feed_has(count):
    assert len(fetch_all(current_domain.repository_for(BusinessNotification)._dao)) == count


@then(parsers.cfparse('the order is assigned to "{name}"'))
def order_assigned_to(world, name):
    order = current_domain.repository_for(Order).get(world["order_id"])
    assert order.assigned_courier_id == world["couriers"][name]


@then("the courier is redirected to the dashboard")
def redirected_to_dashboard(world):
    response = world["response"]
    assert response.status_code == 302
    assert response.headers["location"].startswith("http://localhost:3000/delivery/dashboard?")


@then(parsers.cfparse('the request is refused with "{message}"'))
def request_refused(world, message):
    assert world["response"].status_code == 400
    assert world["response"].json() == {"error": message}
