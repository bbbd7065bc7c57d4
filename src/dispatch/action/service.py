"""Apply a courier's confirm/discard answer to an order."""

from urllib.parse import urlencode

import structlog
from protean.utils.globals import current_domain

from dispatch.action.token import CourierAction, short_order_id
from dispatch.config import get_settings
from dispatch.order.order import Order, OrderStatus, can_transition

logger = structlog.get_logger(__name__)

_TARGET_STATUS = {
    CourierAction.CONFIRM: OrderStatus.PREPARING,
    CourierAction.DISCARD: OrderStatus.CANCELLED,
}


def apply_courier_action(order_id: str, action: CourierAction) -> Order:
    """Move the order to the status the action stands for and record the answer.

    Raises ``protean.exceptions.ObjectNotFoundError`` for an unknown order.
    Orders already delivered or cancelled are returned untouched, and a
    confirm on an order already past ``preparing`` only records acceptance.
    """
    repo = current_domain.repository_for(Order)
    order = repo.get(order_id)

    if order.is_terminal:
        logger.info(
            "Courier action on a closed order ignored",
            order_id=order_id,
            action=action.value,
            status=order.status,
        )
        return order

    target = _TARGET_STATUS[action]
    if can_transition(OrderStatus(order.status), target):
        order.change_status(target)
    order.record_courier_response(accepted=action == CourierAction.CONFIRM)
    repo.add(order)

    logger.info(
        "Courier action applied",
        order_id=order_id,
        action=action.value,
        status=order.status,
        courier_id=order.assigned_courier_id,
    )
    return order


def dashboard_redirect_url(order_id: str, action: CourierAction) -> str:
    query = urlencode({"action": action.value, "orderId": short_order_id(order_id)})
    return f"{get_settings().dashboard_url}?{query}"
