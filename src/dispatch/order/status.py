"""Order status change — command and handler.

Leaving ``pending`` for an active status is the one moment a delivery order
without a courier gets one assigned automatically.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from dispatch.courier.selector import auto_assign_courier
from dispatch.domain import dispatch
from dispatch.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@dispatch.command(part_of="Order")
class ChangeOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


@dispatch.command_handler(part_of=Order)
class ChangeOrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        previous = OrderStatus(order.status)
        target = OrderStatus(command.status)
        order.change_status(target)

        if (
            previous == OrderStatus.PENDING
            and target != OrderStatus.CANCELLED
            and order.is_delivery
            and not order.assigned_courier_id
        ):
            courier_id = auto_assign_courier(order)
            if courier_id:
                order.assign_courier(courier_id)

        repo.add(order)
        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous.value,
            status=target.value,
            courier_id=order.assigned_courier_id,
        )
        return order.to_document()
