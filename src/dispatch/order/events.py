"""Domain events for the Order aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from dispatch.domain import dispatch


@dispatch.event(part_of="Order")
class OrderPlaced:
    """A new order was created by the checkout flow or an admin tool."""

    __version__ = 1

    order_id = Identifier(required=True)
    business_id = Identifier()
    customer_id = Identifier()
    total = Float(required=True)
    timing_type = String(required=True)
    created_by_admin = Boolean(default=False)
    placed_at = DateTime(required=True)


@dispatch.event(part_of="Order")
class OrderStatusChanged:
    """The order moved along its status state machine."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    changed_at = DateTime(required=True)


@dispatch.event(part_of="Order")
class CourierAssigned:
    """A courier was assigned to deliver the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    courier_id = Identifier(required=True)
    previous_courier_id = Identifier()
    assigned_at = DateTime(required=True)


@dispatch.event(part_of="Order")
class CourierResponded:
    """The assigned courier accepted or rejected the order from an action link."""

    __version__ = 1

    order_id = Identifier(required=True)
    courier_id = Identifier()
    response = String(required=True)
    responded_at = DateTime(required=True)


@dispatch.event(part_of="Order")
class OrderReminderSent:
    """The scheduled-order reminder went out to the business."""

    __version__ = 1

    order_id = Identifier(required=True)
    sent_at = DateTime(required=True)
