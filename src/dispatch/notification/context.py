"""Template context for order-related messages."""

from dispatch.action.token import short_order_id
from dispatch.business.business import Business
from dispatch.documents import OrderDocument
from dispatch.notification.recipients import business_name, resolve_customer_contact


def order_context(order_id: str, order: OrderDocument, business: Business | None = None) -> dict:
    contact = resolve_customer_contact(order)
    scheduled_date = order.timing.scheduled_date
    return {
        "order_id": order_id,
        "short_order_id": short_order_id(order_id),
        "business_name": business_name(business),
        "customer_name": contact.name,
        "customer_phone": contact.phone,
        "items": [item.model_dump() for item in order.items],
        "total": order.total,
        "delivery_type": order.delivery.type,
        "references": order.delivery.references,
        "latlong": order.delivery.latlong,
        "timing_type": order.timing.type,
        "scheduled_date": scheduled_date.strftime("%Y-%m-%d") if scheduled_date else "",
        "scheduled_time": order.timing.scheduled_time or "",
        "payment_method": order.payment.method,
        "created_by_admin": order.created_by_admin,
    }
