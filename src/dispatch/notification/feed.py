"""BusinessNotification aggregate — the in-app notification feed of a business.

One record is created per customer-placed order so the business dashboard can
show a bell badge even when mail is switched off. Admin-created orders do not
produce feed entries.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from dispatch.documents import OrderDocument
from dispatch.domain import dispatch


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationEvent(Enum):
    """Everything the engine can notify about."""

    NEW_ORDER_CLIENT = "new_order_client"
    NEW_ORDER_MANUAL = "new_order_manual"
    ORDER_REMINDER = "order_reminder"
    DAILY_DIGEST = "daily_digest"
    CHECKOUT_PROGRESS = "checkout_progress"
    COURIER_ASSIGNMENT = "courier_assignment"
    ORDER_STATUS_UPDATE = "order_status_update"
    BUSINESS_CREATED = "business_created"
    BUSINESS_LOGIN = "business_login"
    STORE_ORDER_ALERT = "store_order_alert"
    STORE_ORDER_UPDATE = "store_order_update"


class FeedItemType(Enum):
    NEW_ORDER = "new_order"


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@dispatch.aggregate
class BusinessNotification:
    business_id = Identifier(required=True)
    order_id = Identifier()
    type = String(choices=FeedItemType, default=FeedItemType.NEW_ORDER.value)
    title = String(required=True, max_length=300)
    message = String(max_length=500)
    read = Boolean(default=False)
    order_data = Text()  # JSON snapshot: id, customer, items, total, status
    created_at = DateTime()

    @classmethod
    def for_new_order(cls, order_id: str, order: OrderDocument):
        customer_name = order.customer.name or "Customer"
        return cls(
            business_id=order.business_id,
            order_id=order_id,
            type=FeedItemType.NEW_ORDER.value,
            title=f"{customer_name} placed an order",
            message=f"Order #{order_id[:6]} - Total: ${order.total:.2f}",
            read=False,
            order_data=json.dumps(
                {
                    "id": order_id,
                    "customer": order.customer.model_dump(),
                    "items": [item.model_dump() for item in order.items],
                    "total": order.total,
                    "status": order.status,
                }
            ),
            created_at=datetime.now(UTC),
        )

    def mark_read(self) -> None:
        self.read = True

    def snapshot(self) -> dict:
        return json.loads(self.order_data) if self.order_data else {}
