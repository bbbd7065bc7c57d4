"""Store chat templates — the order card posted to a business's Telegram chats.

The card is posted once when the order arrives and edited in place later,
with a status line appended, when a courier accepts it or it is cancelled.
"""

from dispatch.channel import NotificationChannel
from dispatch.notification.feed import NotificationEvent
from dispatch.templates.formatting import delivery_line, item_lines, money


def _card(context: dict) -> dict:
    customer_name = context.get("customer_name", "Unknown customer")
    return {
        "subject": f"New order #{context.get('short_order_id', 'N/A')} - {customer_name}",
        "body": (
            f"Customer: {customer_name}\n"
            f"Phone: {context.get('customer_phone', 'Not registered')}\n"
            f"{delivery_line(context)}\n\n"
            f"{item_lines(context.get('items', []))}\n\n"
            f"Total: {money(context.get('total'))}"
        ),
    }


def status_line(context: dict) -> str:
    if context.get("status") == "cancelled":
        return "Order cancelled"
    if context.get("delivery_type") != "delivery":
        return "Order confirmed"
    if not context.get("assigned_courier_id"):
        return "Order confirmed\nCould not auto-assign a courier"

    courier = context.get("courier_name") or "Courier"
    if context.get("courier_acceptance_status") == "accepted":
        return f"Order confirmed\nCourier assigned: {courier} (confirmed)"
    return f"Order confirmed\nCourier assigned: {courier} (waiting for confirmation)"


class StoreOrderAlertTemplate:
    notification_type = NotificationEvent.STORE_ORDER_ALERT.value
    default_channels = [NotificationChannel.TELEGRAM.value]

    @staticmethod
    def render(context: dict) -> dict:
        return _card(context)


class StoreOrderUpdateTemplate:
    notification_type = NotificationEvent.STORE_ORDER_UPDATE.value
    default_channels = [NotificationChannel.TELEGRAM.value]

    @staticmethod
    def render(context: dict) -> dict:
        content = _card(context)
        content["body"] = f"{content['body']}\n\n{status_line(context)}"
        return content
