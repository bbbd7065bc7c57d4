"""Order reminder template — a scheduled order is due soon."""

from dispatch.channel import NotificationChannel
from dispatch.notification.feed import NotificationEvent
from dispatch.templates.formatting import delivery_line, item_lines, money


class OrderReminderTemplate:
    notification_type = NotificationEvent.ORDER_REMINDER.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        customer_name = context.get("customer_name", "Unknown customer")
        return {
            "subject": f"Reminder: {customer_name}",
            "body": (
                f"Order #{context.get('short_order_id', 'N/A')} is due at "
                f"{context.get('scheduled_time', '')} - {context.get('scheduled_date', '')}.\n\n"
                f"Customer: {customer_name}\n"
                f"Phone: {context.get('customer_phone', 'Not registered')}\n"
                f"{delivery_line(context)}\n\n"
                f"{item_lines(context.get('items', []))}\n\n"
                f"Total: {money(context.get('total'))}\n\n"
                "This is an automatic reminder. Check your dashboard to manage the order."
            ),
        }
