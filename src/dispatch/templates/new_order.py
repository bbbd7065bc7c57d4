"""New order template — sent to the business when an order is placed."""

from dispatch.channel import NotificationChannel
from dispatch.notification.feed import NotificationEvent
from dispatch.templates.formatting import delivery_line, item_lines, money


class NewOrderTemplate:
    notification_type = NotificationEvent.NEW_ORDER_CLIENT.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        customer_name = context.get("customer_name", "Unknown customer")
        scheduled = context.get("timing_type") == "scheduled"

        if context.get("created_by_admin"):
            subject = f"New order for {customer_name}"
        else:
            subject = f"{'Scheduled' if scheduled else 'Immediate'}: {customer_name} placed an order"

        when = (
            f"Scheduled for {context.get('scheduled_date', '')} at {context.get('scheduled_time', '')}"
            if scheduled
            else "As soon as possible"
        )
        return {
            "subject": subject,
            "body": (
                f"New order #{context.get('short_order_id', 'N/A')} at {context.get('business_name', 'your store')}.\n\n"
                f"Customer: {customer_name}\n"
                f"Phone: {context.get('customer_phone', 'Not registered')}\n"
                f"{delivery_line(context)}\n"
                f"When: {when}\n"
                f"Payment: {context.get('payment_method') or 'Not specified'}\n\n"
                f"{item_lines(context.get('items', []))}\n\n"
                f"Total: {money(context.get('total'))}\n\n"
                "This is an automatic message. Please do not reply."
            ),
        }
