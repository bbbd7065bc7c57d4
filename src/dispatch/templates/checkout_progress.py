"""Checkout progress template — a customer is checking out right now."""

from dispatch.channel import NotificationChannel
from dispatch.notification.feed import NotificationEvent


class CheckoutProgressTemplate:
    notification_type = NotificationEvent.CHECKOUT_PROGRESS.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        customer_name = context.get("customer_name", "Customer")
        business_name = context.get("business_name", "your business")
        return {
            "subject": f"{customer_name} is checking out at {business_name}",
            "body": (
                f"{customer_name} has started checking out at {business_name}.\n"
                f"Current step: {context.get('step') or 'started'}\n\n"
                f"Client id: {context.get('client_id', 'N/A')}\n"
                f"Phone: {context.get('customer_phone', 'Not registered')}\n"
            ),
        }
