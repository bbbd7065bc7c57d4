"""Courier assignment template — tells a courier an order is theirs.

Carries the confirm/discard links the courier answers with.
"""

from dispatch.channel import NotificationChannel
from dispatch.notification.feed import NotificationEvent
from dispatch.templates.formatting import delivery_line, item_lines, money


class CourierAssignmentTemplate:
    notification_type = NotificationEvent.COURIER_ASSIGNMENT.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        customer_name = context.get("customer_name", "Unknown customer")
        business_name = context.get("business_name", "Unknown business")

        location = ""
        if context.get("latlong") and not str(context["latlong"]).startswith("pluscode:"):
            location = f"Map: https://www.google.com/maps/search/?api=1&query={context['latlong']}\n"

        return {
            "subject": f"Assigned - {customer_name} - {business_name}",
            "body": (
                f"You have been assigned order #{context.get('short_order_id', 'N/A')}.\n\n"
                f"Business: {business_name}\n"
                f"Customer: {customer_name}\n"
                f"Phone: {context.get('customer_phone', 'Not registered')}\n"
                f"{delivery_line(context)}\n"
                f"{location}\n"
                f"{item_lines(context.get('items', []))}\n\n"
                f"Total to collect: {money(context.get('total'))}\n\n"
                f"Confirm: {context.get('confirm_url', '')}\n"
                f"Discard: {context.get('discard_url', '')}\n"
            ),
        }
