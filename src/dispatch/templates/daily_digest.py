"""Daily digest template — the scheduled orders a business has today."""

from dispatch.channel import NotificationChannel
from dispatch.notification.feed import NotificationEvent
from dispatch.templates.formatting import money


class DailyDigestTemplate:
    notification_type = NotificationEvent.DAILY_DIGEST.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        business_name = context.get("business_name") or "Your business"
        orders = context.get("orders", [])
        count = len(orders)
        noun = "scheduled order" if count == 1 else "scheduled orders"

        lines = []
        for order in orders:
            mode = "Delivery" if order.get("delivery_type") == "delivery" else "Pickup"
            lines.append(
                f"{order.get('scheduled_time', '--:--')}  {order.get('customer_name', 'Unknown customer')}"
                f"  [{mode}]  {order.get('items_synopsis', '')}  {money(order.get('total'))}"
            )

        if not orders:
            return {
                "subject": f"{business_name}! You have no scheduled orders for today",
                "body": (
                    f"Orders for {context.get('date', 'today')}:\n\n"
                    "No scheduled orders for today.\n"
                    "A good moment to promote your products!\n"
                ),
            }

        return {
            "subject": f"{business_name}! You have {count} {noun} for today!",
            "body": (
                f"Orders for {context.get('date', 'today')}:\n\n"
                + "\n".join(lines)
                + f"\n\nOrders: {count}\n"
                f"Expected revenue: {money(context.get('revenue'))}\n"
            ),
        }
