"""Business created template — platform admin alert for a new registration."""

from dispatch.channel import NotificationChannel
from dispatch.notification.feed import NotificationEvent


class BusinessCreatedTemplate:
    notification_type = NotificationEvent.BUSINESS_CREATED.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("business_name", "Unknown business")
        source = context.get("login_source") or "N/A"
        return {
            "subject": f"New business! [{source}] - {name}",
            "body": (
                f"A new business joined the platform from: {source}\n\n"
                f"Name: {name}\n"
                f"Email: {context.get('business_email') or 'Not registered'}\n"
                f"Id: {context.get('business_id', 'N/A')}\n"
            ),
        }
