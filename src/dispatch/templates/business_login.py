"""Business login template — platform admin alert for a fresh login."""

from dispatch.channel import NotificationChannel
from dispatch.notification.feed import NotificationEvent


class BusinessLoginTemplate:
    notification_type = NotificationEvent.BUSINESS_LOGIN.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("business_name", "Unknown business")
        source = context.get("login_source") or "N/A"
        return {
            "subject": f"Business logged in [{source}] - {name}",
            "body": (
                f"The business administrator signed in from: {source}\n\n"
                f"Name: {name}\n"
                f"Email: {context.get('business_email') or 'Not registered'}\n"
                f"Last login: {context.get('last_login_at', 'N/A')}\n"
            ),
        }
