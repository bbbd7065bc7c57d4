"""CheckoutProgressHandler — tells a business a customer started checking out.

Off by default: only businesses with ``email_checkout_progress`` switched on
receive these mails.
"""

import structlog

from dispatch.config import Settings, get_settings
from dispatch.documents import CheckoutProgressDocument
from dispatch.notification.dispatcher import NotificationDispatcher
from dispatch.notification.feed import NotificationEvent
from dispatch.notification.recipients import (
    NOT_REGISTERED,
    business_name,
    is_enabled,
    load_business,
    load_client,
    resolve,
    with_fallback_inbox,
)
from dispatch.templates import render

logger = structlog.get_logger(__name__)


class CheckoutProgressHandler:
    def __init__(self, dispatcher: NotificationDispatcher | None = None, settings: Settings | None = None):
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.settings = settings or get_settings()

    async def on_checkout_started(self, progress: CheckoutProgressDocument):
        if not progress.client_id or not progress.business_id:
            logger.warning(
                "Checkout progress without client or business",
                progress_id=progress.id,
            )
            return None

        business = load_business(progress.business_id)
        if business is None:
            logger.warning("Checkout progress for unknown business", business_id=progress.business_id)
            return None

        if not is_enabled(NotificationEvent.CHECKOUT_PROGRESS, business):
            logger.info(
                "Checkout progress notifications disabled",
                business_id=progress.business_id,
            )
            return None

        client = load_client(progress.client_id)
        context = {
            "client_id": progress.client_id,
            "business_name": business_name(business),
            "customer_name": (client.name if client is not None else None) or "Customer",
            "customer_phone": (client.phone if client is not None else None) or NOT_REGISTERED,
            "step": progress.step,
        }
        content = render(NotificationEvent.CHECKOUT_PROGRESS, context)

        recipients = with_fallback_inbox(resolve(NotificationEvent.CHECKOUT_PROGRESS, business=business))
        try:
            return await self.dispatcher.dispatch(
                recipients,
                content["subject"],
                content["body"],
                sender=self.settings.system_sender,
            )
        except Exception:
            logger.exception("Checkout progress notification failed", progress_id=progress.id)
            return None
