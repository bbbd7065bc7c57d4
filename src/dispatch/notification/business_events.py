"""BusinessEventRouter — alerts the platform admin about business sign-ups and logins.

Reacts to writes on ``businesses``:
- creation (no ``before``) → "new business" mail;
- update where ``last_login_at`` moved but ``last_registration_at`` did not → "business login" mail;
- deletion (no ``after``) → ignored.
"""

import structlog

from dispatch.config import Settings, get_settings
from dispatch.documents import BusinessDocument
from dispatch.notification.dispatcher import NotificationDispatcher
from dispatch.notification.feed import NotificationEvent
from dispatch.notification.recipients import UNKNOWN_BUSINESS, resolve
from dispatch.templates import render

logger = structlog.get_logger(__name__)


class BusinessEventRouter:
    def __init__(self, dispatcher: NotificationDispatcher | None = None, settings: Settings | None = None):
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.settings = settings or get_settings()

    async def on_business_written(
        self,
        business_id: str,
        before: BusinessDocument | None,
        after: BusinessDocument | None,
    ):
        if after is None:
            logger.info("Business deleted, nothing to notify", business_id=business_id)
            return None

        if before is None:
            event = NotificationEvent.BUSINESS_CREATED
        elif self._is_fresh_login(before, after):
            event = NotificationEvent.BUSINESS_LOGIN
        else:
            return None

        try:
            context = {
                "business_id": business_id,
                "business_name": after.name or UNKNOWN_BUSINESS,
                "business_email": after.email,
                "login_source": after.login_source,
                "last_login_at": after.last_login_at.isoformat() if after.last_login_at else "N/A",
            }
            content = render(event, context)
            return await self.dispatcher.dispatch(
                resolve(event),
                content["subject"],
                content["body"],
                sender=self.settings.system_sender,
            )
        except Exception:
            logger.exception(
                "Business write handling failed",
                business_id=business_id,
                notification_event=event.value,
            )
            return None

    @staticmethod
    def _is_fresh_login(before: BusinessDocument, after: BusinessDocument) -> bool:
        login_changed = after.last_login_at is not None and after.last_login_at != before.last_login_at
        registration_changed = (
            after.last_registration_at is not None and after.last_registration_at != before.last_registration_at
        )
        return login_changed and not registration_changed
