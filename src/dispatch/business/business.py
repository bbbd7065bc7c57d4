"""Business aggregate — a store on the platform, as kept in ``businesses``.

Read-only from the dispatch engine's perspective: it is consulted for
notification recipients and preferences, and its writes are observed to
alert the platform admin about registrations and logins.
"""

from enum import Enum

from protean.fields import Boolean, DateTime, HasMany, List, String, ValueObject

from dispatch.domain import dispatch


class StoreStatus(Enum):
    OPEN = "open"
    CLOSED = "closed"


class AdministratorRole(Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MANAGER = "manager"


@dispatch.value_object(part_of="Business")
class NotificationSettings:
    """Per-event mail and chat preferences. A missing flag means "use the default"."""

    email_order_client = Boolean()
    email_order_manual = Boolean()
    email_checkout_progress = Boolean()
    telegram_order_manual = Boolean()


@dispatch.entity(part_of="Business")
class BusinessAdministrator:
    email = String(required=True, max_length=254)
    role = String(choices=AdministratorRole, default=AdministratorRole.ADMIN.value)


@dispatch.aggregate
class Business:
    name = String(required=True, max_length=200)
    email = String(max_length=254)
    administrators = HasMany(BusinessAdministrator)
    notification_settings = ValueObject(NotificationSettings)
    manual_store_status = String(choices=StoreStatus)  # None: follow the opening schedule
    is_hidden = Boolean(default=False)
    login_source = String(max_length=50)
    last_login_at = DateTime()
    last_registration_at = DateTime()
    telegram_chat_ids = List(content_type=String)
    telegram_chat_id = String(max_length=64)  # single linked chat, kept by older accounts

    def administrator_emails(self) -> list[str]:
        return [admin.email for admin in self.administrators if admin.email]

    def chat_ids(self) -> list[str]:
        """Linked store chats, the single legacy chat included, without duplicates."""
        ids = []
        for chat_id in [*(self.telegram_chat_ids or []), self.telegram_chat_id]:
            chat_id = str(chat_id or "").strip()
            if chat_id and chat_id not in ids:
                ids.append(chat_id)
        return ids
