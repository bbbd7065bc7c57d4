"""Recipient resolution — who hears about an event, and through which channel.

All collaborator reads here are best effort: a business, client or courier
that cannot be loaded degrades to the documented default instead of aborting
resolution. Every "missing field" default of the notification path lives in
this module.
"""

from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from dispatch.business.business import Business
from dispatch.channel import NotificationChannel
from dispatch.client.client import Client
from dispatch.config import get_settings
from dispatch.courier.courier import Courier
from dispatch.documents import OrderDocument
from dispatch.notification.feed import NotificationEvent

logger = structlog.get_logger(__name__)

UNKNOWN_BUSINESS = "Unknown business"
UNKNOWN_CUSTOMER = "Unknown customer"
NOT_REGISTERED = "Not registered"

BUSINESS_EVENTS = {
    NotificationEvent.NEW_ORDER_CLIENT,
    NotificationEvent.NEW_ORDER_MANUAL,
    NotificationEvent.ORDER_REMINDER,
    NotificationEvent.DAILY_DIGEST,
    NotificationEvent.CHECKOUT_PROGRESS,
}

# Event -> NotificationSettings field. Events not listed here are never gated.
PREFERENCE_FIELDS = {
    NotificationEvent.NEW_ORDER_CLIENT: "email_order_client",
    NotificationEvent.NEW_ORDER_MANUAL: "email_order_manual",
    NotificationEvent.CHECKOUT_PROGRESS: "email_checkout_progress",
}

PREFERENCE_DEFAULTS = {
    "email_order_client": True,
    "email_order_manual": True,
    "email_checkout_progress": False,
}


@dataclass(frozen=True)
class Recipient:
    address: str
    channel: str = NotificationChannel.EMAIL.value


@dataclass(frozen=True)
class CustomerContact:
    name: str
    phone: str
    email: str | None = None


def new_order_event(order: OrderDocument) -> NotificationEvent:
    """Admin-created orders follow the "manual" preference, the rest the "client" one."""
    if order.created_by_admin:
        return NotificationEvent.NEW_ORDER_MANUAL
    return NotificationEvent.NEW_ORDER_CLIENT


def is_enabled(event: NotificationEvent, business: Business | None) -> bool:
    field = PREFERENCE_FIELDS.get(event)
    if field is None:
        return True

    settings = business.notification_settings if business is not None else None
    value = getattr(settings, field, None) if settings is not None else None
    if value is None:
        return PREFERENCE_DEFAULTS[field]
    return bool(value)


def _unique(addresses) -> list[str]:
    seen = []
    for address in addresses:
        address = (address or "").strip()
        if address and address not in seen:
            seen.append(address)
    return seen


def business_addresses(business: Business | None) -> list[str]:
    """Business email followed by its administrators, deduplicated, blanks dropped."""
    if business is None:
        return []
    return _unique([business.email, *business.administrator_emails()])


def business_chats(business: Business | None) -> list[str]:
    """Telegram chats linked to the business store bot."""
    if business is None:
        return []
    return business.chat_ids()


def _manual_chat_alerts(business: Business | None) -> bool:
    # Off unless the business opts in
    settings = business.notification_settings if business is not None else None
    return bool(settings is not None and settings.telegram_order_manual)


def resolve(
    event: NotificationEvent,
    order: OrderDocument | None = None,
    business: Business | None = None,
) -> list[Recipient]:
    """Resolve the recipients for ``event``.

    An empty list means "skip sending"; it is never an error.
    """
    if event in BUSINESS_EVENTS:
        if not is_enabled(event, business):
            logger.info(
                "Notification disabled by business preference",
                notification_event=event.value,
                business_id=str(business.id) if business is not None else None,
            )
            return []
        return [Recipient(address) for address in business_addresses(business)]

    if event == NotificationEvent.COURIER_ASSIGNMENT:
        courier_id = order.assigned_courier_id if order is not None else None
        email = courier_email(courier_id) if courier_id else None
        if not email:
            logger.warning(
                "Assigned courier has no email, skipping notification",
                order_id=order.id if order is not None else None,
                courier_id=courier_id,
            )
            return []
        return [Recipient(email)]

    if event == NotificationEvent.ORDER_STATUS_UPDATE:
        email = order.customer.email if order is not None else None
        return [Recipient(email.strip())] if email and email.strip() else []

    if event in (NotificationEvent.BUSINESS_CREATED, NotificationEvent.BUSINESS_LOGIN):
        return [Recipient(get_settings().platform_admin_email)]

    if event == NotificationEvent.STORE_ORDER_ALERT:
        if order is not None and order.created_by_admin and not _manual_chat_alerts(business):
            logger.info(
                "Chat alert for admin-created order disabled by business preference",
                order_id=order.id,
                business_id=str(business.id) if business is not None else None,
            )
            return []
        return [Recipient(chat_id, NotificationChannel.TELEGRAM.value) for chat_id in business_chats(business)]

    if event == NotificationEvent.STORE_ORDER_UPDATE:
        return [Recipient(chat_id, NotificationChannel.TELEGRAM.value) for chat_id in business_chats(business)]

    raise ValueError(f"No recipient rule for notification event: {event.value}")


def with_fallback_inbox(recipients: list[Recipient]) -> list[Recipient]:
    """Route an allowed but address-less business notification to the platform inbox."""
    if recipients:
        return recipients
    return [Recipient(get_settings().fallback_business_email)]


# ---------------------------------------------------------------------------
# Best-effort reads
# ---------------------------------------------------------------------------
def load_business(business_id: str | None) -> Business | None:
    if not business_id:
        return None
    try:
        return current_domain.repository_for(Business).get(business_id)
    except Exception as exc:
        logger.warning("Could not load business", business_id=business_id, error=str(exc))
        return None


def business_name(business: Business | None) -> str:
    if business is None or not business.name:
        return UNKNOWN_BUSINESS
    return business.name


def load_client(client_id: str | None) -> Client | None:
    if not client_id:
        return None
    try:
        return current_domain.repository_for(Client).get(client_id)
    except Exception as exc:
        logger.warning("Could not load client", client_id=client_id, error=str(exc))
        return None


def courier_email(courier_id: str) -> str | None:
    try:
        courier = current_domain.repository_for(Courier).get(courier_id)
    except Exception as exc:
        logger.warning("Could not load courier", courier_id=courier_id, error=str(exc))
        return None
    return (courier.email or "").strip() or None


def resolve_customer_contact(order: OrderDocument) -> CustomerContact:
    """Customer name and phone for message text.

    The client profile wins over the copy stored on the order; either one
    missing falls back to the defaults.
    """
    name = order.customer.name or UNKNOWN_CUSTOMER
    phone = order.customer.phone or NOT_REGISTERED
    email = order.customer.email

    client = load_client(order.customer.id)
    if client is not None:
        name = client.name or name
        phone = client.phone or phone
        email = email or client.email

    return CustomerContact(name=name, phone=phone, email=email)


def courier_name(courier_id: str | None) -> str | None:
    if not courier_id:
        return None
    try:
        courier = current_domain.repository_for(Courier).get(courier_id)
    except Exception as exc:
        logger.warning("Could not load courier", courier_id=courier_id, error=str(exc))
        return None
    return courier.name or None
