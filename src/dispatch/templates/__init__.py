"""Template registry — maps NotificationEvent to template classes.

Each template knows its default channels and how to render plain-text
content from a context dict. Store chat cards use the Telegram channel;
every other template is mail.
"""

from dispatch.notification.feed import NotificationEvent
from dispatch.templates.business_created import BusinessCreatedTemplate
from dispatch.templates.business_login import BusinessLoginTemplate
from dispatch.templates.checkout_progress import CheckoutProgressTemplate
from dispatch.templates.courier_assignment import CourierAssignmentTemplate
from dispatch.templates.daily_digest import DailyDigestTemplate
from dispatch.templates.new_order import NewOrderTemplate
from dispatch.templates.order_reminder import OrderReminderTemplate
from dispatch.templates.store_chat import StoreOrderAlertTemplate, StoreOrderUpdateTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationEvent.NEW_ORDER_CLIENT.value: NewOrderTemplate,
    NotificationEvent.NEW_ORDER_MANUAL.value: NewOrderTemplate,
    NotificationEvent.COURIER_ASSIGNMENT.value: CourierAssignmentTemplate,
    NotificationEvent.ORDER_REMINDER.value: OrderReminderTemplate,
    NotificationEvent.DAILY_DIGEST.value: DailyDigestTemplate,
    NotificationEvent.CHECKOUT_PROGRESS.value: CheckoutProgressTemplate,
    NotificationEvent.BUSINESS_CREATED.value: BusinessCreatedTemplate,
    NotificationEvent.BUSINESS_LOGIN.value: BusinessLoginTemplate,
    NotificationEvent.STORE_ORDER_ALERT.value: StoreOrderAlertTemplate,
    NotificationEvent.STORE_ORDER_UPDATE.value: StoreOrderUpdateTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification event string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls


def render(event: NotificationEvent, context: dict) -> dict:
    return get_template(event.value).render(context)
