"""OrderEventRouter — reacts to order document creates and updates.

Each trigger fans out its independent side effects concurrently through
``run_concurrently`` and returns the per-task ``FanoutReport``. Nothing here
raises to the caller: every task logs its own failure.

Status path:
    pending → confirmed → preparing → ready → on_way → delivered
    any non-terminal status → cancelled
"""

import structlog
from protean.utils.globals import current_domain

from dispatch.action.token import CourierAction, build_action_url
from dispatch.config import Settings, get_settings
from dispatch.documents import OrderDocument
from dispatch.notification.context import order_context
from dispatch.notification.dispatcher import NotificationDispatcher
from dispatch.notification.fanout import FanoutReport, run_concurrently
from dispatch.notification.feed import BusinessNotification, NotificationEvent
from dispatch.notification.recipients import (
    courier_name,
    is_enabled,
    load_business,
    new_order_event,
    resolve,
    with_fallback_inbox,
)
from dispatch.order.order import Order
from dispatch.templates import render

logger = structlog.get_logger(__name__)


class OrderEventRouter:
    def __init__(self, dispatcher: NotificationDispatcher | None = None, settings: Settings | None = None):
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.settings = settings or get_settings()

    # -------------------------------------------------------------------
    # Triggers
    # -------------------------------------------------------------------
    async def on_order_created(self, order_id: str, order: OrderDocument) -> FanoutReport:
        tasks = {
            "new_order_notification": self.notify_business_new_order(order_id, order),
            "business_feed": self.record_feed_entry(order_id, order),
            "store_chat_alert": self.alert_store_chats(order_id, order),
        }
        if order.assigned_courier_id:
            tasks["courier_assignment"] = self.notify_courier_assignment(order_id, order)

        report = await run_concurrently(tasks)
        logger.info("Order created handled", order_id=order_id, ok=report.ok)
        return report

    async def on_order_updated(self, order_id: str, before: OrderDocument, after: OrderDocument) -> FanoutReport:
        report = await run_concurrently(
            {
                "status_change": self.observe_status_change(order_id, before, after),
                "courier_assignment": self.on_assignment_change(order_id, before, after),
                "store_chat_update": self.refresh_store_chats(order_id, before, after),
            }
        )
        logger.info("Order updated handled", order_id=order_id, ok=report.ok)
        return report

    # -------------------------------------------------------------------
    # Fan-out tasks
    # -------------------------------------------------------------------
    async def notify_business_new_order(self, order_id: str, order: OrderDocument):
        business = load_business(order.business_id)
        event = new_order_event(order)
        if not is_enabled(event, business):
            logger.info(
                "New order notification disabled for this order source",
                order_id=order_id,
                business_id=order.business_id,
                notification_event=event.value,
            )
            return None

        recipients = with_fallback_inbox(resolve(event, order, business))
        content = render(event, order_context(order_id, order, business))
        return await self.dispatcher.dispatch(
            recipients,
            content["subject"],
            content["body"],
            sender=self.settings.orders_sender,
        )

    async def record_feed_entry(self, order_id: str, order: OrderDocument):
        if order.created_by_admin:
            logger.info("Admin-created order, skipping feed entry", order_id=order_id)
            return None
        if not order.business_id:
            logger.warning("Order has no business, cannot create feed entry", order_id=order_id)
            return None

        notification = BusinessNotification.for_new_order(order_id, order)
        current_domain.repository_for(BusinessNotification).add(notification)
        logger.info(
            "Business feed entry created",
            order_id=order_id,
            business_id=order.business_id,
            notification_id=str(notification.id),
        )
        return str(notification.id)

    async def notify_courier_assignment(self, order_id: str, order: OrderDocument):
        recipients = resolve(NotificationEvent.COURIER_ASSIGNMENT, order)
        if not recipients:
            return None

        business = load_business(order.business_id)
        context = order_context(order_id, order, business)
        context["confirm_url"] = build_action_url(self.settings.action_base_url, order_id, CourierAction.CONFIRM)
        context["discard_url"] = build_action_url(self.settings.action_base_url, order_id, CourierAction.DISCARD)
        content = render(NotificationEvent.COURIER_ASSIGNMENT, context)

        logger.info(
            "Notifying courier of assignment",
            order_id=order_id,
            courier_id=order.assigned_courier_id,
        )
        return await self.dispatcher.dispatch(
            recipients,
            content["subject"],
            content["body"],
            sender=self.settings.orders_sender,
        )

    async def observe_status_change(self, order_id: str, before: OrderDocument, after: OrderDocument):
        if before.status == after.status:
            return None
        logger.info(
            "Order status transition",
            order_id=order_id,
            previous_status=before.status,
            status=after.status,
        )
        return after.status

    async def on_assignment_change(self, order_id: str, before: OrderDocument, after: OrderDocument):
        # Compared on the documents themselves, so the same id written twice sends nothing
        if not after.assigned_courier_id or after.assigned_courier_id == before.assigned_courier_id:
            return None
        return await self.notify_courier_assignment(order_id, after)

    async def alert_store_chats(self, order_id: str, order: OrderDocument):
        if not order.business_id:
            logger.warning("Order has no business, cannot alert store chats", order_id=order_id)
            return None

        business = load_business(order.business_id)
        recipients = resolve(NotificationEvent.STORE_ORDER_ALERT, order, business)
        if not recipients:
            logger.info("No store chats to alert", order_id=order_id, business_id=order.business_id)
            return None

        content = render(NotificationEvent.STORE_ORDER_ALERT, order_context(order_id, order, business))
        report = await self.dispatcher.dispatch(recipients, content["subject"], content["body"])

        posted = [
            {"chat_id": outcome.address, "message_id": outcome.message_id}
            for outcome in report.outcomes
            if outcome.status == "sent" and outcome.message_id
        ]
        if posted:
            self._remember_store_messages(order_id, posted)
        return report

    async def refresh_store_chats(self, order_id: str, before: OrderDocument, after: OrderDocument):
        """Edit the store chat card once a courier accepts the order or it is cancelled."""
        accepted = (
            after.delivery.courier_acceptance_status == "accepted"
            and before.delivery.courier_acceptance_status != "accepted"
        )
        cancelled = after.status == "cancelled" and before.status != "cancelled"
        if not (accepted or cancelled):
            return None

        messages = [message.model_dump() for message in after.store_messages]
        if not messages:
            logger.info("Order has no store chat messages to update", order_id=order_id)
            return None

        business = load_business(after.business_id)
        context = order_context(order_id, after, business)
        context.update(
            status=after.status,
            assigned_courier_id=after.assigned_courier_id,
            courier_acceptance_status=after.delivery.courier_acceptance_status,
            courier_name=courier_name(after.assigned_courier_id),
        )
        content = render(NotificationEvent.STORE_ORDER_UPDATE, context)
        return await self.dispatcher.revise(messages, content["subject"], content["body"])

    def _remember_store_messages(self, order_id: str, messages: list[dict]) -> None:
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(order_id)
            order.record_store_messages(messages)
            repo.add(order)
        except Exception as exc:
            logger.warning("Could not save store chat messages on order", order_id=order_id, error=str(exc))
