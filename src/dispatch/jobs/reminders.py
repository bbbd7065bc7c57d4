"""ReminderScanner — one reminder per scheduled order, shortly before it is due.

Each scan looks at the window ``[now + lead, now + lead + interval)`` in the
operating timezone. The window is exactly as wide as the scan interval, so
consecutive scans tile time with neither gaps nor overlap. The
``reminder_sent`` flag is set only after a successful send, which leaves a
failed order eligible for the next scan.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

import structlog
from protean.utils.globals import current_domain

from dispatch.config import Settings, get_settings
from dispatch.jobs.clock import as_utc, delivery_instant, now_local
from dispatch.notification.context import order_context
from dispatch.notification.dispatcher import NotificationDispatcher
from dispatch.notification.feed import NotificationEvent
from dispatch.notification.recipients import load_business, resolve, with_fallback_inbox
from dispatch.order.order import Order
from dispatch.templates import render

logger = structlog.get_logger(__name__)


@dataclass
class ScanReport:
    window_start: datetime
    window_end: datetime
    examined: int = 0
    reminded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


class ReminderScanner:
    def __init__(self, dispatcher: NotificationDispatcher | None = None, settings: Settings | None = None):
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.settings = settings or get_settings()

    def window(self, now: datetime | None = None) -> tuple[datetime, datetime]:
        local_now = now_local(self.settings.tz, now)
        start = local_now + timedelta(minutes=self.settings.reminder_lead_minutes)
        return start, start + timedelta(minutes=self.settings.reminder_scan_minutes)

    async def scan(self, now: datetime | None = None) -> ScanReport:
        window_start, window_end = self.window(now)
        report = ScanReport(window_start=window_start, window_end=window_end)
        repo = current_domain.repository_for(Order)

        try:
            orders = repo.find_scheduled_active()
        except Exception:
            logger.exception("Could not load scheduled orders")
            return report

        for order in orders:
            report.examined += 1
            order_id = str(order.id)
            if order.reminder_sent:
                continue

            try:
                due_at = delivery_instant(order.timing.scheduled_date, order.timing.scheduled_time, self.settings.tz)
                if due_at is None:
                    logger.warning(
                        "Unparsable schedule, skipping order",
                        order_id=order_id,
                        scheduled_date=str(order.timing.scheduled_date),
                        scheduled_time=order.timing.scheduled_time,
                    )
                    report.skipped.append(order_id)
                    continue

                if not window_start <= due_at < window_end:
                    continue

                if await self._remind(order):
                    order.mark_reminder_sent(as_utc(now) if now else None)
                    repo.add(order)
                    report.reminded.append(order_id)
                else:
                    report.failed.append(order_id)
            except Exception:
                logger.exception("Reminder processing failed", order_id=order_id)
                report.failed.append(order_id)

        logger.info(
            "Reminder scan finished",
            window_start=window_start.isoformat(),
            window_end=window_end.isoformat(),
            examined=report.examined,
            reminded=len(report.reminded),
            failed=len(report.failed),
            skipped=len(report.skipped),
        )
        return report

    async def _remind(self, order: Order) -> bool:
        document = order.to_document()
        business = load_business(document.business_id)
        recipients = with_fallback_inbox(resolve(NotificationEvent.ORDER_REMINDER, document, business))
        content = render(NotificationEvent.ORDER_REMINDER, order_context(document.id, document, business))

        result = await self.dispatcher.dispatch(
            recipients,
            content["subject"],
            content["body"],
            sender=self.settings.reminders_sender,
        )
        return result.attempted and result.ok
