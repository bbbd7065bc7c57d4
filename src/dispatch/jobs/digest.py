"""DailyDigestJob — each business's scheduled orders for today, in one mail.

Orders are matched client-side on the stored scheduled date, against today's
bounds in the operating timezone. Every business is processed on its own:
one failing business never stops the rest. A business with no orders today
still gets its digest, with an empty-day body.
"""

from dataclasses import dataclass, field
from datetime import datetime

import structlog
from protean.utils.globals import current_domain

from dispatch.business.business import Business
from dispatch.config import Settings, get_settings
from dispatch.jobs.clock import as_utc, day_bounds, normalize_time, now_local
from dispatch.notification.dispatcher import NotificationDispatcher
from dispatch.notification.feed import NotificationEvent
from dispatch.notification.recipients import (
    UNKNOWN_CUSTOMER,
    business_name,
    resolve,
)
from dispatch.order.order import Order
from dispatch.templates import render
from dispatch.templates.formatting import items_synopsis

logger = structlog.get_logger(__name__)


@dataclass
class DigestReport:
    date: str
    sent: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class DailyDigestJob:
    def __init__(self, dispatcher: NotificationDispatcher | None = None, settings: Settings | None = None):
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.settings = settings or get_settings()

    async def run(self, now: datetime | None = None) -> DigestReport:
        local_now = now_local(self.settings.tz, now)
        start, end = day_bounds(local_now)
        report = DigestReport(date=local_now.strftime("%Y-%m-%d"))

        try:
            businesses = current_domain.repository_for(Business).find_visible()
        except Exception:
            logger.exception("Could not load businesses for the daily digest")
            return report

        for business in businesses:
            business_id = str(business.id)
            try:
                outcome = await self._send_digest(business, start, end, report.date)
            except Exception:
                logger.exception("Daily digest failed for business", business_id=business_id)
                report.failed.append(business_id)
                continue
            getattr(report, outcome).append(business_id)

        logger.info(
            "Daily digest finished",
            date=report.date,
            sent=len(report.sent),
            skipped=len(report.skipped),
            failed=len(report.failed),
        )
        return report

    def todays_orders(self, business_id: str, start: datetime, end: datetime) -> list[dict]:
        rows = []
        for order in current_domain.repository_for(Order).find_scheduled_for_business(business_id):
            scheduled_date = order.timing.scheduled_date
            if scheduled_date is None or not start <= as_utc(scheduled_date) < end:
                continue
            document = order.to_document()
            rows.append(
                {
                    "order_id": document.id,
                    "scheduled_time": normalize_time(document.timing.scheduled_time)
                    or document.timing.scheduled_time
                    or "00:00",
                    "customer_name": document.customer.name or UNKNOWN_CUSTOMER,
                    "items_synopsis": items_synopsis([item.model_dump() for item in document.items]),
                    "total": document.total,
                    "delivery_type": document.delivery.type,
                }
            )
        return sorted(rows, key=lambda row: row["scheduled_time"])

    async def _send_digest(self, business: Business, start: datetime, end: datetime, date: str) -> str:
        business_id = str(business.id)
        recipients = resolve(NotificationEvent.DAILY_DIGEST, business=business)
        if not recipients:
            logger.info("No digest recipients, skipping business", business_id=business_id)
            return "skipped"

        orders = self.todays_orders(business_id, start, end)

        content = render(
            NotificationEvent.DAILY_DIGEST,
            {
                "business_name": business_name(business),
                "date": date,
                "orders": orders,
                "revenue": sum(row["total"] for row in orders),
            },
        )
        result = await self.dispatcher.dispatch(
            recipients,
            content["subject"],
            content["body"],
            sender=self.settings.digest_sender,
        )
        return "sent" if result.ok else "failed"
