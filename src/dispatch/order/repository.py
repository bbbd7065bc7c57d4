"""Repository for the Order aggregate."""

from dispatch.domain import dispatch
from dispatch.order.order import ACTIVE_STATUSES, Order
from dispatch.utils.query import fetch_all


@dispatch.repository(part_of=Order)
class OrderRepository:
    """Queries over the ``orders`` collection used by the periodic jobs.

    Only equality/``in`` lookups on top-level fields go to the store; the
    scheduled-timing filter is applied client-side on the loaded aggregates.
    """

    def find_scheduled_active(self) -> list[Order]:
        """Scheduled orders still on the kitchen side (pending, confirmed, preparing)."""
        statuses = sorted(status.value for status in ACTIVE_STATUSES)
        orders = fetch_all(self._dao, status__in=statuses)
        return [order for order in orders if order.is_scheduled]

    def find_scheduled_for_business(self, business_id: str) -> list[Order]:
        """Every scheduled order of one business, whatever its status."""
        orders = fetch_all(self._dao, business_id=business_id)
        return [order for order in orders if order.is_scheduled]
