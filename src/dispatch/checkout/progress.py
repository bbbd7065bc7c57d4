"""CheckoutProgress aggregate — live checkout state of one client at one business.

Created or overwritten on every checkout step and removed when the checkout
completes or is abandoned. It is a monitoring signal only, never the
authoritative order state.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String

from dispatch.domain import dispatch


@dispatch.aggregate
class CheckoutProgress:
    client_id = Identifier()
    business_id = Identifier()
    step = String(max_length=50)
    created_at = DateTime(default=lambda: datetime.now(UTC))
    updated_at = DateTime(default=lambda: datetime.now(UTC))
