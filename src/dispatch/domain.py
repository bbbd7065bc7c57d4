"""Dispatch bounded context — Order Event Orchestration and Delivery Dispatch.

Reacts to order, business and checkout document changes, assigns couriers
through geofenced coverage zones, fires scheduled-order reminders and the
daily per-business digest, and serves the courier action links embedded in
outbound notifications.
"""

import structlog
from protean.domain import Domain

dispatch = Domain(name="dispatch")

logger = structlog.get_logger(__name__)
