"""FastAPI routes for the dispatch engine.

- ``/delivery-action``: the courier confirm/discard link target.
- ``/triggers/...``: document-change events delivered by the event bus.
- ``/jobs/...``: timer ticks for the periodic jobs.
- ``/orders/{order_id}/status``: the status change command.

Trigger and job endpoints always answer 200 with the per-task report; their
failures are logged, not surfaced.
"""

import structlog
from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse, RedirectResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from dispatch.action.service import apply_courier_action, dashboard_redirect_url
from dispatch.action.token import InvalidActionToken, decode_action_token
from dispatch.api.schemas import (
    BusinessWrittenTrigger,
    ChangeStatusRequest,
    CheckoutProgressTrigger,
    DigestResponse,
    DispatchResponse,
    FanoutResponse,
    JobTick,
    OrderCreatedTrigger,
    OrderStatusResponse,
    OrderUpdatedTrigger,
    ScanResponse,
    TaskResult,
)
from dispatch.jobs.digest import DailyDigestJob
from dispatch.jobs.reminders import ReminderScanner
from dispatch.notification.business_events import BusinessEventRouter
from dispatch.notification.checkout_events import CheckoutProgressHandler
from dispatch.notification.fanout import FanoutReport
from dispatch.notification.router import OrderEventRouter
from dispatch.order.order import Order
from dispatch.order.status import ChangeOrderStatus
from dispatch.utils.logging import bind_invocation

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["dispatch"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=CORS_HEADERS)


def _fanout_response(report: FanoutReport) -> FanoutResponse:
    return FanoutResponse(
        ok=report.ok,
        tasks=[TaskResult(name=o.name, ok=o.ok, error=o.error) for o in report.outcomes],
    )


def _dispatch_response(result) -> DispatchResponse:
    if result is None:
        return DispatchResponse(handled=False)
    return DispatchResponse(
        handled=True,
        ok=result.ok,
        failed=[outcome.address for outcome in result.failed],
    )


# ---------------------------------------------------------------------------
# Courier action links
# ---------------------------------------------------------------------------
@router.options("/delivery-action")
async def delivery_action_preflight() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)


@router.get("/delivery-action")
async def delivery_action(action: str | None = None, token: str | None = None):
    """Apply a courier's confirm/discard answer and send them to the dashboard."""
    if not action or not token:
        return _error(400, "Missing parameters")

    try:
        order_id, decoded_action = decode_action_token(token)
    except InvalidActionToken:
        return _error(400, "Invalid token")

    if decoded_action.value != action:
        return _error(400, "Invalid action")

    bind_invocation(trigger="delivery_action", order_id=order_id, action=action)
    try:
        apply_courier_action(order_id, decoded_action)
    except ObjectNotFoundError:
        return _error(404, "Order not found")
    except Exception:
        logger.exception("Courier action failed", order_id=order_id, action=action)
        return _error(500, "Error processing the action")

    return RedirectResponse(
        url=dashboard_redirect_url(order_id, decoded_action),
        status_code=302,
        headers=CORS_HEADERS,
    )


# ---------------------------------------------------------------------------
# Document-change triggers
# ---------------------------------------------------------------------------
@router.post("/triggers/orders/created", response_model=FanoutResponse)
async def order_created(body: OrderCreatedTrigger) -> FanoutResponse:
    bind_invocation(trigger="order_created", order_id=body.order_id)
    report = await OrderEventRouter().on_order_created(body.order_id, body.order)
    return _fanout_response(report)


@router.post("/triggers/orders/updated", response_model=FanoutResponse)
async def order_updated(body: OrderUpdatedTrigger) -> FanoutResponse:
    bind_invocation(trigger="order_updated", order_id=body.order_id)
    report = await OrderEventRouter().on_order_updated(body.order_id, body.before, body.after)
    return _fanout_response(report)


@router.post("/triggers/businesses/written", response_model=DispatchResponse)
async def business_written(body: BusinessWrittenTrigger) -> DispatchResponse:
    bind_invocation(trigger="business_written", business_id=body.business_id)
    result = await BusinessEventRouter().on_business_written(body.business_id, body.before, body.after)
    return _dispatch_response(result)


@router.post("/triggers/checkout-progress/created", response_model=DispatchResponse)
async def checkout_progress_created(body: CheckoutProgressTrigger) -> DispatchResponse:
    bind_invocation(trigger="checkout_progress_created", progress_id=body.progress.id)
    result = await CheckoutProgressHandler().on_checkout_started(body.progress)
    return _dispatch_response(result)


# ---------------------------------------------------------------------------
# Timer ticks
# ---------------------------------------------------------------------------
@router.post("/jobs/order-reminders", response_model=ScanResponse)
async def order_reminders(body: JobTick | None = None) -> ScanResponse:
    bind_invocation(trigger="order_reminders")
    report = await ReminderScanner().scan(now=body.now if body else None)
    return ScanResponse(
        window_start=report.window_start,
        window_end=report.window_end,
        examined=report.examined,
        reminded=report.reminded,
        failed=report.failed,
        skipped=report.skipped,
    )


@router.post("/jobs/daily-digest", response_model=DigestResponse)
async def daily_digest(body: JobTick | None = None) -> DigestResponse:
    bind_invocation(trigger="daily_digest")
    report = await DailyDigestJob().run(now=body.now if body else None)
    return DigestResponse(date=report.date, sent=report.sent, skipped=report.skipped, failed=report.failed)


# ---------------------------------------------------------------------------
# Status changes
# ---------------------------------------------------------------------------
@router.post("/orders/{order_id}/status", response_model=OrderStatusResponse)
async def change_order_status(order_id: str, body: ChangeStatusRequest):
    try:
        current_domain.process(ChangeOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    except ObjectNotFoundError:
        return JSONResponse(status_code=404, content={"error": "Order not found"})
    except ValidationError as exc:
        return JSONResponse(status_code=400, content={"error": exc.messages})

    order = current_domain.repository_for(Order).get(order_id)
    return OrderStatusResponse(
        order_id=order_id,
        status=order.status,
        assigned_courier_id=order.assigned_courier_id,
    )
