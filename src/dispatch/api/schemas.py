"""Pydantic request/response models for the dispatch API.

Trigger payloads carry the typed document snapshots the event bus delivers.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from dispatch.documents import BusinessDocument, CheckoutProgressDocument, OrderDocument


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class OrderCreatedTrigger(BaseModel):
    order_id: str = Field(..., min_length=1)
    order: OrderDocument


class OrderUpdatedTrigger(BaseModel):
    order_id: str = Field(..., min_length=1)
    before: OrderDocument
    after: OrderDocument


class BusinessWrittenTrigger(BaseModel):
    business_id: str = Field(..., min_length=1)
    before: BusinessDocument | None = None
    after: BusinessDocument | None = None


class CheckoutProgressTrigger(BaseModel):
    progress: CheckoutProgressDocument


class JobTick(BaseModel):
    now: datetime | None = Field(None, description="Override the job clock (UTC when naive)")


class ChangeStatusRequest(BaseModel):
    status: str = Field(..., examples=["confirmed"])


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class TaskResult(BaseModel):
    name: str
    ok: bool
    error: str | None = None


class FanoutResponse(BaseModel):
    ok: bool
    tasks: list[TaskResult] = []


class DispatchResponse(BaseModel):
    handled: bool
    ok: bool = True
    failed: list[str] = []


class ScanResponse(BaseModel):
    window_start: datetime
    window_end: datetime
    examined: int
    reminded: list[str] = []
    failed: list[str] = []
    skipped: list[str] = []


class DigestResponse(BaseModel):
    date: str
    sent: list[str] = []
    skipped: list[str] = []
    failed: list[str] = []


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str
    assigned_courier_id: str | None = None
