"""Typed document snapshots exchanged with the change feed.

The store's change events carry raw documents whose optional fields may be
missing. These models give every field an explicit default so handlers never
check for keys at the call site. ``Order.to_document()`` builds the same shape
from a loaded aggregate.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class _Document(BaseModel):
    model_config = ConfigDict(extra="ignore")


class CustomerFields(_Document):
    id: str | None = None
    name: str | None = None
    phone: str | None = None
    email: str | None = None


class ItemFields(_Document):
    product_id: str | None = None
    name: str = ""
    price: float = 0.0
    quantity: int = 1
    variant: str | None = None


class DeliveryFields(_Document):
    type: str = "pickup"
    references: str | None = None
    latlong: str | None = None
    assigned_courier_id: str | None = None
    courier_acceptance_status: str | None = None
    rejected_by: list[str] = Field(default_factory=list)


class TimingFields(_Document):
    type: str = "immediate"
    scheduled_date: datetime | None = None
    scheduled_time: str | None = None


class PaymentFields(_Document):
    method: str | None = None
    status: str | None = None


class StoreMessageFields(_Document):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    chat_id: str
    message_id: str


class OrderDocument(_Document):
    id: str | None = None
    business_id: str | None = None
    customer: CustomerFields = Field(default_factory=CustomerFields)
    items: list[ItemFields] = Field(default_factory=list)
    delivery: DeliveryFields = Field(default_factory=DeliveryFields)
    timing: TimingFields = Field(default_factory=TimingFields)
    payment: PaymentFields = Field(default_factory=PaymentFields)
    subtotal: float = 0.0
    delivery_cost: float = 0.0
    total: float = 0.0
    status: str = "pending"
    reminder_sent: bool = False
    created_by_admin: bool = False
    store_messages: list[StoreMessageFields] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def assigned_courier_id(self) -> str | None:
        return self.delivery.assigned_courier_id or None

    @property
    def is_scheduled(self) -> bool:
        return self.timing.type == "scheduled"


class BusinessDocument(_Document):
    id: str | None = None
    name: str | None = None
    email: str | None = None
    login_source: str | None = None
    last_login_at: datetime | None = None
    last_registration_at: datetime | None = None


class CheckoutProgressDocument(_Document):
    id: str | None = None
    client_id: str | None = None
    business_id: str | None = None
    step: str | None = None
