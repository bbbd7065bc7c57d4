"""Order aggregate (CQRS) — an order as stored in the ``orders`` collection.

Orders are created by the checkout flow or an admin tool. This engine only
mutates a handful of fields on them: the status, the courier assignment and
acceptance, and the reminder flag.

State Machine:
    PENDING → CONFIRMED → PREPARING → READY → ON_WAY → DELIVERED
    (forward skips allowed; never backwards)
    {PENDING, CONFIRMED, PREPARING, READY, ON_WAY} → CANCELLED
    DELIVERED, CANCELLED are terminal
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from dispatch.documents import (
    CustomerFields,
    DeliveryFields,
    ItemFields,
    OrderDocument,
    PaymentFields,
    StoreMessageFields,
    TimingFields,
)
from dispatch.domain import dispatch
from dispatch.order.events import (
    CourierAssigned,
    CourierResponded,
    OrderPlaced,
    OrderReminderSent,
    OrderStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    ON_WAY = "on_way"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DeliveryType(Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class TimingType(Enum):
    IMMEDIATE = "immediate"
    SCHEDULED = "scheduled"


class CourierAcceptance(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


_FORWARD_PATH = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.ON_WAY,
    OrderStatus.DELIVERED,
]

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

# Orders still on the kitchen side; reminders only make sense for these
ACTIVE_STATUSES = {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PREPARING}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    if current in TERMINAL_STATUSES:
        return False
    if target == OrderStatus.CANCELLED:
        return True
    return _FORWARD_PATH.index(target) > _FORWARD_PATH.index(current)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@dispatch.value_object(part_of="Order")
class CustomerInfo:
    """Customer contact captured on the order at checkout time."""

    customer_id = Identifier()
    name = String(max_length=200)
    phone = String(max_length=50)
    email = String(max_length=254)


@dispatch.value_object(part_of="Order")
class DeliveryDetails:
    """How the order reaches the customer and who carries it.

    ``latlong`` is either ``"lat,lng"`` or a non-geocoded ``"pluscode:..."``
    place-code. ``rejected_by`` is a JSON list of courier ids.
    """

    type = String(choices=DeliveryType, default=DeliveryType.PICKUP.value)
    references = String(max_length=500)
    latlong = String(max_length=100)
    assigned_courier_id = Identifier()
    courier_acceptance_status = String(choices=CourierAcceptance)
    rejected_by = Text()


@dispatch.value_object(part_of="Order")
class OrderTiming:
    """Immediate orders carry no schedule; scheduled ones carry a date and a time."""

    type = String(choices=TimingType, default=TimingType.IMMEDIATE.value)
    scheduled_date = DateTime()
    scheduled_time = String(max_length=20)  # "HH:MM" or "HH:MM AM/PM"


@dispatch.value_object(part_of="Order")
class PaymentInfo:
    method = String(max_length=50)
    status = String(max_length=50)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@dispatch.entity(part_of="Order")
class OrderItem:
    product_id = Identifier()
    name = String(required=True, max_length=255)
    price = Float(default=0.0, min_value=0.0)
    quantity = Integer(default=1, min_value=1)
    variant = String(max_length=255)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@dispatch.aggregate
class Order:
    business_id = Identifier()
    customer = ValueObject(CustomerInfo)
    items = HasMany(OrderItem)
    delivery = ValueObject(DeliveryDetails)
    timing = ValueObject(OrderTiming)
    payment = ValueObject(PaymentInfo)
    subtotal = Float(default=0.0)
    delivery_cost = Float(default=0.0)
    total = Float(default=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    reminder_sent = Boolean(default=False)
    reminder_sent_at = DateTime()
    created_by_admin = Boolean(default=False)
    store_messages = Text()  # JSON list of {"chat_id", "message_id"} posted to the store chats
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        business_id: str | None,
        customer: dict,
        items_data: list[dict],
        delivery: dict | None = None,
        timing: dict | None = None,
        payment: dict | None = None,
        subtotal: float = 0.0,
        delivery_cost: float = 0.0,
        total: float | None = None,
        created_by_admin: bool = False,
    ):
        """Create a new order in PENDING status."""
        now = datetime.now(UTC)

        delivery = dict(delivery or {})
        if "rejected_by" in delivery and not isinstance(delivery["rejected_by"], str):
            delivery["rejected_by"] = json.dumps(list(delivery["rejected_by"]))
        timing = timing or {"type": TimingType.IMMEDIATE.value}
        if timing.get("type") == TimingType.SCHEDULED.value and not (
            timing.get("scheduled_date") and timing.get("scheduled_time")
        ):
            raise ValidationError({"timing": ["Scheduled orders need a scheduled date and time"]})

        if total is None:
            total = subtotal + delivery_cost

        order = cls(
            business_id=business_id,
            customer=CustomerInfo(
                customer_id=customer.get("id"),
                name=customer.get("name"),
                phone=customer.get("phone"),
                email=customer.get("email"),
            ),
            delivery=DeliveryDetails(**delivery),
            timing=OrderTiming(**timing),
            payment=PaymentInfo(**payment) if payment else None,
            subtotal=subtotal,
            delivery_cost=delivery_cost,
            total=total,
            status=OrderStatus.PENDING.value,
            reminder_sent=False,
            created_by_admin=created_by_admin,
            created_at=now,
            updated_at=now,
        )
        for item_data in items_data:
            order.add_items(OrderItem(**item_data))

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                business_id=business_id,
                customer_id=customer.get("id"),
                total=total,
                timing_type=order.timing.type,
                created_by_admin=created_by_admin,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def assigned_courier_id(self) -> str | None:
        if self.delivery is None or not self.delivery.assigned_courier_id:
            return None
        return str(self.delivery.assigned_courier_id)

    @property
    def is_delivery(self) -> bool:
        return self.delivery is not None and self.delivery.type == DeliveryType.DELIVERY.value

    @property
    def is_scheduled(self) -> bool:
        return self.timing is not None and self.timing.type == TimingType.SCHEDULED.value

    @property
    def is_terminal(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATUSES

    def rejected_courier_ids(self) -> list[str]:
        if self.delivery is None or not self.delivery.rejected_by:
            return []
        return json.loads(self.delivery.rejected_by)

    def store_message_refs(self) -> list[dict]:
        return json.loads(self.store_messages) if self.store_messages else []

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def change_status(self, target_status: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if not can_transition(current, target_status):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                status=target_status.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Courier assignment
    # -------------------------------------------------------------------
    def _replace_delivery(self, **changes) -> None:
        current = self.delivery.to_dict() if self.delivery is not None else {}
        current.update(changes)
        self.delivery = DeliveryDetails(**current)

    def assign_courier(self, courier_id: str) -> None:
        """Assign a courier; assigning the current courier again is a no-op."""
        if not courier_id:
            raise ValidationError({"assigned_courier_id": ["Courier id is required"]})

        previous = self.assigned_courier_id
        if previous == courier_id:
            return

        now = datetime.now(UTC)
        self._replace_delivery(
            assigned_courier_id=courier_id,
            courier_acceptance_status=CourierAcceptance.PENDING.value,
        )
        self.updated_at = now

        self.raise_(
            CourierAssigned(
                order_id=str(self.id),
                courier_id=courier_id,
                previous_courier_id=previous,
                assigned_at=now,
            )
        )

    def record_courier_response(self, accepted: bool) -> None:
        """Record the assigned courier's answer to an assignment link."""
        courier_id = self.assigned_courier_id
        now = datetime.now(UTC)

        if accepted:
            self._replace_delivery(courier_acceptance_status=CourierAcceptance.ACCEPTED.value)
            response = CourierAcceptance.ACCEPTED.value
        else:
            rejected = self.rejected_courier_ids()
            if courier_id and courier_id not in rejected:
                rejected.append(courier_id)
            self._replace_delivery(
                courier_acceptance_status=CourierAcceptance.REJECTED.value,
                rejected_by=json.dumps(rejected),
            )
            response = CourierAcceptance.REJECTED.value
        self.updated_at = now

        self.raise_(
            CourierResponded(
                order_id=str(self.id),
                courier_id=courier_id,
                response=response,
                responded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Reminder flag
    # -------------------------------------------------------------------
    def mark_reminder_sent(self, sent_at: datetime | None = None) -> None:
        """Flip ``reminder_sent`` to true. An order is reminded at most once."""
        if self.reminder_sent:
            raise ValidationError({"reminder_sent": ["Reminder was already sent for this order"]})

        now = sent_at or datetime.now(UTC)
        self.reminder_sent = True
        self.reminder_sent_at = now
        self.updated_at = now

        self.raise_(OrderReminderSent(order_id=str(self.id), sent_at=now))

    # -------------------------------------------------------------------
    # Store chat messages
    # -------------------------------------------------------------------
    def record_store_messages(self, messages: list[dict]) -> None:
        """Remember the chat messages announcing this order, so they can be edited later."""
        refs = [
            {"chat_id": str(message["chat_id"]), "message_id": str(message["message_id"])}
            for message in messages
            if message.get("chat_id") and message.get("message_id")
        ]
        self.store_messages = json.dumps(refs)
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Snapshot

    # -------------------------------------------------------------------
    def to_document(self) -> OrderDocument:
        """Snapshot the aggregate in the shape the change feed delivers."""
        customer = self.customer
        delivery = self.delivery
        timing = self.timing
        payment = self.payment

        return OrderDocument(
            id=str(self.id),
            business_id=str(self.business_id) if self.business_id else None,
            customer=CustomerFields(
                id=str(customer.customer_id) if customer and customer.customer_id else None,
                name=customer.name if customer else None,
                phone=customer.phone if customer else None,
                email=customer.email if customer else None,
            ),
            items=[
                ItemFields(
                    product_id=str(item.product_id) if item.product_id else None,
                    name=item.name,
                    price=item.price or 0.0,
                    quantity=item.quantity or 1,
                    variant=item.variant,
                )
                for item in self.items
            ],
            delivery=DeliveryFields(
                type=delivery.type if delivery and delivery.type else DeliveryType.PICKUP.value,
                references=delivery.references if delivery else None,
                latlong=delivery.latlong if delivery else None,
                assigned_courier_id=self.assigned_courier_id,
                courier_acceptance_status=delivery.courier_acceptance_status if delivery else None,
                rejected_by=self.rejected_courier_ids(),
            ),
            timing=TimingFields(
                type=timing.type if timing and timing.type else TimingType.IMMEDIATE.value,
                scheduled_date=timing.scheduled_date if timing else None,
                scheduled_time=timing.scheduled_time if timing else None,
            ),
            payment=PaymentFields(
                method=payment.method if payment else None,
                status=payment.status if payment else None,
            ),
            subtotal=self.subtotal or 0.0,
            delivery_cost=self.delivery_cost or 0.0,
            total=self.total or 0.0,
            status=self.status,
            reminder_sent=bool(self.reminder_sent),
            created_by_admin=bool(self.created_by_admin),
            store_messages=[StoreMessageFields(**ref) for ref in self.store_message_refs()],
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
