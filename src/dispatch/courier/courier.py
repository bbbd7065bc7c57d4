"""Courier aggregate — a delivery agent, as kept in ``deliveries``."""

from enum import Enum

from protean.fields import String

from dispatch.domain import dispatch
from dispatch.utils.query import fetch_all


class CourierStatus(Enum):
    # Stored values are the Spanish labels written by the admin tool
    ACTIVE = "activo"
    INACTIVE = "inactivo"


@dispatch.aggregate
class Courier:
    name = String(required=True, max_length=200)
    phone = String(max_length=50)
    email = String(max_length=254)
    status = String(choices=CourierStatus, default=CourierStatus.ACTIVE.value)

    @property
    def is_active(self) -> bool:
        return self.status == CourierStatus.ACTIVE.value


@dispatch.repository(part_of=Courier)
class CourierRepository:
    def find_active(self) -> list[Courier]:
        return fetch_all(self._dao, status=CourierStatus.ACTIVE.value)
