"""Courier selection — coverage zones first, then the fallback pool.

``select_courier`` is pure and works on already-loaded couriers and zones.
``auto_assign_courier`` loads them from the repositories and never raises: a
failed read degrades to "no assignment" so the enclosing status change still
goes through.
"""

from collections.abc import Iterable, Sequence

import structlog
from protean.utils.globals import current_domain

from dispatch.config import Settings, get_settings
from dispatch.courier.courier import Courier
from dispatch.courier.geo import GeoPoint, is_inside, parse_latlong
from dispatch.courier.zone import CoverageZone

logger = structlog.get_logger(__name__)


def _normalize_phone(phone: str | None) -> str:
    return "".join((phone or "").split())


def select_courier(
    point: GeoPoint | None,
    active_couriers: Sequence[Courier],
    zones: Iterable[CoverageZone],
    fallback_phones: Sequence[str] = (),
) -> str | None:
    """Pick a courier id for a delivery point, or None when nobody fits.

    1. First active zone containing the point whose courier is in the pool.
    2. First fallback phone present in the pool, in configured order.
    3. None; a human dispatcher assigns manually.
    """
    pool = {str(courier.id): courier for courier in active_couriers}

    if point is not None:
        for zone in zones:
            if not zone.is_active or not zone.assigned_courier_id:
                continue
            if not is_inside(point, zone.vertices()):
                continue
            courier_id = str(zone.assigned_courier_id)
            if courier_id in pool:
                logger.info(
                    "Courier selected by coverage zone",
                    zone_id=str(zone.id),
                    zone_name=zone.name,
                    courier_id=courier_id,
                )
                return courier_id
            logger.info(
                "Zone courier is not in the active pool",
                zone_id=str(zone.id),
                courier_id=courier_id,
            )

    by_phone = {}
    for courier in active_couriers:
        phone = _normalize_phone(courier.phone)
        if phone and phone not in by_phone:
            by_phone[phone] = str(courier.id)

    for phone in fallback_phones:
        courier_id = by_phone.get(_normalize_phone(phone))
        if courier_id:
            logger.info("Courier selected from fallback pool", courier_id=courier_id)
            return courier_id

    return None


def auto_assign_courier(order, settings: Settings | None = None) -> str | None:
    """Select a courier for ``order`` from the stored couriers and zones."""
    settings = settings or get_settings()
    point = parse_latlong(order.delivery.latlong if order.delivery else None)

    try:
        couriers = current_domain.repository_for(Courier).find_active()
        zones = current_domain.repository_for(CoverageZone).find_active()
    except Exception as exc:
        logger.warning(
            "Could not load couriers or zones, leaving order unassigned",
            order_id=str(order.id),
            error=str(exc),
        )
        return None

    try:
        courier_id = select_courier(point, couriers, zones, settings.fallback_courier_phones)
    except Exception as exc:
        logger.warning("Courier selection failed", order_id=str(order.id), error=str(exc))
        return None

    if courier_id is None:
        logger.info(
            "No courier available for order",
            order_id=str(order.id),
            geocoded=point is not None,
        )
        if not settings.fallback_courier_phones:
            logger.warning("Fallback courier pool is empty, set FALLBACK_COURIER_PHONES", order_id=str(order.id))
    return courier_id
