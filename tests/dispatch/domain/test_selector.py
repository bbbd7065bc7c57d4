"""Tests for courier selection over zones and the fallback pool."""

from protean import current_domain

from dispatch.config import Settings, reset_settings
from dispatch.courier.courier import Courier
from dispatch.courier.geo import GeoPoint
from dispatch.courier import selector
from dispatch.courier.selector import auto_assign_courier, select_courier
from dispatch.courier.zone import CoverageZone
from dispatch.order.order import Order

DOWNTOWN = [(-2.20, -79.90), (-2.20, -79.88), (-2.18, -79.88), (-2.18, -79.90)]
NORTH = [(-2.10, -79.90), (-2.10, -79.88), (-2.05, -79.88), (-2.05, -79.90)]
INSIDE_DOWNTOWN = GeoPoint(-2.19, -79.89)
NOWHERE = GeoPoint(-1.0, -78.0)


def _courier(name, phone):
    return Courier(name=name, phone=phone, email=f"{name.lower()}@couriers.test")


def _zone(courier, vertices=DOWNTOWN, is_active=True, name="Downtown"):
    return CoverageZone.define(
        name,
        vertices,
        assigned_courier_id=str(courier.id) if courier else None,
        is_active=is_active,
    )


class TestZoneMatch:
    def test_zone_courier_selected_when_active(self):
        carla = _courier("Carla", "0990000001")
        selected = select_courier(INSIDE_DOWNTOWN, [carla], [_zone(carla)])
        assert selected == str(carla.id)

    def test_zone_match_never_falls_through_to_fallback(self):
        carla = _courier("Carla", "0990000001")
        backup = _courier("Beto", "0991111111")
        selected = select_courier(
            INSIDE_DOWNTOWN,
            [backup, carla],
            [_zone(carla)],
            fallback_phones=["0991111111"],
        )
        assert selected == str(carla.id)

    def test_first_matching_zone_wins(self):
        carla = _courier("Carla", "0990000001")
        diego = _courier("Diego", "0990000002")
        zones = [_zone(diego, name="Overlap"), _zone(carla)]
        assert select_courier(INSIDE_DOWNTOWN, [carla, diego], zones) == str(diego.id)

    def test_inactive_zone_is_ignored(self):
        carla = _courier("Carla", "0990000001")
        assert select_courier(INSIDE_DOWNTOWN, [carla], [_zone(carla, is_active=False)]) is None

    def test_zone_without_courier_is_ignored(self):
        carla = _courier("Carla", "0990000001")
        assert select_courier(INSIDE_DOWNTOWN, [carla], [_zone(None)]) is None

    def test_zone_courier_missing_from_pool_falls_back(self):
        carla = _courier("Carla", "0990000001")
        backup = _courier("Beto", "0991111111")
        selected = select_courier(
            INSIDE_DOWNTOWN,
            [backup],
            [_zone(carla)],
            fallback_phones=["0991111111"],
        )
        assert selected == str(backup.id)

    def test_point_outside_every_zone(self):
        carla = _courier("Carla", "0990000001")
        assert select_courier(NOWHERE, [carla], [_zone(carla), _zone(carla, vertices=NORTH)]) is None

    def test_ungeocoded_order_skips_zones(self):
        carla = _courier("Carla", "0990000001")
        assert select_courier(None, [carla], [_zone(carla)]) is None


class TestFallbackPool:
    def test_first_fallback_present_wins(self):
        first = _courier("Beto", "0991111111")
        second = _courier("Lola", "0992222222")
        selected = select_courier(NOWHERE, [second, first], [], fallback_phones=["0991111111", "0992222222"])
        assert selected == str(first.id)

    def test_skips_fallback_phones_not_in_pool(self):
        second = _courier("Lola", "0992222222")
        selected = select_courier(NOWHERE, [second], [], fallback_phones=["0991111111", "0992222222"])
        assert selected == str(second.id)

    def test_phones_compared_without_whitespace(self):
        courier = _courier("Beto", "099 111 1111")
        assert select_courier(NOWHERE, [courier], [], fallback_phones=[" 0991111111 "]) == str(courier.id)

    def test_returns_none_when_nobody_fits(self):
        courier = _courier("Beto", "0993333333")
        assert select_courier(NOWHERE, [courier], [], fallback_phones=["0991111111"]) is None

    def test_empty_pool(self):
        assert select_courier(INSIDE_DOWNTOWN, [], [], fallback_phones=["0991111111"]) is None


class TestDeterminism:
    def test_repeated_calls_return_same_courier(self):
        carla = _courier("Carla", "0990000001")
        diego = _courier("Diego", "0990000002")
        zones = [_zone(carla), _zone(diego, vertices=NORTH)]
        results = {select_courier(INSIDE_DOWNTOWN, [carla, diego], zones) for _ in range(10)}
        assert results == {str(carla.id)}


class _RecordingLogger:
    def __init__(self):
        self.warnings = []

    def info(self, event, **fields):
        pass

    def warning(self, event, **fields):
        self.warnings.append(event)


class TestAutoAssign:
    def _unlocated_order(self):
        return Order.place(business_id="b-1", customer={"name": "Ana"}, items_data=[], delivery={"type": "delivery"})

    def test_fallback_pool_comes_from_environment(self, monkeypatch):
        monkeypatch.setenv("FALLBACK_COURIER_PHONES", "0992222222,0993333333")
        reset_settings()
        beto = _courier("Beto", "0993333333")
        current_domain.repository_for(Courier).add(beto)

        assert auto_assign_courier(self._unlocated_order()) == str(beto.id)

    def test_empty_fallback_pool_is_reported(self, monkeypatch):
        current_domain.repository_for(Courier).add(_courier("Beto", "0993333333"))
        log = _RecordingLogger()
        monkeypatch.setattr(selector, "logger", log)

        assert auto_assign_courier(self._unlocated_order(), Settings()) is None
        assert any("FALLBACK_COURIER_PHONES" in event for event in log.warnings)
