"""Tests for point-in-polygon matching and coordinate parsing."""

import pytest

from dispatch.courier.geo import GeoPoint, is_inside, parse_latlong

SQUARE = [GeoPoint(0, 0), GeoPoint(0, 10), GeoPoint(10, 10), GeoPoint(10, 0)]

# L-shaped (concave): the notch (5..10, 5..10) is outside
L_SHAPE = [
    GeoPoint(0, 0),
    GeoPoint(0, 10),
    GeoPoint(5, 10),
    GeoPoint(5, 5),
    GeoPoint(10, 5),
    GeoPoint(10, 0),
]


class TestIsInside:
    @pytest.mark.parametrize("point", [GeoPoint(5, 5), GeoPoint(0.1, 0.1), GeoPoint(9.9, 9.9), GeoPoint(1, 9)])
    def test_points_strictly_inside(self, point):
        assert is_inside(point, SQUARE) is True

    @pytest.mark.parametrize("point", [GeoPoint(-1, 5), GeoPoint(11, 5), GeoPoint(5, -0.1), GeoPoint(5, 10.1)])
    def test_points_strictly_outside(self, point):
        assert is_inside(point, SQUARE) is False

    @pytest.mark.parametrize("point", [GeoPoint(0, 5), GeoPoint(10, 5), GeoPoint(5, 0), GeoPoint(5, 10)])
    def test_points_on_edges_are_inside(self, point):
        assert is_inside(point, SQUARE) is True

    @pytest.mark.parametrize("point", SQUARE)
    def test_vertices_are_inside(self, point):
        assert is_inside(point, SQUARE) is True

    def test_concave_polygon_notch_is_outside(self):
        assert is_inside(GeoPoint(7, 7), L_SHAPE) is False
        assert is_inside(GeoPoint(2, 7), L_SHAPE) is True
        assert is_inside(GeoPoint(7, 2), L_SHAPE) is True

    def test_polygon_order_does_not_matter(self):
        assert is_inside(GeoPoint(5, 5), list(reversed(SQUARE))) is True

    def test_fewer_than_three_vertices_contain_nothing(self):
        assert is_inside(GeoPoint(0, 0), [GeoPoint(0, 0), GeoPoint(1, 1)]) is False
        assert is_inside(GeoPoint(0, 0), []) is False

    def test_same_input_same_answer(self):
        results = {is_inside(GeoPoint(3.3, 4.4), SQUARE) for _ in range(20)}
        assert results == {True}


class TestParseLatLong:
    def test_valid_pair(self):
        assert parse_latlong("-2.19,-79.89") == GeoPoint(-2.19, -79.89)

    def test_whitespace_around_numbers(self):
        assert parse_latlong(" -2.19 , -79.89 ") == GeoPoint(-2.19, -79.89)

    @pytest.mark.parametrize(
        "value",
        [None, "", "pluscode:67G8+2X", "abc,def", "1.0", "1,2,3", "nan,1", "1,inf"],
    )
    def test_invalid_values_return_none(self, value):
        assert parse_latlong(value) is None
