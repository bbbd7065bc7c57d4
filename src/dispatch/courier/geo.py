"""Point-in-polygon matching for coverage zones.

Pure functions only: the same point and polygon always give the same answer,
which keeps logged assignment decisions reproducible.
"""

import math
from collections.abc import Sequence
from typing import NamedTuple

PLACE_CODE_PREFIX = "pluscode:"

_EPSILON = 1e-12


class GeoPoint(NamedTuple):
    lat: float
    lng: float


def parse_latlong(value: str | None) -> GeoPoint | None:
    """Parse a stored ``"lat,lng"`` string.

    Returns None for blanks, non-geocoded place-codes and anything that is not
    two finite numbers.
    """
    if not value or value.startswith(PLACE_CODE_PREFIX):
        return None

    parts = value.split(",")
    if len(parts) != 2:
        return None
    try:
        lat, lng = float(parts[0]), float(parts[1])
    except ValueError:
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return GeoPoint(lat, lng)


def _on_edge(point: GeoPoint, a: GeoPoint, b: GeoPoint) -> bool:
    cross = (b.lat - a.lat) * (point.lng - a.lng) - (b.lng - a.lng) * (point.lat - a.lat)
    if abs(cross) > _EPSILON:
        return False
    return (
        min(a.lat, b.lat) - _EPSILON <= point.lat <= max(a.lat, b.lat) + _EPSILON
        and min(a.lng, b.lng) - _EPSILON <= point.lng <= max(a.lng, b.lng) + _EPSILON
    )


def is_inside(point: GeoPoint, polygon: Sequence[GeoPoint]) -> bool:
    """Even-odd ray casting. Points on an edge or vertex count as inside.

    Polygons with fewer than three vertices contain nothing. Self-intersecting
    polygons are not validated; the even-odd result is returned as is.
    """
    count = len(polygon)
    if count < 3:
        return False

    inside = False
    j = count - 1
    for i in range(count):
        a, b = polygon[i], polygon[j]
        if _on_edge(point, a, b):
            return True
        if (a.lng > point.lng) != (b.lng > point.lng):
            crossing_lat = (b.lat - a.lat) * (point.lng - a.lng) / (b.lng - a.lng) + a.lat
            if point.lat < crossing_lat:
                inside = not inside
        j = i
    return inside
