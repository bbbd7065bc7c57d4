"""CoverageZone aggregate — a neighbourhood polygon owned by one courier.

Vertices are stored as a JSON list of ``{"lat": ..., "lng": ...}`` objects.
The polygon is implicitly closed (the last vertex connects to the first).
"""

import json

from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text

from dispatch.courier.geo import GeoPoint
from dispatch.domain import dispatch
from dispatch.utils.query import fetch_all


@dispatch.aggregate
class CoverageZone:
    name = String(max_length=200)
    polygon = Text(required=True)
    assigned_courier_id = Identifier()
    is_active = Boolean(default=True)

    @classmethod
    def define(cls, name, vertices, assigned_courier_id=None, is_active=True):
        """Create a zone from a list of ``{"lat", "lng"}`` dicts or ``(lat, lng)`` pairs."""
        points = [_as_vertex(vertex) for vertex in vertices]
        if len(points) < 3:
            raise ValidationError({"polygon": ["A coverage zone needs at least 3 vertices"]})
        return cls(
            name=name,
            polygon=json.dumps(points),
            assigned_courier_id=assigned_courier_id,
            is_active=is_active,
        )

    def vertices(self) -> list[GeoPoint]:
        return [GeoPoint(float(v["lat"]), float(v["lng"])) for v in json.loads(self.polygon or "[]")]


def _as_vertex(vertex) -> dict:
    if isinstance(vertex, dict):
        return {"lat": float(vertex["lat"]), "lng": float(vertex["lng"])}
    lat, lng = vertex
    return {"lat": float(lat), "lng": float(lng)}


@dispatch.repository(part_of=CoverageZone)
class CoverageZoneRepository:
    def find_active(self) -> list[CoverageZone]:
        return fetch_all(self._dao, is_active=True)
