"""
Geodetic helpers for hole geometry.
Distances are in yards and angles are compass degrees (0 = north, clockwise).
"""

import math
from typing import List, Sequence

from .models import LatLng, HoleTarget

EARTH_RADIUS_M = 6_371_000
METERS_TO_YARDS = 1.09361
YARDS_TO_METERS = 1 / METERS_TO_YARDS
PLAYS_LIKE_YARDS_PER_METER = 1.09


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def haversine_yards(a, b) -> int:
    """Great-circle distance between two points, rounded to the nearest yard."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    sin_lat = math.sin(d_lat / 2)
    sin_lng = math.sin(d_lng / 2)
    h = sin_lat * sin_lat + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * sin_lng * sin_lng
    meters = 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(1.0, h)))
    return round_half_up(meters * METERS_TO_YARDS)


def project_point(origin, bearing_deg: float, distance_yards: float) -> LatLng:
    """Project a point `distance_yards` from origin along a compass bearing."""
    if distance_yards == 0:
        return LatLng(origin.lat, origin.lng)

    d = distance_yards * YARDS_TO_METERS / EARTH_RADIUS_M
    brng = math.radians(bearing_deg)
    lat1 = math.radians(origin.lat)
    lng1 = math.radians(origin.lng)

    lat2 = math.asin(math.sin(lat1) * math.cos(d) + math.cos(lat1) * math.sin(d) * math.cos(brng))
    lng2 = lng1 + math.atan2(
        math.sin(brng) * math.sin(d) * math.cos(lat1),
        math.cos(d) - math.sin(lat1) * math.sin(lat2),
    )
    return LatLng(math.degrees(lat2), math.degrees(lng2))


def bearing_between(a, b) -> float:
    """Initial compass bearing in [0, 360) from a to b."""
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lng = math.radians(b.lng - a.lng)
    y = math.sin(d_lng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lng)
    return (math.degrees(math.atan2(y, x)) + 360) % 360


def normalize_angle(angle_deg: float) -> float:
    """Fold an angle difference into (-180, 180]."""
    d = angle_deg % 360
    if d > 180:
        d -= 360
    return d


def point_in_polygon(point, polygon: Sequence) -> bool:
    """
    Ray-casting test with x = lng, y = lat.
    Polygons with fewer than three vertices contain nothing; points exactly
    on an edge may land either way.
    """
    if not polygon or len(polygon) < 3:
        return False
    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i].lng, polygon[i].lat
        xj, yj = polygon[j].lng, polygon[j].lat
        if (yi > point.lat) != (yj > point.lat):
            x_cross = (xj - xi) * (point.lat - yi) / (yj - yi) + xi
            if point.lng < x_cross:
                inside = not inside
        j = i
    return inside


def polygon_centroid(polygon: Sequence) -> LatLng:
    """Vertex average; good enough for the small polygons on a golf hole."""
    n = len(polygon)
    return LatLng(sum(p.lat for p in polygon) / n, sum(p.lng for p in polygon) / n)


def ellipse_boundary(
    center,
    bearing_deg: float,
    semi_major_yards: float,
    semi_minor_yards: float,
    num_points: int = 36,
) -> List[LatLng]:
    """
    Points around an ellipse whose major axis runs along `bearing_deg`
    (carry direction) and whose minor axis is perpendicular (offline).

    The ring is implicitly closed: the last point connects back to the first.
    """
    points = []
    for i in range(num_points):
        theta = 2 * math.pi * i / num_points
        along = semi_major_yards * math.cos(theta)
        across = semi_minor_yards * math.sin(theta)
        radius = math.hypot(along, across)
        offset_deg = math.degrees(math.atan2(across, along))
        points.append(project_point(center, bearing_deg + offset_deg, radius))
    return points


def plays_like_yards(scorecard_yards: float, elevation_delta_meters: float) -> int:
    """Scorecard yardage adjusted ~1 yard per 3 feet of elevation change."""
    return int(scorecard_yards + round_half_up(elevation_delta_meters * PLAYS_LIKE_YARDS_PER_METER))


def compute_target_distances(tee, pin, targets: List[HoleTarget]) -> List[dict]:
    """From-tee and to-pin yardage for each waypoint."""
    return [
        {
            "index": t.index,
            "coordinate": t.coordinate,
            "from_tee": haversine_yards(tee, t.coordinate),
            "to_pin": haversine_yards(t.coordinate, pin),
        }
        for t in targets
    ]
