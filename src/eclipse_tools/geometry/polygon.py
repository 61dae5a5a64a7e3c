"""Planar polygon operations in (lon=x, lat=y) degrees.

Polygons are tuples of GeoPoint, implicitly closed. A negative signed area
means clockwise winding, the orientation used throughout the package.
"""

from __future__ import annotations

from typing import Sequence

from eclipse_tools.constants import INTERSECTION_EPSILON
from eclipse_tools.models import GeoPoint, Polygon, TileBounds


def signed_area(polygon: Sequence[GeoPoint]) -> float:
    """Shoelace area with lon as x and lat as y; negative for clockwise winding."""
    n = len(polygon)
    area = 0.0
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        area += a.lon * b.lat - b.lon * a.lat
    return area / 2.0


def normalize_winding(polygon: Sequence[GeoPoint]) -> Polygon:
    """Return the polygon in clockwise order (reversed when signed area >= 0)."""
    if signed_area(polygon) < 0:
        return tuple(polygon)
    return tuple(reversed(polygon))


def _line_intersection(p1: GeoPoint, p2: GeoPoint, a: GeoPoint, b: GeoPoint) -> GeoPoint:
    """Intersection of line p1-p2 with line a-b; p2 when the lines are near parallel."""
    x1, y1 = p1.lon, p1.lat
    x2, y2 = p2.lon, p2.lat
    x3, y3 = a.lon, a.lat
    x4, y4 = b.lon, b.lat
    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < INTERSECTION_EPSILON:
        return p2
    det12 = x1 * y2 - y1 * x2
    det34 = x3 * y4 - y3 * x4
    px = (det12 * (x3 - x4) - (x1 - x2) * det34) / denom
    py = (det12 * (y3 - y4) - (y1 - y2) * det34) / denom
    return GeoPoint(lat=py, lon=px)


def clip_polygon(subject: Sequence[GeoPoint], clip: Sequence[GeoPoint]) -> Polygon:
    """Sutherland-Hodgman intersection of subject with a convex clip polygon.

    Either polygon may be in either winding order: the inside half-plane of
    each clip edge is taken relative to the clip polygon's own orientation.
    The clip polygon must be convex; this is not checked.

    Parameters:
        subject: Polygon to clip (may be concave).
        clip: Convex clipping polygon.

    Returns:
        The clipped polygon, or an empty tuple when either input has fewer
        than 3 vertices or nothing remains.
    """
    if len(subject) < 3 or len(clip) < 3:
        return ()
    clip_is_clockwise = signed_area(clip) < 0

    def inside(p: GeoPoint, a: GeoPoint, b: GeoPoint) -> bool:
        cross = (b.lon - a.lon) * (p.lat - a.lat) - (b.lat - a.lat) * (p.lon - a.lon)
        return cross <= 0 if clip_is_clockwise else cross >= 0

    output: list[GeoPoint] = list(subject)
    for i in range(len(clip)):
        if not output:
            break
        a = clip[i]
        b = clip[(i + 1) % len(clip)]
        source = output
        output = []
        for j in range(len(source)):
            p = source[j]
            q = source[(j + 1) % len(source)]
            p_in = inside(p, a, b)
            q_in = inside(q, a, b)
            if p_in and q_in:
                output.append(q)
            elif p_in:
                output.append(_line_intersection(p, q, a, b))
            elif q_in:
                output.append(_line_intersection(p, q, a, b))
                output.append(q)
    return tuple(output)


def contains_point(polygon: Sequence[GeoPoint], lat: float, lon: float) -> bool:
    """Even-odd ray-casting test for a point inside a polygon (boundary is unspecified)."""
    n = len(polygon)
    if n < 3:
        return False
    inside = False
    j = n - 1
    for i in range(n):
        a = polygon[i]
        b = polygon[j]
        if (a.lat > lat) != (b.lat > lat):
            cross_lon = a.lon + (lat - a.lat) * (b.lon - a.lon) / (b.lat - a.lat)
            if lon < cross_lon:
                inside = not inside
        j = i
    return inside


def polygon_bounds(polygon: Sequence[GeoPoint]) -> TileBounds | None:
    """Bounding box of a polygon, or None when it has no vertices."""
    if not polygon:
        return None
    lats = [p.lat for p in polygon]
    lons = [p.lon for p in polygon]
    return TileBounds(north=max(lats), south=min(lats), east=max(lons), west=min(lons))


def tile_polygon(bounds: TileBounds) -> Polygon:
    """Clockwise rectangle for a tile: NW, NE, SE, SW."""
    return (
        GeoPoint(bounds.north, bounds.west),
        GeoPoint(bounds.north, bounds.east),
        GeoPoint(bounds.south, bounds.east),
        GeoPoint(bounds.south, bounds.west),
    )


def coverage_fraction(polygon: Sequence[GeoPoint], bounds: TileBounds) -> float:
    """Fraction of a tile's area covered by a polygon, by exact clipping.

    The tile is the convex clip polygon, so the subject polygon may be concave.
    """
    rect = tile_polygon(bounds)
    rect_area = abs(signed_area(rect))
    if rect_area == 0:
        return 0.0
    return abs(signed_area(clip_polygon(polygon, rect))) / rect_area
