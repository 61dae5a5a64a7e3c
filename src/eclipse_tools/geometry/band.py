"""Latitude bands of a path polygon and fast tile clipping by band."""

from __future__ import annotations

from typing import Sequence

from eclipse_tools.constants import BAND_EPSILON
from eclipse_tools.models import Band, GeoPoint, TileBounds


def band_at_longitude(
    polygon: Sequence[GeoPoint],
    lon: float,
    reference_lat: float | None = None,
) -> Band | None:
    """Latitude interval of the polygon along one meridian.

    Every edge spanning lon contributes the latitude interpolated at lon; a
    vertical edge lying on lon contributes both endpoints. When the meridian
    crosses the polygon more than once, the pair of consecutive crossings
    bracketing reference_lat is returned; otherwise (or when no pair brackets
    it) the outermost crossings are returned.

    Parameters:
        polygon: Closed polygon.
        lon: Query longitude in degrees.
        reference_lat: Latitude used to pick the band in multi-crossing cases.

    Returns:
        Band, or None when fewer than two crossings exist.
    """
    crossings: list[float] = []
    n = len(polygon)
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        if abs(a.lon - b.lon) < BAND_EPSILON:
            if abs(lon - a.lon) < BAND_EPSILON:
                crossings.extend((a.lat, b.lat))
            continue
        if min(a.lon, b.lon) - BAND_EPSILON <= lon <= max(a.lon, b.lon) + BAND_EPSILON:
            frac = (lon - a.lon) / (b.lon - a.lon)
            crossings.append(a.lat + (b.lat - a.lat) * frac)

    if len(crossings) < 2:
        return None
    crossings.sort()

    if reference_lat is not None:
        for south_lat, north_lat in zip(crossings, crossings[1:]):
            if south_lat <= reference_lat <= north_lat:
                return Band(north_lat=north_lat, south_lat=south_lat)

    return Band(north_lat=crossings[-1], south_lat=crossings[0])


def clip_tile_by_band(bounds: TileBounds, polygon: Sequence[GeoPoint]) -> TileBounds | None:
    """Trim a tile's north/south edges to the polygon's band at its east and west edges.

    Approximates exact clipping when the path does not reverse direction within
    one tile width. East and west are unchanged.

    Parameters:
        bounds: Tile rectangle.
        polygon: Path polygon.

    Returns:
        Clipped bounds, or None when the tile edges miss the polygon or the
        remaining latitude interval is empty.
    """
    center_lat = (bounds.north + bounds.south) / 2.0
    band_west = band_at_longitude(polygon, bounds.west, center_lat)
    band_east = band_at_longitude(polygon, bounds.east, center_lat)
    if band_west is None or band_east is None:
        return None

    north = min(bounds.north, band_west.north_lat, band_east.north_lat)
    south = max(bounds.south, band_west.south_lat, band_east.south_lat)
    if south >= north:
        return None
    return TileBounds(north=north, south=south, east=bounds.east, west=bounds.west)
