"""Planar polygon clipping and latitude-band tile clipping for path footprints."""

from eclipse_tools.geometry.band import band_at_longitude, clip_tile_by_band
from eclipse_tools.geometry.polygon import (
    clip_polygon,
    contains_point,
    coverage_fraction,
    normalize_winding,
    polygon_bounds,
    signed_area,
    tile_polygon,
)

__all__ = [
    'band_at_longitude',
    'clip_polygon',
    'clip_tile_by_band',
    'contains_point',
    'coverage_fraction',
    'normalize_winding',
    'polygon_bounds',
    'signed_area',
    'tile_polygon',
]
