"""Solar eclipse totality and path-of-totality tools.

This package provides:
- Totality engine: local circumstances (in umbra, C2/C3, mid, duration) from
  Besselian elements
- Path tools: densification of the published path table and assembly of the
  path polygon
- Geometry: polygon clipping and fast latitude-band clipping of map tiles
- Grid scoring: ranking of cloud-fraction cells along the path

Time conversions use rms-julian; grids use numpy.
"""

from eclipse_tools.elements import ECLIPSE_2026_AUG_12, load_elements
from eclipse_tools.errors import InvalidInputError, OutsideValidityError
from eclipse_tools.geometry import clip_polygon, clip_tile_by_band, normalize_winding, signed_area
from eclipse_tools.models import BesselianElements, GeoPoint, PathSample, TileBounds, TotalityResult
from eclipse_tools.path import build_polygon, densify, load_path, path_polygon
from eclipse_tools.totality import calculate_totality

__all__ = [
    'ECLIPSE_2026_AUG_12',
    'BesselianElements',
    'GeoPoint',
    'InvalidInputError',
    'OutsideValidityError',
    'PathSample',
    'TileBounds',
    'TotalityResult',
    'build_polygon',
    'calculate_totality',
    'clip_polygon',
    'clip_tile_by_band',
    'densify',
    'load_elements',
    'load_path',
    'normalize_winding',
    'path_polygon',
    'signed_area',
]
