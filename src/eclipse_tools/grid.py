"""Regular lat/lon value grids (e.g. cloud fraction) and tile scoring along the path."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from eclipse_tools.constants import DEFAULT_GRID_RESOLUTION, DEFAULT_MAX_CLOUD, SCORE_WEIGHT
from eclipse_tools.elements import ECLIPSE_2026_AUG_12
from eclipse_tools.geometry.band import clip_tile_by_band
from eclipse_tools.models import BesselianElements, GeoPoint, TileBounds
from eclipse_tools.totality import calculate_totality

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class CloudGrid:
    """Immutable regular grid: values[i, j] is the cell centered on (lat[i], lon[j])."""

    lat: np.ndarray
    lon: np.ndarray
    values: np.ndarray
    resolution: float = DEFAULT_GRID_RESOLUTION

    def __post_init__(self) -> None:
        lat = np.asarray(self.lat, dtype=float)
        lon = np.asarray(self.lon, dtype=float)
        values = np.asarray(self.values, dtype=float)
        if lat.ndim != 1 or lon.ndim != 1 or lat.size == 0 or lon.size == 0:
            raise ValueError('Grid lat and lon must be non-empty 1-D arrays')
        if values.shape != (lat.size, lon.size):
            raise ValueError(
                f'Grid values shape {values.shape} does not match ({lat.size}, {lon.size})'
            )
        if not math.isfinite(self.resolution) or self.resolution <= 0:
            raise ValueError(f'Grid resolution must be positive, got {self.resolution!r}')
        for name, arr in (('lat', lat), ('lon', lon), ('values', values)):
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CloudGrid:
        """Build from {'lat': [...], 'lon': [...], 'cfc': [[...]], 'resolution': r}.

        Null cells become NaN; resolution defaults to 0.25 degrees.
        """
        try:
            rows = data['cfc']
            lat = data['lat']
            lon = data['lon']
        except KeyError as e:
            raise ValueError(f'Grid data missing {e.args[0]!r}') from e
        values = np.array(
            [[np.nan if v is None else v for v in row] for row in rows], dtype=float
        )
        return cls(
            lat=np.asarray(lat, dtype=float),
            lon=np.asarray(lon, dtype=float),
            values=values,
            resolution=float(data.get('resolution') or DEFAULT_GRID_RESOLUTION),
        )


@dataclass(frozen=True)
class TileScore:
    """One grid cell inside the path: its clipped bounds and viewing score."""

    row: int
    col: int
    center: GeoPoint
    value: float
    duration_seconds: float
    score: float
    bounds: TileBounds


def nearest_index(values: Sequence[float] | np.ndarray, target: float) -> int:
    """Index of the entry closest to target (first one on ties)."""
    arr = np.asarray(values, dtype=float)
    return int(np.argmin(np.abs(arr - target)))


def cell_bounds(grid: CloudGrid, row: int, col: int) -> TileBounds:
    """Bounds of one cell: its center plus/minus half the grid resolution."""
    half = grid.resolution / 2.0
    lat = float(grid.lat[row])
    lon = float(grid.lon[col])
    return TileBounds(north=lat + half, south=lat - half, east=lon + half, west=lon - half)


def tile_bounds(grid: CloudGrid, lat: float, lon: float) -> TileBounds:
    """Bounds of the cell whose center is nearest to (lat, lon)."""
    return cell_bounds(grid, nearest_index(grid.lat, lat), nearest_index(grid.lon, lon))


def _round_half_up(x: float) -> int:
    """Round to the nearest integer with halves toward +inf (12.5 -> 13, -0.5 -> 0)."""
    return math.floor(x + 0.5)


def value_at(grid: CloudGrid, lat: float, lon: float) -> int | None:
    """Rounded cell value at a location by index arithmetic from the first row/column.

    Both the cell indices and the value round halves up, so a point on a shared
    tile edge reads the cell with the higher index.

    Returns:
        Rounded value, or None outside the grid or for a missing (non-finite) cell.
    """
    i = _round_half_up((lat - float(grid.lat[0])) / grid.resolution)
    j = _round_half_up((lon - float(grid.lon[0])) / grid.resolution)
    rows, cols = grid.values.shape
    if i < 0 or j < 0 or i >= rows or j >= cols:
        return None
    value = float(grid.values[i, j])
    if not math.isfinite(value):
        return None
    return _round_half_up(value)


def score_tiles(
    grid: CloudGrid,
    polygon: Sequence[GeoPoint],
    elements: BesselianElements = ECLIPSE_2026_AUG_12,
    max_value: float = DEFAULT_MAX_CLOUD,
) -> list[TileScore]:
    """Score every grid cell overlapping the path by totality duration and clear sky.

    Cells are kept when their band-clipped bounds are non-empty. The score is
    duration_seconds * clear_percent * 2, with clear_percent = max_value - value
    clamped to [0, 100]; cells outside the umbra at their center score 0.

    Parameters:
        grid: Cloud-fraction grid (percent).
        polygon: Path polygon.
        elements: Besselian elements for the totality calculation.
        max_value: Value meaning fully overcast.

    Returns:
        TileScore records sorted by descending score.
    """
    tiles: list[TileScore] = []
    if len(polygon) < 3:
        return tiles
    rows, cols = grid.values.shape
    for i in range(rows):
        for j in range(cols):
            value = float(grid.values[i, j])
            if not math.isfinite(value):
                continue
            clipped = clip_tile_by_band(cell_bounds(grid, i, j), polygon)
            if clipped is None:
                continue
            lat = float(grid.lat[i])
            lon = float(grid.lon[j])
            result = calculate_totality(lat, lon, elements)
            duration = result.duration_seconds or 0.0
            clear = float(np.clip(max_value - value, 0.0, 100.0))
            tiles.append(
                TileScore(
                    row=i,
                    col=j,
                    center=GeoPoint(lat, lon),
                    value=value,
                    duration_seconds=duration,
                    score=duration * clear * SCORE_WEIGHT,
                    bounds=clipped,
                )
            )
    tiles.sort(key=lambda t: t.score, reverse=True)
    logger.debug('Scored %d of %d grid cells inside the path', len(tiles), rows * cols)
    return tiles
