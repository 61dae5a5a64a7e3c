"""Eclipse path samples: densification, polygon assembly, centerline queries, loading."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Sequence

from eclipse_tools.angle_utils import parse_coordinate, parse_duration
from eclipse_tools.constants import EARTH_MEAN_RADIUS_KM
from eclipse_tools.elements import load_document
from eclipse_tools.geometry.polygon import normalize_winding
from eclipse_tools.models import GeoPoint, PathSample, Polygon

logger = logging.getLogger(__name__)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two points on a spherical Earth (R = 6371 km)."""
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    return EARTH_MEAN_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def interpolate_point(a: GeoPoint, b: GeoPoint, fraction: float) -> GeoPoint:
    """Linear interpolation in lat/lon between a (fraction 0) and b (fraction 1)."""
    return GeoPoint(
        lat=a.lat + (b.lat - a.lat) * fraction,
        lon=a.lon + (b.lon - a.lon) * fraction,
    )


def _interpolate_limit(
    a: GeoPoint | None, b: GeoPoint | None, fraction: float
) -> GeoPoint | None:
    if a is None or b is None:
        return None
    return interpolate_point(a, b, fraction)


def densify(samples: Sequence[PathSample], max_step_km: float) -> tuple[PathSample, ...]:
    """Insert interpolated samples so centerline steps are at most max_step_km.

    Each segment is split into max(1, ceil(distance / max_step_km)) steps,
    where distance is the haversine length between the two central points.
    A limit is interpolated only where both segment ends define it. The last
    input sample is appended unchanged.

    Parameters:
        samples: Ordered path samples.
        max_step_km: Maximum centerline step in kilometers.

    Returns:
        Densified samples; inputs with fewer than 2 samples are returned as-is.

    Raises:
        ValueError: If max_step_km is not a positive finite number.
    """
    if not math.isfinite(max_step_km) or max_step_km <= 0:
        raise ValueError(f'max_step_km must be positive, got {max_step_km!r}')
    if len(samples) < 2:
        return tuple(samples)

    out: list[PathSample] = []
    for current, nxt in zip(samples, samples[1:]):
        distance = haversine_km(
            current.central.lat, current.central.lon, nxt.central.lat, nxt.central.lon
        )
        steps = max(1, math.ceil(distance / max_step_km))
        for step in range(steps):
            frac = step / steps
            out.append(
                PathSample(
                    central=interpolate_point(current.central, nxt.central, frac),
                    northern=_interpolate_limit(current.northern, nxt.northern, frac),
                    southern=_interpolate_limit(current.southern, nxt.southern, frac),
                    time=current.time,
                )
            )
    out.append(samples[-1])
    logger.debug(
        'Densified %d path samples to %d (step %.1f km)', len(samples), len(out), max_step_km
    )
    return tuple(out)


def build_polygon(samples: Sequence[PathSample]) -> Polygon:
    """Assemble the path outline: northern limits forward, then southern limits reversed.

    Samples missing either limit are dropped first, so the outline only spans
    the stretch where both limits are defined. The winding is not normalized.

    Parameters:
        samples: Path samples (usually densified).

    Returns:
        Polygon vertices; fewer than 3 means there is no usable outline.
    """
    northern: list[GeoPoint] = []
    southern: list[GeoPoint] = []
    for s in samples:
        if s.northern is None or s.southern is None:
            continue
        northern.append(s.northern)
        southern.append(s.southern)
    return tuple(northern) + tuple(reversed(southern))


def path_polygon(samples: Sequence[PathSample], max_step_km: float) -> Polygon:
    """Densify, assemble, and normalize the path outline to clockwise winding."""
    return normalize_winding(build_polygon(densify(samples, max_step_km)))


def centerline(samples: Sequence[PathSample]) -> tuple[GeoPoint, ...]:
    """Central points of the samples, in order."""
    return tuple(s.central for s in samples)


def closest_centerline_point(
    lat: float, lon: float, line: Sequence[GeoPoint]
) -> tuple[GeoPoint, float] | None:
    """Nearest centerline vertex to a location.

    Returns:
        (point, distance in km), or None for an empty centerline.
    """
    best: GeoPoint | None = None
    best_km = math.inf
    for point in line:
        dist = haversine_km(lat, lon, point.lat, point.lon)
        if dist < best_km:
            best, best_km = point, dist
    if best is None:
        return None
    return (best, best_km)


def closest_centerline_distance(lat: float, lon: float, line: Sequence[GeoPoint]) -> float:
    """Distance in km to the nearest centerline vertex (inf when the centerline is empty)."""
    found = closest_centerline_point(lat, lon, line)
    return math.inf if found is None else found[1]


def filter_by_longitude(
    samples: Sequence[PathSample], min_lon: float, max_lon: float
) -> tuple[PathSample, ...]:
    """Samples with any defined point (northern, central, southern) in [min_lon, max_lon]."""
    out = []
    for s in samples:
        points = [p for p in (s.northern, s.central, s.southern) if p is not None]
        if any(min_lon <= p.lon <= max_lon for p in points):
            out.append(s)
    return tuple(out)


def _coordinate(raw: Any) -> float | None:
    """Decimal degrees, or a table string like "42 54.5N" ("-" means undefined)."""
    if raw is None:
        return None
    if isinstance(raw, str):
        return parse_coordinate(raw)
    return float(raw)


def _point_from_dict(raw: Any) -> GeoPoint | None:
    """GeoPoint from {'lat', 'lon'}; None when absent or either coordinate is undefined."""
    if not isinstance(raw, dict):
        return None
    lat = _coordinate(raw.get('lat'))
    lon = _coordinate(raw.get('lon'))
    if lat is None or lon is None:
        return None
    return GeoPoint(lat=lat, lon=lon)


def _optional(raw: Any) -> float | None:
    return None if raw is None else float(raw)


def _duration(raw: Any) -> float | None:
    """Seconds from a number or a table string like "01m34.3s"; "-" means undefined."""
    if raw is None:
        return None
    if isinstance(raw, str):
        text = raw.strip()
        if not text or text == '-':
            return None
        seconds = parse_duration(text)
        if seconds is None:
            raise ValueError(f'Invalid duration {raw!r}')
        return seconds
    return float(raw)


def sample_from_dict(entry: dict[str, Any]) -> PathSample | None:
    """Build a PathSample from one path-table row; None when the central point is missing.

    Raises:
        ValueError: If a numeric field cannot be parsed.
    """
    central = _point_from_dict(entry.get('central'))
    if central is None:
        return None
    return PathSample(
        central=central,
        northern=_point_from_dict(entry.get('northern')),
        southern=_point_from_dict(entry.get('southern')),
        time=entry.get('time'),
        ratio=_optional(entry.get('ratio')),
        sun_altitude=_optional(entry.get('sunAltitude')),
        sun_azimuth=_optional(entry.get('sunAzimuth')),
        path_width_km=_optional(entry.get('pathWidth')),
        duration_s=_duration(entry.get('duration')),
        is_limit=bool(entry.get('isLimit', False)),
    )


def samples_from_list(rows: Sequence[Any]) -> tuple[PathSample, ...]:
    """Convert path-table rows, skipping (with a warning) rows that are malformed.

    A row is skipped when it has no central point or a numeric field that
    cannot be parsed.
    """
    samples = []
    for index, row in enumerate(rows):
        try:
            sample = sample_from_dict(row) if isinstance(row, dict) else None
        except (TypeError, ValueError) as e:
            logger.warning('Skipping path row %d: %s', index, e)
            continue
        if sample is None:
            logger.warning('Skipping path row %d: no central point', index)
            continue
        samples.append(sample)
    return tuple(samples)


def load_path(source: int | str | Path) -> tuple[PathSample, ...]:
    """Load the path samples of an eclipse data file.

    Parameters:
        source: Eclipse year (resolved under ECLIPSE_DATA_PATH) or a .json path.

    Returns:
        Path samples in file order.

    Raises:
        ValueError: If the file has no path list.
    """
    path, data = load_document(source)
    rows = data.get('path')
    if not isinstance(rows, list) or not rows:
        raise ValueError(f'No eclipse path found in {path}')
    return samples_from_list(rows)
